"""Filesystem operations for the content tree.

Pure parsing lives in :mod:`pagesmith.domain` and :mod:`pagesmith.plugins`
(correct dependency direction: infrastructure -> domain). This module
handles file discovery and reads.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pagesmith.domain.content import SourceDocument

# Directory names skipped when discovering content files.
DEFAULT_EXCLUDES = frozenset({".git", ".hg", ".svn", "node_modules", "__pycache__"})


def find_source_files(
    root: Path,
    *,
    exclude: Iterable[str] = DEFAULT_EXCLUDES,
) -> list[Path]:
    """Discover every candidate file under *root*.

    Hidden files, anything inside a hidden directory, and any path
    crossing an excluded directory name are skipped. Files of every
    extension are returned so that unsupported formats can be reported. The result is sorted for deterministic runs.
    """
    if not root.is_dir():
        return []

    skip = frozenset(exclude)
    results: list[Path] = []
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        relative = path.relative_to(root)
        if any(part in skip for part in relative.parts[:-1]):
            continue
        if any(part.startswith(".") for part in relative.parts):
            continue
        results.append(path)
    return sorted(results)


def read_source_document(path: Path, root: Path) -> SourceDocument:
    """Read *path* as UTF-8 text.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    text = path.read_text(encoding="utf-8")
    return SourceDocument(path=path, relative_path=path.relative_to(root), text=text)
