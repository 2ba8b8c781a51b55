"""Title and excerpt resolution.

Title priority (total, never empty):
  1. ``frontmatter.title`` when non-empty
  2. the parser's format-native title (first top-level heading)
  3. a title derived from the filename

Excerpt priority:
  1. ``frontmatter.excerpt`` when non-empty
  2. the parser-computed excerpt
  3. None
"""

from __future__ import annotations

import re
from pathlib import Path

from pagesmith.domain.content import ParsedContent

FALLBACK_TITLE = "Untitled"

_WORD_SEPARATORS = re.compile(r"[\s_\-/\\]+")
_BLANK_LINES = re.compile(r"\n\s*\n")


def filename_title(path: Path) -> str:
    """Humanize a file name: ``my-post.md`` -> ``My Post``.

    The extension is dropped; underscores, hyphens and path separators
    become spaces; each word gets an upper-cased first letter (the rest of
    the word is kept, so ``README`` stays ``README``).
    """
    stem = path.stem if path.suffix else path.name
    words = [w for w in _WORD_SEPARATORS.split(stem) if w]
    if not words:
        return FALLBACK_TITLE
    return " ".join(w[:1].upper() + w[1:] for w in words)


def resolve_title(parsed: ParsedContent, path: Path) -> str:
    """Apply the title priority rules to one parsed document."""
    fm_title = (parsed.frontmatter.title or "").strip()
    if fm_title:
        return fm_title
    native = parsed.title.strip()
    if native:
        return native
    return filename_title(path)


def resolve_excerpt(parsed: ParsedContent) -> str | None:
    """Apply the excerpt priority rules to one parsed document."""
    if parsed.frontmatter.excerpt and parsed.frontmatter.excerpt.strip():
        return parsed.frontmatter.excerpt
    if parsed.excerpt and parsed.excerpt.strip():
        return parsed.excerpt
    return None


# ---------------------------------------------------------------------------
# Fallbacks for bodies without a structural tree
# ---------------------------------------------------------------------------


def first_line(text: str) -> str | None:
    """First non-blank line, stripped."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None


def first_block(text: str) -> str | None:
    """First blank-line-separated block, stripped."""
    for block in _BLANK_LINES.split(text.replace("\r\n", "\n")):
        if block.strip():
            return block.strip()
    return None


def looks_like_html(text: str) -> bool:
    """Heuristic: starts with a tag and contains a closing or self-closing tag."""
    stripped = text.strip()
    return stripped.startswith("<") and ("</" in stripped or "/>" in stripped)
