"""The content parser capability.

A parser turns one pre-read document into :class:`ParsedContent`. It must
not touch the filesystem, must not rely on process-wide state, and must
leave ``title`` empty when the format has no native title so that title
resolution can decide.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pagesmith.domain.content import ParsedContent


@runtime_checkable
class ContentParser(Protocol):
    """Structural type every format implementation satisfies."""

    name: str

    def parse(self, content: str, path: Path) -> ParsedContent:
        """Decode *content* (read from *path*).

        Raises:
            ParseError: If the document cannot be decoded at all.
        """
        ...
