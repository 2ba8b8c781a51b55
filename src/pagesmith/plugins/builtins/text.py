"""Plain text parser: no frontmatter, body passed through unchanged."""

from __future__ import annotations

from pathlib import Path

from pagesmith.domain.content import ParsedContent
from pagesmith.domain.summary import first_line


class TextParser:
    name = "text"
    extensions: tuple[str, ...] = ("txt",)

    def parse(self, content: str, path: Path) -> ParsedContent:
        return ParsedContent(content=content, excerpt=first_line(content))
