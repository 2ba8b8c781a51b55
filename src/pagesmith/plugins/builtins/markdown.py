"""Markdown parser: frontmatter, AST-derived title/excerpt, HTML body."""

from __future__ import annotations

from pathlib import Path

from pagesmith.domain.content import DocumentIssue, ParsedContent
from pagesmith.domain.errors import MALFORMED_FRONTMATTER, MalformedFrontmatter
from pagesmith.domain.frontmatter import Frontmatter, decode_frontmatter, split_frontmatter
from pagesmith.domain.markdown import first_heading, first_paragraph, new_markdown, render_tokens


class MarkdownParser:
    """CommonMark documents with an optional ``+++``/``---`` frontmatter block.

    An unterminated frontmatter block is fatal for the document. A block
    that is delimited but not decodable degrades to an empty
    :class:`Frontmatter` with a warning.
    """

    name = "markdown"
    extensions: tuple[str, ...] = ("md", "markdown")

    def parse(self, content: str, path: Path) -> ParsedContent:
        try:
            syntax, raw, body = split_frontmatter(content, path=path)
        except MalformedFrontmatter as exc:
            exc.parser = self.name
            raise

        warnings: list[DocumentIssue] = []
        frontmatter = Frontmatter()
        if syntax is not None:
            try:
                frontmatter = decode_frontmatter(syntax, raw, path=path)
            except MalformedFrontmatter as exc:
                warnings.append(
                    DocumentIssue(
                        code=MALFORMED_FRONTMATTER,
                        severity="warning",
                        path=str(path),
                        message=f"{exc.detail}; using empty frontmatter",
                        field="frontmatter",
                        parser=self.name,
                    )
                )

        md = new_markdown()
        tokens = md.parse(body)
        return ParsedContent(
            title=first_heading(tokens) or "",
            frontmatter=frontmatter,
            content=render_tokens(tokens, md),
            excerpt=first_paragraph(tokens),
            warnings=warnings,
        )
