"""Data-first parsers (TOML, JSON).

The whole file is one table/object. Its top-level keys are the
frontmatter, and the optional ``content`` string is the body: HTML passes
through, anything else is rendered as markdown. ``description`` and
``author`` strings are copied into the metadata bag.
"""

from __future__ import annotations

import json
import tomllib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pagesmith.domain.content import DocumentIssue, ParsedContent
from pagesmith.domain.errors import MALFORMED_FRONTMATTER, MalformedBody, MalformedFrontmatter
from pagesmith.domain.frontmatter import Frontmatter, frontmatter_from_mapping
from pagesmith.domain.markdown import first_paragraph, new_markdown, render_tokens
from pagesmith.domain.summary import first_block, looks_like_html

BODY_KEY = "content"
METADATA_KEYS: tuple[str, ...] = ("description", "author")


def render_body(text: str) -> tuple[str, str | None]:
    """Return ``(html, excerpt)`` for a data-first ``content`` value."""
    if not text.strip():
        return "", None
    if looks_like_html(text):
        return text, first_block(text)
    md = new_markdown()
    tokens = md.parse(text)
    return render_tokens(tokens, md), first_paragraph(tokens)


class _StructuredParser(ABC):
    name: str
    extensions: tuple[str, ...]

    @abstractmethod
    def _load(self, content: str) -> Any:
        """Decode the whole file; decode failures raise ValueError."""

    def parse(self, content: str, path: Path) -> ParsedContent:
        try:
            data = self._load(content)
        except ValueError as exc:
            raise MalformedBody(str(exc), path=path, parser=self.name) from exc
        if not isinstance(data, dict):
            msg = f"top-level value must be a mapping, got {type(data).__name__}"
            raise MalformedBody(msg, path=path, parser=self.name)

        warnings: list[DocumentIssue] = []
        fields = {k: v for k, v in data.items() if k != BODY_KEY}
        try:
            frontmatter = frontmatter_from_mapping(fields, path=path)
        except MalformedFrontmatter as exc:
            frontmatter = Frontmatter()
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

        body = data.get(BODY_KEY)
        html, excerpt = render_body(body if isinstance(body, str) else "")
        title = data.get("title")

        return ParsedContent(
            title=title.strip() if isinstance(title, str) else "",
            frontmatter=frontmatter,
            content=html,
            excerpt=excerpt,
            metadata={k: data[k] for k in METADATA_KEYS if isinstance(data.get(k), str)},
            warnings=warnings,
        )


class TomlParser(_StructuredParser):
    """A TOML document whose top-level table is the page."""

    name = "toml"
    extensions = ("toml",)

    def _load(self, content: str) -> Any:
        # TOMLDecodeError is a ValueError subclass.
        return tomllib.loads(content)


class JsonParser(_StructuredParser):
    """A JSON document whose top-level object is the page."""

    name = "json"
    extensions = ("json",)

    def _load(self, content: str) -> Any:
        # JSONDecodeError is a ValueError subclass.
        return json.loads(content)
