"""Markdown structural tree helpers (markdown-it-py).

Title and excerpt extraction walk the parsed block stream instead of
matching substrings, so formatting is never cut mid-markup.
"""

from __future__ import annotations

from collections.abc import Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

# Inline tokens whose ``content`` is literal text.
_TEXT_TOKENS = frozenset({"text", "text_special", "code_inline"})
_BREAK_TOKENS = frozenset({"softbreak", "hardbreak"})


def new_markdown() -> MarkdownIt:
    """Create a CommonMark parser with tables and strikethrough enabled.

    A fresh instance per document keeps parallel parses independent.
    """
    return MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])


def parse_markdown(text: str, md: MarkdownIt | None = None) -> list[Token]:
    """Parse *text* into markdown-it's flat block token stream."""
    return (md or new_markdown()).parse(text)


def render_tokens(tokens: Sequence[Token], md: MarkdownIt | None = None) -> str:
    """Render an already parsed token stream to an HTML fragment."""
    md = md or new_markdown()
    return md.renderer.render(list(tokens), md.options, {})


def render_markdown(text: str) -> str:
    """Render markdown source to an HTML fragment."""
    md = new_markdown()
    return render_tokens(md.parse(text), md)


def plain_text(children: Sequence[Token]) -> str:
    """Flatten inline tokens to plain text.

    Emphasis, strong, strikethrough and link markers are dropped, code spans
    keep their literal text and images contribute their alt text.
    Raw inline HTML is dropped.
    """
    parts: list[str] = []
    for token in children:
        if token.type in _TEXT_TOKENS:
            parts.append(token.content)
        elif token.type == "image":
            parts.append(plain_text(token.children or []))
        elif token.type in _BREAK_TOKENS:
            parts.append(" ")
    return "".join(parts)


def _top_level_inline(tokens: Sequence[Token], opener: str, tag: str | None = None) -> list[str]:
    """Plain text of each top-level block opened by *opener* (optionally with *tag*)."""
    texts: list[str] = []
    for idx, token in enumerate(tokens):
        if token.type != opener or token.level != 0:
            continue
        if tag is not None and token.tag != tag:
            continue
        if idx + 1 < len(tokens) and tokens[idx + 1].type == "inline":
            texts.append(plain_text(tokens[idx + 1].children or []).strip())
    return texts


def first_heading(tokens: Sequence[Token], *, level: int = 1) -> str | None:
    """Text of the first top-level heading of *level* that is not blank."""
    for text in _top_level_inline(tokens, "heading_open", f"h{level}"):
        if text:
            return text
    return None


def first_paragraph(tokens: Sequence[Token]) -> str | None:
    """Plain text of the first top-level paragraph that is not blank."""
    for text in _top_level_inline(tokens, "paragraph_open"):
        if text:
            return text
    return None


def markdown_excerpt(text: str) -> str | None:
    """First paragraph of markdown source, formatting stripped."""
    return first_paragraph(parse_markdown(text))
