"""Content records flowing through the ingestion pipeline.

SourceDocument -> (parser) -> ParsedContent -> (title/excerpt resolution)
-> ResolvedDocument -> (list aggregation) -> ContentItem.

All records are frozen Pydantic models. Transformations build new
records; nothing is mutated after creation.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Literal

from pydantic import BaseModel, Field

from pagesmith.domain.frontmatter import Frontmatter

# Literal token a list page body may contain to position the rendered listing.
LIST_MARKER = "<!-- BLOG_POSTS_LIST -->"


def url_for(relative_path: Path) -> str:
    """Site-relative URL for a content-root-relative path (extension dropped)."""
    posix = PurePosixPath(relative_path.as_posix())
    return str(posix.with_suffix("")) if posix.suffix else str(posix)


class SourceDocument(BaseModel):
    """Immutable view of one input file, built once per walk pass."""

    model_config = {"frozen": True}

    path: Path
    relative_path: Path
    text: str

    @property
    def extension(self) -> str:
        """Lower-cased extension without the leading dot."""
        return self.path.suffix.lstrip(".").lower()


class DocumentIssue(BaseModel):
    """One warning or failure attributed to a source document."""

    model_config = {"frozen": True}

    code: str
    severity: Literal["warning", "error"]
    path: str
    message: str
    field: str | None = None
    parser: str | None = None


class ParsedContent(BaseModel):
    """Output of a content parser for one document.

    Attributes:
        title: Format-native title, empty when none is discoverable.
        frontmatter: Always present; all-empty when the document has none.
        content: Body in the representation handed to the renderer.
        excerpt: Parser-computed fallback excerpt.
        metadata: Open-ended per-parser string bag.
        warnings: Recoverable problems met while parsing.
    """

    model_config = {"frozen": True}

    title: str = ""
    frontmatter: Frontmatter = Field(default_factory=Frontmatter)
    content: str = ""
    excerpt: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)
    warnings: list[DocumentIssue] = Field(default_factory=list)


class ContentItem(BaseModel):
    """Render-facing summary of one document inside a list page."""

    model_config = {"frozen": True}

    title: str
    url: str
    date: str | None = None
    excerpt: str | None = None


class ResolvedDocument(BaseModel):
    """A parsed document with its title and excerpt resolved."""

    model_config = {"frozen": True}

    path: Path
    relative_path: Path
    url: str
    parser: str
    title: str
    frontmatter: Frontmatter = Field(default_factory=Frontmatter)
    content: str = ""
    excerpt: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def directory(self) -> str:
        """Content-root-relative POSIX directory ('' for the root)."""
        parent = PurePosixPath(self.relative_path.as_posix()).parent
        return "" if str(parent) == "." else str(parent)

    @property
    def is_list_page(self) -> bool:
        return self.frontmatter.is_list is True

    @property
    def has_list_marker(self) -> bool:
        return LIST_MARKER in self.content

    def to_item(self) -> ContentItem:
        """Build the list summary record for this document."""
        return ContentItem(
            title=self.title,
            url=self.url,
            date=self.frontmatter.date,
            excerpt=self.excerpt,
        )
