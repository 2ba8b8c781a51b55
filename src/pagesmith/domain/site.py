"""Render-ready site model handed to the templating collaborator."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from pagesmith.domain.content import ContentItem, DocumentIssue, ResolvedDocument
from pagesmith.domain.sorting import SortConfig


class ListPage(BaseModel):
    """A directory whose index document is marked ``list = true``.

    Attributes:
        directory: Content-root-relative POSIX directory ('' for the root).
        index: Relative path of the index document.
        sort: Effective sort configuration.
        items: Ordered summaries of every sibling document (one level).
    """

    model_config = {"frozen": True}

    directory: str
    index: str
    sort: SortConfig = Field(default_factory=SortConfig)
    items: list[ContentItem] = Field(default_factory=list)


class Site(BaseModel):
    """Result of one generation pass."""

    model_config = {"frozen": True}

    root: Path
    documents: list[ResolvedDocument] = Field(default_factory=list)
    list_pages: dict[str, ListPage] = Field(default_factory=dict)
    issues: list[DocumentIssue] = Field(default_factory=list)

    @property
    def warnings(self) -> list[DocumentIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def errors(self) -> list[DocumentIssue]:
        return [i for i in self.issues if i.severity == "error"]

    def document(self, relative_path: str) -> ResolvedDocument | None:
        """Look up a generated document by its content-root-relative POSIX path."""
        for doc in self.documents:
            if doc.relative_path.as_posix() == relative_path:
                return doc
        return None

    def list_page_for(self, document: ResolvedDocument) -> ListPage | None:
        """The list page whose index is *document*, if any."""
        page = self.list_pages.get(document.directory)
        if page is not None and page.index == document.relative_path.as_posix():
            return page
        return None
