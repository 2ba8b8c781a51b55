"""List aggregation — directory index pages marked ``list = true``.

For every directory whose index document is a list page, the other
documents directly inside that directory (one level, non-recursive) are
ordered per the index's sort settings and summarised as ContentItems.
This is the join point of a generation pass: it only runs once every
document of the pass has been parsed.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from pagesmith.domain.content import DocumentIssue, ResolvedDocument
from pagesmith.domain.errors import INVALID_SORT_CONFIGURATION
from pagesmith.domain.site import ListPage
from pagesmith.domain.sorting import SortConfig, sort_documents

logger = structlog.get_logger(__name__)

DEFAULT_INDEX_NAME = "index"


class ListAggregator:
    """Builds :class:`ListPage` records from resolved documents.

    Documents are grouped by directory in input order, which is the
    directory listing order; sorting is stable against it. Index documents
    (file stem equal to *index_name*) are never listed as siblings.
    """

    def __init__(self, *, index_name: str = DEFAULT_INDEX_NAME) -> None:
        self._index_name = index_name.lower()

    def is_index(self, document: ResolvedDocument) -> bool:
        return document.path.stem.lower() == self._index_name

    def aggregate(
        self,
        documents: Sequence[ResolvedDocument],
    ) -> tuple[dict[str, ListPage], list[DocumentIssue]]:
        """Return ``(list_pages_by_directory, sort_warnings)``."""
        by_directory: dict[str, list[ResolvedDocument]] = {}
        for doc in documents:
            by_directory.setdefault(doc.directory, []).append(doc)

        pages: dict[str, ListPage] = {}
        issues: list[DocumentIssue] = []
        for directory, docs in by_directory.items():
            index = next((d for d in docs if self.is_index(d) and d.is_list_page), None)
            if index is None:
                continue
            page, page_issues = self.build_page(index, [d for d in docs if not self.is_index(d)])
            pages[directory] = page
            issues.extend(page_issues)
        return pages, issues

    def build_page(
        self,
        index: ResolvedDocument,
        siblings: Sequence[ResolvedDocument],
    ) -> tuple[ListPage, list[DocumentIssue]]:
        """Order *siblings* per *index*'s frontmatter and summarise them."""
        index_path = index.relative_path.as_posix()
        config, sort_warnings = SortConfig.from_frontmatter(index.frontmatter)

        issues: list[DocumentIssue] = []
        for warning in sort_warnings:
            logger.warning(
                "list.invalid_sort_configuration",
                path=index_path,
                field=warning.field,
                value=warning.value,
                fallback=warning.fallback,
            )
            issues.append(
                DocumentIssue(
                    code=INVALID_SORT_CONFIGURATION,
                    severity="warning",
                    path=index_path,
                    message=warning.message,
                    field=warning.field,
                )
            )

        ordered = sort_documents(siblings, config)
        page = ListPage(
            directory=index.directory,
            index=index_path,
            sort=config,
            items=[doc.to_item() for doc in ordered],
        )
        logger.debug(
            "list.built",
            directory=page.directory,
            items=len(page.items),
            sort_by=config.field.value,
            sort_order=config.order.value,
        )
        return page, issues
