"""List-page sort configuration and ordering.

Defaults: ``sort_by`` is ``date``; ``sort_order`` is ``desc`` when the
requested key is ``date`` and ``asc`` otherwise. Unrecognised values fall
back (``sort_by`` -> ``date``, ``sort_order`` -> ``asc``) and are reported
as warnings, never errors.

Date ordering splits documents into two groups:

- documents with a parseable date, ordered by date in the list direction
- documents whose date is missing or unparseable, always ordered by
  file name ascending

With ``desc`` the dated group comes first; with ``asc`` it comes last.
Every sort is stable: equal keys keep the input order.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from enum import StrEnum
from typing import NamedTuple

from pydantic import BaseModel

from pagesmith.domain.content import ResolvedDocument
from pagesmith.domain.dates import parse_date
from pagesmith.domain.frontmatter import Frontmatter


class SortField(StrEnum):
    """Keys a list page can be ordered by."""

    DATE = "date"
    TITLE = "title"
    FILENAME = "filename"


class SortOrder(StrEnum):
    """List directions."""

    ASC = "asc"
    DESC = "desc"


class SortWarning(NamedTuple):
    """An unrecognised sort value and the fallback used instead."""

    field: str
    value: str
    fallback: str

    @property
    def message(self) -> str:
        return f"Invalid {self.field} {self.value!r}, falling back to {self.fallback!r}"


class SortConfig(BaseModel):
    """Effective (validated) sort key and direction for one list page."""

    model_config = {"frozen": True}

    field: SortField = SortField.DATE
    order: SortOrder = SortOrder.DESC

    @classmethod
    def from_frontmatter(cls, frontmatter: Frontmatter) -> tuple[SortConfig, list[SortWarning]]:
        """Resolve the list page's sort settings, collecting fallback warnings."""
        warnings: list[SortWarning] = []

        if frontmatter.sort_by is None:
            requested_field = SortField.DATE.value
        else:
            requested_field = frontmatter.sort_by.strip().lower()
        if requested_field in SortField._value2member_map_:
            field = SortField(requested_field)
        else:
            field = SortField.DATE
            warnings.append(SortWarning("sort_by", frontmatter.sort_by or "", field.value))

        # Direction default follows the requested key, not the fallback.
        if frontmatter.sort_order is None:
            default = SortOrder.DESC if requested_field == SortField.DATE else SortOrder.ASC
            return cls(field=field, order=default), warnings

        requested_order = frontmatter.sort_order.strip().lower()
        if requested_order in SortOrder._value2member_map_:
            order = SortOrder(requested_order)
        else:
            order = SortOrder.ASC
            warnings.append(SortWarning("sort_order", frontmatter.sort_order, order.value))
        return cls(field=field, order=order), warnings


def sort_documents(
    documents: Sequence[ResolvedDocument],
    config: SortConfig,
) -> list[ResolvedDocument]:
    """Return *documents* ordered per *config*. The input is not modified."""
    descending = config.order is SortOrder.DESC

    if config.field is SortField.TITLE:
        return sorted(documents, key=lambda d: d.title, reverse=descending)
    if config.field is SortField.FILENAME:
        return sorted(documents, key=lambda d: d.filename, reverse=descending)

    dated: list[tuple[ResolvedDocument, date]] = []
    undated: list[ResolvedDocument] = []
    for doc in documents:
        parsed = parse_date(doc.frontmatter.date)
        if parsed is None:
            undated.append(doc)
        else:
            dated.append((doc, parsed))

    dated.sort(key=lambda pair: pair[1], reverse=descending)
    undated.sort(key=lambda d: d.filename)
    ordered_dated = [doc for doc, _ in dated]
    if descending:
        return ordered_dated + undated
    return undated + ordered_dated
