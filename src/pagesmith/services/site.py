"""Site tree builder — walk, parse in parallel, resolve, aggregate.

One :meth:`SiteBuilder.build` call is one generation pass:

1. discover files under the content root (deterministic order)
2. per file: resolve the parser, read, parse, resolve title/excerpt;
   files are independent, so this runs on a thread pool
3. join, then aggregate list pages

The registry is snapshotted at construction so the mapping cannot change
mid-pass. Per-document failures become DocumentIssues and never abort
the pass. Cancellation discards the whole pass: :class:`GenerationCancelled`
is raised and no partial :class:`Site` is returned.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from pagesmith.domain.content import (
    DocumentIssue,
    ParsedContent,
    ResolvedDocument,
    SourceDocument,
    url_for,
)
from pagesmith.domain.errors import (
    PARSER_FAILURE,
    UNREADABLE_FILE,
    GenerationCancelled,
    ParseError,
    UnsupportedFormat,
)
from pagesmith.domain.site import Site
from pagesmith.domain.summary import resolve_excerpt, resolve_title
from pagesmith.infrastructure.filesystem import (
    DEFAULT_EXCLUDES,
    find_source_files,
    read_source_document,
)
from pagesmith.plugins.registry import ParserRegistry
from pagesmith.services.listing import DEFAULT_INDEX_NAME, ListAggregator
from pagesmith.services.telemetry import trace_span

logger = structlog.get_logger(__name__)

_Outcome = tuple[ResolvedDocument | None, list[DocumentIssue]]


def _error(code: str, path: str, message: str, **kwargs: str | None) -> DocumentIssue:
    return DocumentIssue(code=code, severity="error", path=path, message=message, **kwargs)


class SiteBuilder:
    """Runs generation passes against a frozen parser registry.

    Parameters:
        registry: Parser table; snapshotted unless already frozen.
        workers: Thread pool size for parallel parsing.
        index_name: File stem of directory index documents.
        exclude: Directory names skipped during discovery.
    """

    def __init__(
        self,
        registry: ParserRegistry,
        *,
        workers: int = 4,
        index_name: str = DEFAULT_INDEX_NAME,
        exclude: Iterable[str] = DEFAULT_EXCLUDES,
    ) -> None:
        self._registry = registry if registry.frozen else registry.snapshot()
        self._workers = max(1, workers)
        self._aggregator = ListAggregator(index_name=index_name)
        self._exclude = frozenset(exclude)

    @property
    def registry(self) -> ParserRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, root: Path, *, cancel: threading.Event | None = None) -> Site:
        """Run one generation pass over *root*.

        Raises:
            GenerationCancelled: If *cancel* is set before the pass completes.
        """
        with trace_span("discover") as span:
            files = find_source_files(root, exclude=self._exclude)
            if span is not None:
                span.annotate(files=len(files))
        logger.debug("generate.discovered", root=str(root), files=len(files))
        self._check_cancelled(cancel)

        with trace_span("parse") as span, ThreadPoolExecutor(max_workers=self._workers) as pool:
            if span is not None:
                span.annotate(workers=self._workers)
            futures = [pool.submit(self._process, path, root, cancel) for path in files]
            # Collected in submission order, i.e. directory listing order.
            outcomes = [future.result() for future in futures]
        self._check_cancelled(cancel)

        documents: list[ResolvedDocument] = []
        issues: list[DocumentIssue] = []
        for document, doc_issues in outcomes:
            issues.extend(doc_issues)
            if document is not None:
                documents.append(document)

        with trace_span("aggregate") as span:
            list_pages, list_issues = self._aggregator.aggregate(documents)
            if span is not None:
                span.annotate(list_pages=len(list_pages))
        issues.extend(list_issues)
        self._check_cancelled(cancel)

        site = Site(root=root, documents=documents, list_pages=list_pages, issues=issues)
        logger.info(
            "generate.complete",
            root=str(root),
            documents=len(documents),
            list_pages=len(list_pages),
            warnings=len(site.warnings),
            errors=len(site.errors),
        )
        return site

    def parse_document(self, source: SourceDocument) -> _Outcome:
        """Parse and resolve one pre-read document."""
        relative = source.relative_path.as_posix()
        try:
            parser = self._registry.resolve(source.path)
        except UnsupportedFormat as exc:
            return None, [self._unsupported(relative, exc)]

        try:
            parsed = parser.parse(source.text, source.path)
            if not isinstance(parsed, ParsedContent):
                msg = f"returned {type(parsed).__name__}, expected ParsedContent"
                raise TypeError(msg)
            document = self._resolve(source, parser.name, parsed)
        except ParseError as exc:
            logger.error(
                "document.parse_failed",
                path=relative,
                parser=parser.name,
                kind=exc.kind,
                detail=exc.detail,
            )
            issue = _error(
                exc.code,
                relative,
                f"{parser.name} parser: {exc.message}",
                field=exc.kind,
                parser=parser.name,
            )
            return None, [issue]
        except Exception as exc:
            logger.error(
                "document.parser_crashed",
                path=relative,
                parser=parser.name,
                exc_info=True,
            )
            issue = _error(
                PARSER_FAILURE,
                relative,
                f"{parser.name} parser failed: {exc}",
                parser=parser.name,
            )
            return None, [issue]

        warnings = [w.model_copy(update={"path": relative}) for w in parsed.warnings]
        for warning in warnings:
            logger.warning(
                "document.degraded",
                path=relative,
                field=warning.field,
                parser=warning.parser,
                detail=warning.message,
            )
        return document, warnings

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve(
        source: SourceDocument,
        parser_name: str,
        parsed: ParsedContent,
    ) -> ResolvedDocument:
        return ResolvedDocument(
            path=source.path,
            relative_path=source.relative_path,
            url=url_for(source.relative_path),
            parser=parser_name,
            title=resolve_title(parsed, source.path),
            frontmatter=parsed.frontmatter,
            content=parsed.content,
            excerpt=resolve_excerpt(parsed),
            metadata=parsed.metadata,
        )

    def _process(self, path: Path, root: Path, cancel: threading.Event | None) -> _Outcome:
        if cancel is not None and cancel.is_set():
            return None, []

        relative = path.relative_to(root).as_posix()
        if not self._registry.supports(path):
            unsupported = UnsupportedFormat(path.suffix.lstrip(".").lower(), path=path)
            return None, [self._unsupported(relative, unsupported)]

        try:
            source = read_source_document(path, root)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("document.read_failed", path=relative, error=str(exc))
            return None, [_error(UNREADABLE_FILE, relative, f"Cannot read file: {exc}")]
        return self.parse_document(source)

    @staticmethod
    def _unsupported(relative: str, exc: UnsupportedFormat) -> DocumentIssue:
        logger.error("document.unsupported_format", path=relative, extension=exc.extension)
        return _error(exc.code, relative, exc.message)

    @staticmethod
    def _check_cancelled(cancel: threading.Event | None) -> None:
        if cancel is not None and cancel.is_set():
            logger.info("generate.cancelled")
            raise GenerationCancelled("Generation pass cancelled; results discarded")
