"""GenerateService — one generation pass as a ServiceResult.

Assembles the parser registry (built-ins, configured aliases, plugins),
snapshots it, runs the :class:`~pagesmith.services.site.SiteBuilder` and
summarises the resulting :class:`~pagesmith.domain.site.Site`.

A pass with per-document failures still succeeds (``ok=True``); the
failures are listed in ``data["errors"]``. Only a missing content root
or a cancelled pass fails the operation.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from pagesmith.domain.errors import GenerationCancelled
from pagesmith.domain.site import Site
from pagesmith.plugins.manager import PluginManager
from pagesmith.plugins.registry import ParserRegistry, default_registry
from pagesmith.services.base import BaseService
from pagesmith.services.result import CANCELLED, CONTENT_ROOT_MISSING, ServiceResult
from pagesmith.services.site import SiteBuilder
from pagesmith.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from pagesmith.config.settings import PagesmithSettings

logger = structlog.get_logger(__name__)


class GenerateService(BaseService):
    """Runs generation passes and reports on the parser table."""

    def __init__(
        self,
        settings: PagesmithSettings,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        super().__init__(settings)
        self._plugin_manager = plugin_manager

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def generate(
        self,
        content_root: Path | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> ServiceResult:
        """Parse every document under the content root and build list pages."""
        root = content_root if content_root is not None else self._settings.content_root
        if not root.is_dir():
            return ServiceResult.failure(
                "generate",
                CONTENT_ROOT_MISSING,
                f"Content directory not found: {root}",
                root=str(root),
            )

        with trace_span("registry"):
            registry, warnings = self.build_registry()

        try:
            site = self.build_site(root, registry=registry, cancel=cancel)
        except GenerationCancelled as exc:
            return ServiceResult.failure("generate", CANCELLED, str(exc), warnings=warnings)

        warnings.extend(f"{issue.path}: {issue.message}" for issue in site.warnings)
        return ServiceResult.success("generate", summarize_site(site), warnings=warnings)

    @traced
    def list_parsers(self) -> ServiceResult:
        """Report which parser handles each registered extension."""
        registry, warnings = self.build_registry()
        parsers = [
            {"extension": ext, "parser": parser.name, "type": type(parser).__name__}
            for ext, parser in registry.items()
        ]
        data = {"parsers": parsers, "count": len(parsers)}
        return ServiceResult.success("parsers", data, warnings=warnings)

    def build_site(
        self,
        root: Path,
        *,
        registry: ParserRegistry | None = None,
        cancel: threading.Event | None = None,
    ) -> Site:
        """Run a pass and return the Site itself, for embedding applications.

        Raises:
            GenerationCancelled: If *cancel* is set before the pass completes.
        """
        if registry is None:
            registry, _ = self.build_registry()
        builder = SiteBuilder(
            registry,
            workers=self._settings.generation.workers,
            index_name=self._settings.content.index_name,
            exclude=self._settings.content.exclude,
        )
        return builder.build(root, cancel=cancel)

    def build_registry(self) -> tuple[ParserRegistry, list[str]]:
        """Assemble and freeze the parser table for one pass.

        Order: built-ins, then ``[parsers] aliases``, then plugins (last
        registration wins). Returns the frozen registry and warnings.
        """
        registry = default_registry()
        warnings: list[str] = []

        for extension, parser_name in self._settings.parsers.aliases.items():
            parser = registry.get(parser_name)
            if parser is None:
                msg = f"Alias .{extension} -> {parser_name}: no parser named {parser_name!r}"
                logger.warning("parsers.unknown_alias", extension=extension, parser=parser_name)
                warnings.append(msg)
                continue
            registry.register(extension, parser)

        if self._settings.parsers.plugins:
            manager = self._plugin_manager
            if manager is None:
                manager = PluginManager()
                self._plugin_manager = manager
            if not manager.is_loaded:
                manager.discover_and_load(local_dir=self._settings.plugin_dir)
            warnings.extend(manager.load_warnings)
            warnings.extend(manager.apply_parsers(registry))

        return registry.snapshot(), warnings


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


def summarize_site(site: Site) -> dict[str, Any]:
    """JSON-ready summary of a generation pass."""
    documents = [
        {
            "path": doc.relative_path.as_posix(),
            "url": doc.url,
            "title": doc.title,
            "parser": doc.parser,
            "date": doc.frontmatter.date,
            "excerpt": doc.excerpt,
            "list": doc.is_list_page,
        }
        for doc in site.documents
    ]
    list_pages = {
        directory: {
            "index": page.index,
            "sort_by": page.sort.field.value,
            "sort_order": page.sort.order.value,
            "items": [item.url for item in page.items],
        }
        for directory, page in site.list_pages.items()
    }
    return {
        "root": str(site.root),
        "documents": documents,
        "count": len(documents),
        "list_pages": list_pages,
        "errors": [issue.model_dump() for issue in site.errors],
        "warnings": [issue.model_dump() for issue in site.warnings],
    }
