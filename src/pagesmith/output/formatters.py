"""Output mode dispatch for ServiceResult.

The CLI renders a ServiceResult for humans (Rich tables and colors),
for scripts (``--quiet``: one value per line) or for machines
(``--json``). This module picks the mode; :mod:`pagesmith.output.renderers`
does the human rendering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from pagesmith.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from pagesmith.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output-related subset of the CLI flags."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
