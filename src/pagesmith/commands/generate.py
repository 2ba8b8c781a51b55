"""Command: run a generation pass over the content tree."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pagesmith.commands._base import PagesmithCommand

if TYPE_CHECKING:
    from pagesmith.commands._context import AppContext


@click.command(
    cls=PagesmithCommand,
    examples=(
        "pagesmith generate",
        "pagesmith generate docs/",
        "pagesmith generate --workers 8",
        "pagesmith generate --strict",
        "pagesmith -q generate",
        "pagesmith --json generate | jq '.data.list_pages'",
    ),
)
@click.argument(
    "content_dir",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Parse worker threads.")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any document failed.")
@click.pass_obj
def generate(
    app: AppContext,
    content_dir: Path | None,
    workers: int | None,
    strict: bool,
) -> None:
    """Parse every document under CONTENT_DIR and build list pages.

    CONTENT_DIR defaults to ``[content] root`` from pagesmith.toml.
    """
    from pagesmith.services.generate import GenerateService

    settings = app.settings
    if workers is not None:
        generation = settings.generation.model_copy(update={"workers": workers})
        settings = settings.model_copy(update={"generation": generation})

    result = GenerateService(settings).generate(content_dir)
    app.emit(result)
    if strict and result.data.get("errors"):
        raise SystemExit(1)
