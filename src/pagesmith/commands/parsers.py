"""Command: show the extension to parser table."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagesmith.commands._base import PagesmithCommand

if TYPE_CHECKING:
    from pagesmith.commands._context import AppContext


@click.command(
    cls=PagesmithCommand,
    examples=("pagesmith parsers", "pagesmith -v parsers", "pagesmith --json parsers"),
)
@click.pass_obj
def parsers(app: AppContext) -> None:
    """List registered file extensions and the parser handling each."""
    from pagesmith.services.generate import GenerateService

    app.emit(GenerateService(app.settings).list_parsers())
