"""Subcommand modules for pagesmith.

Provides register_commands(), which uses deferred imports to keep
``pagesmith --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pagesmith.commands.generate import generate
    from pagesmith.commands.parsers import parsers

    cli.add_command(generate)
    cli.add_command(parsers)
