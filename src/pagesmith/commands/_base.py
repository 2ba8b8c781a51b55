"""Click command class with an ``--examples`` flag.

Commands declare example invocations as a tuple of strings. ``--help``
only mentions that they exist; ``--examples`` prints them and exits
before the command's own arguments are validated.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click


def format_examples(examples: Sequence[str]) -> str:
    return "\n".join(f"  $ {line}" for line in examples)


class PagesmithCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: Sequence[str] = (), **kwargs: Any) -> None:
        self.examples = tuple(examples)
        if self.examples and not kwargs.get("epilog"):
            kwargs["epilog"] = "Run with --examples to see example invocations."
        super().__init__(*args, **kwargs)
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(format_examples(self.examples))
        ctx.exit(0)
