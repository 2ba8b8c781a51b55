"""Rich Console factory and theme for pagesmith output.

Consoles render into a StringIO buffer so formatters keep a plain
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PAGESMITH_THEME = Theme(
    {
        "ps.ok": "bold green",
        "ps.error": "bold red",
        "ps.warning": "bold yellow",
        "ps.op": "bold cyan",
        "ps.key": "dim",
        "ps.path": "dim",
        "ps.url": "bold blue",
        "ps.title": "bold",
        "ps.parser.markdown": "green",
        "ps.parser.toml": "magenta",
        "ps.parser.json": "yellow",
        "ps.parser.text": "cyan",
    }
)

_PARSER_STYLES: dict[str, str] = {
    "markdown": "ps.parser.markdown",
    "toml": "ps.parser.toml",
    "json": "ps.parser.json",
    "text": "ps.parser.text",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for stable test output).
    """
    return Console(
        file=StringIO(),
        theme=PAGESMITH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_parser(parser_name: str) -> str:
    """Return the Rich style name for a parser; plugin parsers are unstyled."""
    return _PARSER_STYLES.get(parser_name, "")
