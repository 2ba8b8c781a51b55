"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from pagesmith.output.console import create_console, get_output, style_for_parser

if TYPE_CHECKING:
    from rich.console import Console

    from pagesmith.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one url or extension per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "generate":
        return "\n".join(doc["url"] for doc in result.data.get("documents", []))
    if result.op == "parsers":
        return "\n".join(p["extension"] for p in result.data.get("parsers", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="ps.ok")
    op = Text(f"  {result.op}", style="ps.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="ps.key")
    if key in ("path", "root"):
        v = Text(str(value), style="ps.path")
    elif key == "title":
        v = Text(str(value), style="ps.title")
    else:
        v = Text(str(value))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _issue_lines(console: Console, issues: list[dict[str, Any]]) -> None:
    severity_styles = {"error": "ps.error", "warning": "ps.warning"}
    for issue in issues:
        sev = str(issue.get("severity", "warning"))
        style = severity_styles.get(sev, "")
        code = issue.get("code", "")
        console.print(
            f"  [{style}]{sev}[/{style}] [ps.path]{escape(str(issue.get('path', '')))}[/ps.path]"
            f" ({code}): {escape(str(issue.get('message', '')))}",
            markup=True,
        )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="ps.error")
    op = Text(f"  {result.op}", style="ps.op")
    console.print(label, op, Text(" — "), msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_generate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Documents table, list pages, then per-document issues."""
    data = result.data
    _status_line(console, result)
    _field(console, "root", data.get("root", ""))
    _field(console, "documents", data.get("count", 0))

    documents = data.get("documents", [])
    if documents:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("URL", style="ps.url", no_wrap=True)
        table.add_column("Title", style="ps.title")
        table.add_column("Parser")
        table.add_column("Date")
        if verbose:
            table.add_column("Excerpt", style="dim", max_width=48)
        for doc in documents:
            parser = str(doc.get("parser", ""))
            row: list[str | Text] = [
                str(doc.get("url", "")),
                str(doc.get("title", "")),
                Text(parser, style=style_for_parser(parser)),
                str(doc.get("date") or ""),
            ]
            if verbose:
                row.append(str(doc.get("excerpt") or ""))
            table.add_row(*row)
        console.print(table)

    list_pages = data.get("list_pages", {})
    for directory, page in list_pages.items():
        label = directory or "."
        console.print(
            f"\n[bold]{escape(label)}[/bold] [ps.path]{escape(page['index'])}[/ps.path]"
            f"  sort={page['sort_by']} {page['sort_order']}",
            markup=True,
        )
        for url in page.get("items", []):
            console.print(f"  - {escape(url)}")

    issues = [*data.get("errors", []), *data.get("warnings", [])]
    if issues:
        console.print()
        _issue_lines(console, issues)
        errors = len(data.get("errors", []))
        console.print(f"\n{errors} errors, {len(issues) - errors} warnings")

    if verbose:
        _render_meta(console, result)


def _render_parsers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Extension to parser table."""
    _status_line(console, result)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Extension", no_wrap=True)
    table.add_column("Parser")
    if verbose:
        table.add_column("Class", style="dim")
    for entry in result.data.get("parsers", []):
        parser = str(entry.get("parser", ""))
        row: list[str | Text] = [
            f".{entry.get('extension', '')}",
            Text(parser, style=style_for_parser(parser)),
        ]
        if verbose:
            row.append(str(entry.get("type", "")))
        table.add_row(*row)
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "generate": _render_generate,
    "parsers": _render_parsers,
}
