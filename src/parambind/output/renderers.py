"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from parambind.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from parambind.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False, width: int | None = None) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console(width=width)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="pb.ok")
    op = Text(f"  {result.op}", style="pb.op")
    console.print(label, op, end="")
    console.print()


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pb.key")
    console.print(k, Text(_format_value(value)), end="")
    console.print()


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pb.error")
    op = Text(f"  {result.op}", style="pb.op")
    code = Text(f" [{err.code}]" if err else "", style="pb.key")
    console.print(label, op, code, Text(" — "), Text(msg))

    if err and err.detail:
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the field plan as a table, one row per field."""
    _status_line(console, result)
    _field(console, "record", result.data.get("record", ""))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Field", style="pb.field", no_wrap=True)
    table.add_column("Key")
    table.add_column("Kind", style="pb.kind")
    table.add_column("Validators", style="pb.validator")
    table.add_column("Default", style="pb.default")

    for entry in result.data.get("fields", []):
        mode = entry.get("default_mode")
        if mode == "value":
            default = _format_value(entry.get("default"))
        elif mode == "omit":
            default = "(omit)"
        else:
            default = ""
        table.add_row(
            str(entry.get("name", "")),
            str(entry.get("key", "")),
            str(entry.get("kind", "")),
            "; ".join(entry.get("validators", [])),
            default,
        )
    console.print(table)


def _render_bind(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render bound record values as key-value pairs."""
    _status_line(console, result)
    _field(console, "record", result.data.get("record", ""))
    for key, value in result.data.get("values", {}).items():
        _field(console, key, value)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "plan": _render_plan,
    "bind": _render_bind,
    "preload": _render_generic,
}
