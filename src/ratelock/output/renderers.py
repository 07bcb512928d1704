"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a StringIO-backed Console; :func:`render_result`
picks one by ``result.op`` and falls back to a key-value listing.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from ratelock.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from ratelock.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text when Rich detects no terminal, which is the case
    inside Click's CliRunner and piped output.
    """
    console = create_console()

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
        return f"ERROR: {result.op} - {msg}"

    data = result.data
    if result.op == "list_bindings":
        return "\n".join(str(item["combo"]) for item in data.get("items", []))
    if result.op == "simulate":
        return "\n".join(f"{e['id']} {_rate(e['rate'])}" for e in data.get("elements", []))
    if result.op == "resolve":
        return str(data.get("summary", ""))
    if result.op == "show_rate":
        return _rate(data.get("startup_rate"))
    if "rate" in data:
        return _rate(data["rate"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _rate(value: Any) -> str:
    if isinstance(value, (int, float)):
        return f"{float(value):.2f}"
    return "-" if value is None else str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "rl.ok"), (f"  {result.op}", "rl.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="rl.key")
    if key == "rate" or key.endswith("_rate"):
        v = Text(_rate(value) if value is not None else "none", style="rl.rate")
    elif key == "path":
        v = Text(str(value), style="rl.path")
    elif key == "combo":
        v = Text(str(value), style="rl.combo")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "rl.error"), (f"  {result.op}", "rl.op"), f" - {msg}"))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Keymap ────────────────────────────────────────────────────────────


def _render_bindings(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    items: list[dict[str, Any]] = data.get("items", [])
    state = "enabled" if data.get("enabled") else "[rl.warning]disabled[/rl.warning]"
    console.print(f"{len(items)} bindings, shortcuts {state}")

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Combo", style="rl.combo", no_wrap=True)
    table.add_column("Action")
    if verbose:
        table.add_column("Type", style="dim")
    for item in items:
        row = [str(item["combo"]), str(item["summary"])]
        if verbose:
            row.append(str(item["action"].get("type", "")))
        table.add_row(*row)
    console.print(table)


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    console.print(Text.assemble((str(data["combo"]), "rl.combo"), f" -> {data['summary']}"))
    if verbose:
        _field(console, "action", data["action"])


# ── Simulation ────────────────────────────────────────────────────────


def _render_simulate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "target_rate", data["target_rate"])

    actions: list[dict[str, Any]] = data.get("actions", [])
    for action in actions:
        mark = "[rl.ok]ok[/rl.ok]" if action["ok"] else f"[rl.error]{action['code']}[/rl.error]"
        console.print(f"  key {action['combo']}: {mark}")

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Element", no_wrap=True)
    table.add_column("Rate", style="rl.rate", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Guard")
    if verbose:
        table.add_column("Raw", justify="right", style="dim")
        table.add_column("Corrections", justify="right")
        table.add_column("Foreign", justify="right")
    for element in data.get("elements", []):
        if not element["connected"]:
            guard = "removed"
        elif not element["guarded"]:
            guard = "off"
        else:
            guard = "intercept" if element["intercepting"] else "degraded"
        row = [
            str(element["id"]),
            _rate(element["rate"]),
            f"{element['current_time']:.1f}",
            guard,
        ]
        if verbose:
            row.extend(
                [
                    _rate(element["raw_rate"]),
                    str(element["corrections"]),
                    str(element["foreign_writes"]),
                ]
            )
        table.add_row(*row)
    console.print(table)

    for message in data.get("notifications", []):
        console.print(f"  [rl.notice]{message}[/rl.notice]")


# ── Config ────────────────────────────────────────────────────────────


def _render_config(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    source = data.get("source")
    console.print(Text(f"# {source}" if source else "# built-in defaults", style="rl.path"))
    for section, values in data.get("config", {}).items():
        console.print(f"\n[bold]\\[{section}][/bold]")
        for key, value in values.items():
            if section == "keyboard" and key == "actions" and not verbose:
                _field(console, key, f"{len(value)} bindings (see `ratelock keys`)")
            else:
                _field(console, key, value)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "list_bindings": _render_bindings,
    "resolve": _render_resolve,
    "simulate": _render_simulate,
    "show_config": _render_config,
}
