"""Human and quiet renderers for calculator and clock results.

One renderer per ``result.op`` (``time_calculator``, ``current_time``,
``get_time``); anything else prints its data as ``key: value`` lines.
Calculator payloads are further split by operation: shifted times,
difference breakdowns, sorted tables and statistics.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from chronoctl.output.console import create_console, get_output, style_for_source

if TYPE_CHECKING:
    from rich.console import Console

    from chronoctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Draw *result* on a fresh buffered console and return the text.

    Colour codes are only emitted when Rich sees a terminal.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: one value per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    d = result.data
    if result.op == "time_calculator":
        operation = str(d.get("operation", ""))
        if "result" in d:
            return _quiet_payload(operation, d["result"])
        return "\n".join(_item_summary(operation, item) for item in d.get("results", []))
    if result.op == "current_time":
        return str(d.get("time", ""))
    if result.op == "get_time":
        conversions = d.get("conversions", {})
        if conversions:
            return "\n".join(f"{zone} {value}" for zone, value in conversions.items())
        return str(d.get("base_time", ""))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _quiet_payload(operation: str, payload: dict[str, Any]) -> str:
    if operation == "sort":
        return "\n".join(str(v) for v in payload.get("canonical", []))
    if operation == "stats":
        return _json.dumps(payload, separators=(",", ":"))
    return _payload_summary(operation, payload)


def _payload_summary(operation: str, payload: dict[str, Any]) -> str:
    """One-line summary of a calculator payload."""
    if operation in ("add", "subtract"):
        return str(payload.get("result", ""))
    if operation == "diff":
        return f"{payload.get('total_milliseconds', '')}ms"
    if operation == "duration_between":
        return str(payload.get("human_readable", ""))
    return _json.dumps(payload, separators=(",", ":"))


def _item_summary(operation: str, item: dict[str, Any]) -> str:
    if not item.get("ok"):
        err = item.get("error") or {}
        return f"ERROR {err.get('code', '?')}: {err.get('message', '')}"
    return _payload_summary(operation, item)


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="chrono.ok")
    op = Text(f"  {result.op}", style="chrono.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="chrono.key")
    if key.endswith("_time") or key in ("result", "earliest", "latest", "mean", "median"):
        v = Text(str(value), style="chrono.time")
    elif key.endswith("timezone") or key == "zone":
        v = Text(str(value), style="chrono.zone")
    elif key == "human_readable" or key.endswith("_human_readable"):
        v = Text(str(value), style="chrono.duration")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
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
    """Render a hierarchical span tree with color-coded timing."""
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
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _render_metadata(console: Console, metadata: dict[str, Any]) -> None:
    """Print the calculator metadata block (verbose only)."""
    console.print()
    console.print(Text("  metadata:", style="dim"))
    zones = metadata.get("timezones", {})
    console.print(f"    timezones: base={zones.get('base')} compare={zones.get('compare')}")
    for key, value in metadata.get("input", {}).items():
        console.print(Text(f"    {key}: {_json.dumps(value, separators=(',', ':'))}"))
    debug = metadata.get("debug")
    if debug:
        for key, value in debug.items():
            console.print(f"    {key}: {value}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="chrono.error")
    op = Text(f"  {result.op}", style="chrono.op")
    sep = Text(" — ")
    code = Text(f"[{err.code}] " if err else "", style="chrono.warning")
    console.print(label, op, sep, code, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Calculator renderers ──────────────────────────────────────────────


def _render_calculator(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a time_calculator result: inline payload or a batch table."""
    d = result.data
    _status_line(console, result)
    _field(console, "operation", d.get("operation", ""))

    if "result" in d:
        _render_payload(console, str(d.get("operation", "")), d["result"])
    else:
        _field(console, "interaction_mode", d.get("interaction_mode", ""))
        _field(console, "count", d.get("count", 0))
        console.print()
        console.print(_batch_table(str(d.get("operation", "")), d.get("results", [])))
        aggregate = d.get("aggregate")
        if aggregate:
            console.print()
            console.print(Text("  aggregate:", style="chrono.key"))
            for key in ("count", "min", "max", "mean", "median", "std_dev", "total"):
                value = aggregate.get(key)
                if isinstance(value, dict):
                    value = value.get("human_readable", value)
                if value is not None:
                    _field(console, f"  {key}", value)

    if verbose:
        _render_metadata(console, d.get("metadata", {}))
        _render_meta(console, result)


def _render_payload(console: Console, operation: str, payload: dict[str, Any]) -> None:
    if operation == "sort":
        for key in ("count", "earliest", "latest", "span_human_readable", "timezone"):
            _field(console, key, payload.get(key, ""))
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("#", style="chrono.index", justify="right")
        table.add_column("Canonical", style="chrono.time")
        table.add_column("Original")
        table.add_column("From index", justify="right")
        rows = zip(
            payload.get("canonical", []),
            payload.get("original", []),
            payload.get("order", []),
            strict=False,
        )
        for pos, (canonical, original, origin) in enumerate(rows):
            table.add_row(str(pos), str(canonical), str(original), str(origin))
        console.print(table)
        return

    for key, value in payload.items():
        if isinstance(value, dict) and "human_readable" in value:
            value = value["human_readable"]
        _field(console, key, value)


def _batch_table(operation: str, items: list[dict[str, Any]]) -> Table:
    """Build a Rich Table with one row per batch item."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", style="chrono.index", justify="right")
    table.add_column("OK")
    if operation in ("add", "subtract"):
        table.add_column("Source")
        table.add_column("Input")
    else:
        table.add_column("Base", style="chrono.time")
        table.add_column("Compare", style="chrono.zone")
    table.add_column("Result")

    for item in items:
        ok = bool(item.get("ok"))
        status = Text("ok" if ok else "error", style="chrono.ok" if ok else "chrono.error")
        if operation in ("add", "subtract"):
            source = str(item.get("source", ""))
            left: list[Any] = [
                Text(source, style=style_for_source(source)),
                str(item.get("input", item.get("base_time") or item.get("compare_time") or "")),
            ]
        else:
            left = [str(item.get("base_time", "")), str(item.get("compare_time", ""))]
        if ok:
            outcome = Text(_payload_summary(operation, item))
        else:
            err = item.get("error") or {}
            message = f"{err.get('code', '?')}: {err.get('message', '')}"
            outcome = Text(message, style="chrono.error")
        table.add_row(str(item.get("index", "")), status, *left, outcome)

    return table


# ── Clock renderers ───────────────────────────────────────────────────


def _render_current_time(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render the current time in the requested zone and format."""
    d = result.data
    _status_line(console, result)
    for key in ("time", "timezone", "format"):
        _field(console, key, d.get(key, ""))
    if d.get("locale"):
        _field(console, "locale", d["locale"])
    if verbose:
        _field(console, "epoch_ms", d.get("epoch_ms", ""))
        _render_meta(console, result)


def _render_get_time(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a multi-zone conversion with optional comparisons."""
    d = result.data
    _status_line(console, result)
    _field(console, "base_time", d.get("base_time", ""))
    _field(console, "timezone", d.get("timezone", ""))
    for fmt, text in (d.get("formatted") or {}).items():
        _field(console, fmt, text)

    conversions = d.get("conversions", {})
    if conversions:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Zone", style="chrono.zone")
        table.add_column("Time", style="chrono.time")
        for zone, value in conversions.items():
            table.add_row(zone, str(value))
        console.print(table)

    for zone in d.get("invalid_timezones", []):
        console.print(f"  [chrono.warning]invalid timezone[/chrono.warning] {zone}")

    comparisons = d.get("comparisons", {})
    if comparisons:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Compare", style="chrono.time")
        table.add_column("Difference")
        for value, entry in comparisons.items():
            if entry.get("ok"):
                table.add_row(value, f"{entry.get('total_milliseconds', '')}ms")
            else:
                err = entry.get("error") or {}
                table.add_row(value, Text(str(err.get("message", "")), style="chrono.error"))
        console.print(table)

    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "time_calculator": _render_calculator,
    "current_time": _render_current_time,
    "get_time": _render_get_time,
}
