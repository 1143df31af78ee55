"""MCP tool definitions — time_calculator, get_time, current_time.

Each tool has a ``<name>_impl`` function testable without the mcp package.
``register_tools()`` wraps them with FastMCP decorators.
"""

from __future__ import annotations

from typing import Any

from chronoctl.domain.errors import CalcError
from chronoctl.domain.types import ErrorCode
from chronoctl.services.result import ServiceResult

TimeInput = str | list[str] | None


def _to_mcp_response(result: ServiceResult) -> dict[str, Any]:
    """Convert a ServiceResult to an MCP-friendly dict."""
    response: dict[str, Any] = {
        "ok": result.ok,
        "op": result.op,
        "data": result.data,
    }
    if result.warnings:
        response["warnings"] = result.warnings
    if result.error is not None:
        response["error"] = {
            "code": result.error.code,
            "message": result.error.message,
        }
        if result.error.detail:
            response["error"]["detail"] = result.error.detail
    if result.meta:
        response["meta"] = result.meta
    return response


def _pick_alias(name: str, value: Any, alias: str, alias_value: Any) -> Any:
    """Merge a field with its legacy alias; supplying both is an error."""
    if value is not None and alias_value is not None:
        raise CalcError(
            ErrorCode.INVALID_ARGUMENTS,
            f"Pass either {name} or {alias}, not both",
        )
    return value if value is not None else alias_value


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------


def time_calculator_impl(
    settings: Any,
    operation: str,
    *,
    interaction_mode: str | None = "auto_detect",
    base_time: TimeInput = None,
    compare_time: TimeInput = None,
    target_time: TimeInput = None,
    timezone: str | None = None,
    compare_time_timezone: str | None = None,
    target_time_timezone: str | None = None,
    years: float | None = None,
    months: float | None = None,
    days: float | None = None,
    hours: float | None = None,
    minutes: float | None = None,
    seconds: float | None = None,
    milliseconds: float | None = None,
    clock: Any = None,
) -> dict[str, Any]:
    """Run the batch time calculator."""
    from chronoctl.services.calculator import OP_NAME, CalculatorService

    try:
        compare = _pick_alias("compare_time", compare_time, "target_time", target_time)
        compare_tz = _pick_alias(
            "compare_time_timezone",
            compare_time_timezone,
            "target_time_timezone",
            target_time_timezone,
        )
    except CalcError as exc:
        return _to_mcp_response(ServiceResult.failure(OP_NAME, exc))

    result = CalculatorService(settings, clock=clock).execute(
        operation,
        interaction_mode=interaction_mode,
        base_time=base_time,
        compare_time=compare,
        timezone=timezone,
        compare_time_timezone=compare_tz,
        years=years,
        months=months,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        milliseconds=milliseconds,
    )
    return _to_mcp_response(result)


def get_time_impl(
    settings: Any,
    *,
    datetime: str | None = None,
    timezone: str | None = None,
    timezones: list[str] | None = None,
    include_offsets: bool = False,
    comparisons: list[str] | None = None,
    formats: list[str] | None = None,
    locale: str | None = None,
    clock: Any = None,
) -> dict[str, Any]:
    """Convert one instant (default: now) across zones."""
    from chronoctl.services.clock import ClockService

    result = ClockService(settings, clock=clock).get_time(
        datetime,
        timezone=timezone,
        timezones=timezones,
        include_offsets=include_offsets,
        comparisons=comparisons,
        formats=formats,
        locale=locale,
    )
    return _to_mcp_response(result)


def current_time_impl(
    settings: Any,
    *,
    timezone: str | None = None,
    format: str = "iso",
    locale: str | None = None,
    clock: Any = None,
) -> dict[str, Any]:
    """The current time in one zone and format."""
    from chronoctl.services.clock import ClockService

    result = ClockService(settings, clock=clock).current_time(timezone, format, locale)
    return _to_mcp_response(result)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def register_tools(server: Any, settings: Any) -> None:
    """Register the three MCP tools on the FastMCP server."""

    @server.tool()  # type: ignore[untyped-decorator]
    def time_calculator(
        operation: str,
        interaction_mode: str = "auto_detect",
        base_time: str | list[str] | None = None,
        compare_time: str | list[str] | None = None,
        target_time: str | list[str] | None = None,
        timezone: str | None = None,
        compare_time_timezone: str | None = None,
        target_time_timezone: str | None = None,
        years: float | None = None,
        months: float | None = None,
        days: float | None = None,
        hours: float | None = None,
        minutes: float | None = None,
        seconds: float | None = None,
        milliseconds: float | None = None,
    ) -> dict[str, Any]:
        """Time arithmetic over one or many timestamps.

        Operations: add, subtract, diff, duration_between, stats, sort.
        base_time/compare_time accept a single ISO 8601 string, an array,
        or a JSON array literal. interaction_mode: auto_detect,
        single_to_single, single_to_many, many_to_single, pairwise,
        cross_product, aggregate. At most 10,000 operations per call.
        """
        return time_calculator_impl(
            settings,
            operation,
            interaction_mode=interaction_mode,
            base_time=base_time,
            compare_time=compare_time,
            target_time=target_time,
            timezone=timezone,
            compare_time_timezone=compare_time_timezone,
            target_time_timezone=target_time_timezone,
            years=years,
            months=months,
            days=days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            milliseconds=milliseconds,
        )

    @server.tool()  # type: ignore[untyped-decorator]
    def get_time(
        datetime: str | None = None,
        timezone: str | None = None,
        timezones: list[str] | None = None,
        include_offsets: bool = False,
        comparisons: list[str] | None = None,
        formats: list[str] | None = None,
        locale: str | None = None,
    ) -> dict[str, Any]:
        """Convert a time (default: now) into other zones and diff comparisons against it.

        ``formats`` renders the base time in each named format (iso, rfc2822,
        http, sql, local, localeString, short, medium, long, full); the
        locale-aware ones use ``locale`` (default en-US).
        """
        return get_time_impl(
            settings,
            datetime=datetime,
            timezone=timezone,
            timezones=timezones,
            include_offsets=include_offsets,
            comparisons=comparisons,
            formats=formats,
            locale=locale,
        )

    @server.tool()  # type: ignore[untyped-decorator]
    def current_time(
        timezone: str | None = None, format: str = "iso", locale: str | None = None
    ) -> dict[str, Any]:
        """Current time in a zone.

        Formats: iso, rfc2822, http, sql, local, and the locale-aware
        localeString, short, medium, long, full (rendered in ``locale``).
        """
        return current_time_impl(settings, timezone=timezone, format=format, locale=locale)
