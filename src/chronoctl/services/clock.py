"""ClockService: single-instant formatting and multi-zone conversion.

``current_time`` renders the injected clock in one zone and format.
``get_time`` converts one instant into several zones and diffs a list of
comparison timestamps against it, reusing the calculator's ``diff``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from email.utils import format_datetime
from typing import Any

import structlog
from babel import Locale, UnknownLocaleError, dates

from chronoctl.domain.arithmetic import diff
from chronoctl.domain.errors import CalcError
from chronoctl.domain.planner import check_ceiling
from chronoctl.domain.timepoint import (
    format_instant,
    get_zone,
    is_valid_timezone,
    resolve_timestamp,
    timepoint_at,
    to_epoch_ms,
)
from chronoctl.domain.types import ErrorCode
from chronoctl.services.base import BaseService
from chronoctl.services.calculator import check_timezone
from chronoctl.services.contracts import CurrentTimeData, GetTimeData, dump_validated
from chronoctl.services.result import ServiceResult
from chronoctl.services.telemetry import trace_span, traced

log = structlog.get_logger(__name__)

# CLDR datetime lengths behind the locale-aware formats.
LOCALE_FORMATS: dict[str, str] = {
    "localeString": "long",
    "short": "short",
    "medium": "medium",
    "long": "long",
    "full": "full",
}
TIME_FORMATS: tuple[str, ...] = ("iso", "rfc2822", "http", "sql", "local", *LOCALE_FORMATS)
DEFAULT_LOCALE = "en_US"


def _offset_text(local: datetime) -> str:
    offset = local.strftime("%z")
    return f"{offset[:3]}:{offset[3:]}" if offset else "+00:00"


def parse_locale(name: str | None) -> Locale:
    """Parse a BCP 47 or POSIX locale tag, defaulting to :data:`DEFAULT_LOCALE`."""
    tag = (name or DEFAULT_LOCALE).replace("-", "_")
    try:
        return Locale.parse(tag)
    except (ValueError, UnknownLocaleError) as exc:
        raise CalcError(
            ErrorCode.INVALID_ARGUMENTS,
            f"Unknown locale: {name!r}",
            detail={"field": "locale", "value": name},
        ) from exc


def format_time(local: datetime, fmt: str, locale: str | Locale | None = None) -> str:
    """Render an aware datetime in one of :data:`TIME_FORMATS`.

    The :data:`LOCALE_FORMATS` names go through Babel in *locale*; the
    others ignore it.

    >>> from datetime import UTC, datetime
    >>> format_time(datetime(2024, 1, 15, 10, 0, tzinfo=UTC), "http")
    'Mon, 15 Jan 2024 10:00:00 GMT'
    """
    match fmt:
        case "iso":
            return format_instant(local)
        case "rfc2822":
            return format_datetime(local)
        case "http":
            return format_datetime(local.astimezone(UTC), usegmt=True)
        case "sql":
            millis = local.microsecond // 1000
            return f"{local:%Y-%m-%d %H:%M:%S}.{millis:03d} {_offset_text(local)}"
        case "local":
            return f"{local:%Y-%m-%d %H:%M:%S} {local.tzname()}"
        case _ if fmt in LOCALE_FORMATS:
            if not isinstance(locale, Locale):
                locale = parse_locale(locale)
            return dates.format_datetime(local, format=LOCALE_FORMATS[fmt], locale=locale)
        case _:
            allowed = ", ".join(TIME_FORMATS)
            raise CalcError(
                ErrorCode.INVALID_ARGUMENTS,
                f"Unknown format: {fmt!r}. Allowed: {allowed}",
            )


def _wall_clock(local: datetime) -> str:
    """ISO 8601 wall-clock text without the UTC offset."""
    return local.replace(tzinfo=None).isoformat(timespec="milliseconds")


class ClockService(BaseService):
    """Read the clock and convert instants between zones."""

    @traced
    def current_time(
        self, timezone: str | None = None, fmt: str = "iso", locale: str | None = None
    ) -> ServiceResult:
        """The current time in *timezone* (default zone when omitted)."""
        now = self._now()
        try:
            check_timezone(timezone, "timezone")
            cldr = parse_locale(locale)
            zone = timezone or self.default_zone
            point = timepoint_at(now, zone)
            text = format_time(point.local(), fmt, cldr)
        except CalcError as exc:
            return ServiceResult.failure("current_time", exc)

        payload: dict[str, Any] = {
            "time": text,
            "timezone": zone,
            "format": fmt,
            "epoch_ms": point.epoch_ms,
        }
        if locale:
            payload["locale"] = str(cldr)
        data = dump_validated(CurrentTimeData, payload)
        return ServiceResult(ok=True, op="current_time", data=data)

    @traced
    def get_time(
        self,
        datetime_text: str | None = None,
        *,
        timezone: str | None = None,
        timezones: list[str] | None = None,
        include_offsets: bool = False,
        comparisons: list[str] | None = None,
        formats: list[str] | None = None,
        locale: str | None = None,
    ) -> ServiceResult:
        """Convert one instant into *timezones* and diff *comparisons* against it.

        Each name in *formats* renders the base instant into ``formatted``;
        the locale-aware ones use *locale*.

        Unknown target zones are reported in ``invalid_timezones`` rather
        than failing the call. A comparison that does not parse is recorded
        on its own entry.
        """
        now = self._now()
        targets = list(timezones or [])
        others = list(comparisons or [])
        try:
            check_timezone(timezone, "timezone")
            check_ceiling(
                len(targets) + len(others),
                self._settings.calc.max_operations,
                what="summed timezone and comparison count",
            )
            zone = timezone or self.default_zone
            if datetime_text:
                base = resolve_timestamp(datetime_text, timezone, default_zone=self.default_zone)
                if not base.is_valid:
                    raise CalcError(
                        ErrorCode.INVALID_TIMESTAMP,
                        f"Invalid datetime format: {datetime_text} - {base.invalid_reason}",
                        detail={"field": "datetime", "value": datetime_text},
                    )
            else:
                base = timepoint_at(now, zone)
            cldr = parse_locale(locale)
            formatted = {fmt: format_time(base.local(), fmt, cldr) for fmt in formats or []}
        except CalcError as exc:
            return ServiceResult.failure("get_time", exc)

        conversions: dict[str, str] = {}
        invalid: list[str] = []
        with trace_span("convert"):
            for target in targets:
                if not is_valid_timezone(target):
                    invalid.append(target)
                    continue
                local = base.local().astimezone(get_zone(target))
                render = format_instant if include_offsets else _wall_clock
                conversions[target] = render(local)

        results: dict[str, dict[str, Any]] = {}
        with trace_span("compare"):
            for text in others:
                other = resolve_timestamp(text, timezone, default_zone=self.default_zone)
                if not other.is_valid:
                    message = f"Invalid comparison format: {text} - {other.invalid_reason}"
                    results[text] = {
                        "ok": False,
                        "error": {"code": ErrorCode.INVALID_TIMESTAMP.value, "message": message},
                    }
                    continue
                results[text] = {"ok": True, **diff(base, other)}

        warnings = [f"Invalid timezone: {name}" for name in invalid]
        log.debug("clock.get_time", zones=len(conversions), comparisons=len(results))
        payload: dict[str, Any] = {
            "base_time": base.canonical(),
            "timezone": zone,
            "epoch_ms": to_epoch_ms(base.local()),
            "conversions": conversions,
            "invalid_timezones": invalid,
            "comparisons": results,
        }
        if formats:
            payload["formatted"] = formatted
        if locale:
            payload["locale"] = str(cldr)
        data = dump_validated(GetTimeData, payload)
        return ServiceResult(ok=True, op="get_time", data=data, warnings=warnings)
