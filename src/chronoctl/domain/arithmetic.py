"""Calendar-aware duration arithmetic and difference decomposition.

Calendar units (years, months, days) move the local wall clock of the
TimePoint's zone; a month shift clamps the day to the target month's
length. Hours and smaller units are fixed-width and are applied on the
absolute timeline, so they see daylight-saving transitions as elapsed time.

The same two primitives drive both directions:

- ``apply_duration``: TimePoint ± DurationSpec.
- ``calendar_breakdown``: cascade ``base → compare`` into calendar units
  anchored on *base* and never overshooting, then fixed units for the
  remainder. Applying the breakdown to *base* lands exactly on *compare*.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from chronoctl.domain.errors import CalcError
from chronoctl.domain.timepoint import TimePoint, to_epoch_ms
from chronoctl.domain.types import ErrorCode

DURATION_UNITS: tuple[str, ...] = (
    "years",
    "months",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
)

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

# Fixed widths; years/months only use these for their fractional part.
_MS_PER_UNIT: dict[str, int] = {
    "years": 365 * MS_PER_DAY,
    "months": 30 * MS_PER_DAY,
    "days": MS_PER_DAY,
    "hours": MS_PER_HOUR,
    "minutes": MS_PER_MINUTE,
    "seconds": MS_PER_SECOND,
    "milliseconds": 1,
}

_SINGULAR: dict[str, str] = {
    "years": "year",
    "months": "month",
    "days": "day",
    "hours": "hour",
    "minutes": "minute",
    "seconds": "second",
    "milliseconds": "millisecond",
}


# ---------------------------------------------------------------------------
# DurationSpec
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DurationSpec:
    """Sparse unit → signed magnitude mapping. Absent units contribute zero."""

    units: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_fields(cls, **fields: Any) -> DurationSpec:
        """Build from keyword unit fields, skipping ``None`` values.

        Raises CalcError(INVALID_ARGUMENTS) for unknown units or values
        that are not finite numbers.
        """
        unknown = sorted(set(fields) - set(DURATION_UNITS))
        if unknown:
            raise CalcError(
                ErrorCode.INVALID_ARGUMENTS,
                f"Unknown duration unit(s): {', '.join(unknown)}",
            )
        units: dict[str, float] = {}
        for unit in DURATION_UNITS:
            value = fields.get(unit)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise CalcError(
                    ErrorCode.INVALID_ARGUMENTS,
                    f"Duration field {unit!r} must be a number, got {value!r}",
                )
            if not math.isfinite(value):
                raise CalcError(
                    ErrorCode.INVALID_ARGUMENTS,
                    f"Duration field {unit!r} must be finite, got {value!r}",
                )
            units[unit] = value
        return cls(units=units)

    @property
    def is_empty(self) -> bool:
        return not self.units

    def require_units(self, operation: str) -> None:
        """Raise EMPTY_DURATION when no unit is present."""
        if self.is_empty:
            raise CalcError(
                ErrorCode.EMPTY_DURATION,
                f"No duration specified for {operation} operation",
            )

    def to_dict(self) -> dict[str, float]:
        return dict(self.units)


# ---------------------------------------------------------------------------
# Wall-clock primitives
# ---------------------------------------------------------------------------


def _localize(wall: datetime, tz: Any) -> datetime:
    """Attach *tz* to a naive wall-clock time and normalize through UTC.

    Ambiguous times take the earlier offset; nonexistent times resolve
    forward by the size of the gap.
    """
    return wall.replace(tzinfo=tz, fold=0).astimezone(UTC).astimezone(tz)


def shift_calendar(local: datetime, *, months: int = 0, days: int = 0) -> datetime:
    """Move the wall clock of *local* by whole months then whole days.

    The day of month is clamped to the target month's length. Raises
    OverflowError when the result leaves the representable year range.
    """
    if months == 0 and days == 0:
        return local
    tz = local.tzinfo
    year, month_index = divmod(local.year * 12 + (local.month - 1) + months, 12)
    month = month_index + 1
    if not 1 <= year <= 9999:
        msg = f"year {year} is out of range"
        raise OverflowError(msg)
    day = min(local.day, calendar.monthrange(year, month)[1])
    wall = local.replace(tzinfo=None, year=year, month=month, day=day) + timedelta(days=days)
    return _localize(wall, tz)


def add_fixed_ms(local: datetime, milliseconds: int) -> datetime:
    """Add fixed milliseconds on the absolute timeline, keeping the zone."""
    if milliseconds == 0:
        return local
    moved = local.astimezone(UTC) + timedelta(milliseconds=milliseconds)
    return moved.astimezone(local.tzinfo)


# ---------------------------------------------------------------------------
# Duration application
# ---------------------------------------------------------------------------


def apply_duration(point: TimePoint, spec: DurationSpec, *, sign: int = 1) -> TimePoint:
    """Return ``point + sign * spec`` in the same zone.

    Integral years/months/days are calendar moves; fractional parts fall
    back to fixed widths (year = 365 days, month = 30 days, day = 24 h).
    Raises ValueError for an invalid point and OverflowError when the
    result is out of range.
    """
    local = point.local()
    whole_months = 0
    whole_days = 0
    fixed_ms = 0.0
    for unit, magnitude in spec.units.items():
        value = magnitude * sign
        if unit in ("years", "months", "days"):
            whole = math.trunc(value)
            if unit == "years":
                whole_months += whole * 12
            elif unit == "months":
                whole_months += whole
            else:
                whole_days += whole
            fixed_ms += (value - whole) * _MS_PER_UNIT[unit]
        else:
            fixed_ms += value * _MS_PER_UNIT[unit]

    shifted = shift_calendar(local, months=whole_months, days=whole_days)
    return point.with_instant(add_fixed_ms(shifted, round(fixed_ms)))


# ---------------------------------------------------------------------------
# Differences
# ---------------------------------------------------------------------------


def calendar_breakdown(
    start: datetime,
    end: datetime,
    *,
    calendar_months: bool = True,
) -> dict[str, int]:
    """Cascade ``end - start`` into calendar then fixed units.

    Calendar units are counted on *start*'s wall clock and anchored on
    *start*; every component carries the sign of ``end - start``.
    """
    end_local = end.astimezone(start.tzinfo)
    sign = 1 if end_local >= start else -1

    def overshoots(candidate: datetime) -> bool:
        return candidate > end_local if sign > 0 else candidate < end_local

    months = 0
    if calendar_months:
        months = (end_local.year * 12 + end_local.month) - (start.year * 12 + start.month)
        if months * sign < 0:
            months = 0
        while months != 0 and overshoots(shift_calendar(start, months=months)):
            months -= sign

    anchor = shift_calendar(start, months=months)
    days = (end_local.date() - anchor.date()).days
    if days * sign < 0:
        days = 0
    while days != 0 and overshoots(shift_calendar(start, months=months, days=days)):
        days -= sign

    cursor = shift_calendar(start, months=months, days=days)
    remainder = abs(to_epoch_ms(end_local) - to_epoch_ms(cursor))
    hours, remainder = divmod(remainder, MS_PER_HOUR)
    minutes, remainder = divmod(remainder, MS_PER_MINUTE)
    seconds, milliseconds = divmod(remainder, MS_PER_SECOND)
    years, months_left = divmod(abs(months), 12)

    parts = {
        "years": years,
        "months": months_left,
        "days": abs(days),
        "hours": hours,
        "minutes": minutes,
        "seconds": seconds,
        "milliseconds": milliseconds,
    }
    if not calendar_months:
        del parts["years"], parts["months"]
    return {unit: value * sign for unit, value in parts.items()}


def diff(base: TimePoint, compare: TimePoint) -> dict[str, Any]:
    """Whole calendar days plus cascading fixed units, and the exact delta.

    Sign follows ``compare - base``.
    """
    parts = calendar_breakdown(base.local(), compare.local(), calendar_months=False)
    return {
        "base_time": base.canonical(),
        "compare_time": compare.canonical(),
        **parts,
        "total_milliseconds": compare.epoch_ms - base.epoch_ms,
    }


def duration_between(base: TimePoint, compare: TimePoint) -> dict[str, Any]:
    """Full years → milliseconds breakdown with a human-readable rendering."""
    parts = calendar_breakdown(base.local(), compare.local(), calendar_months=True)
    return {
        "base_time": base.canonical(),
        "compare_time": compare.canonical(),
        **parts,
        "total_milliseconds": compare.epoch_ms - base.epoch_ms,
        "human_readable": humanize_parts(parts),
    }


# ---------------------------------------------------------------------------
# Human-readable rendering
# ---------------------------------------------------------------------------


def _unit_label(value: int, unit: str) -> str:
    label = _SINGULAR[unit] if abs(value) == 1 else unit
    return f"{value} {label}"


def humanize_parts(parts: dict[str, int]) -> str:
    """Join non-zero units in descending order; milliseconds always appear.

    >>> humanize_parts({"days": 1, "hours": 2, "milliseconds": 0})
    '1 day, 2 hours, 0 milliseconds'
    """
    rendered = [
        _unit_label(parts[unit], unit)
        for unit in DURATION_UNITS
        if unit != "milliseconds" and parts.get(unit)
    ]
    rendered.append(_unit_label(parts.get("milliseconds", 0), "milliseconds"))
    return ", ".join(rendered)


def split_fixed_ms(milliseconds: int) -> dict[str, int]:
    """Cascade a non-negative millisecond count into days → milliseconds."""
    days, rest = divmod(milliseconds, MS_PER_DAY)
    hours, rest = divmod(rest, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds, ms = divmod(rest, MS_PER_SECOND)
    return {
        "days": days,
        "hours": hours,
        "minutes": minutes,
        "seconds": seconds,
        "milliseconds": ms,
    }


def humanize_ms(milliseconds: float) -> str:
    """Render a signed millisecond span; negatives get a leading ``-``.

    >>> humanize_ms(-90_000)
    '-1 minute, 30 seconds, 0 milliseconds'
    """
    value = round(milliseconds)
    text = humanize_parts(split_fixed_ms(abs(value)))
    return f"-{text}" if value < 0 else text
