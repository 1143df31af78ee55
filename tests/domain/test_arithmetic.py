"""Tests for calendar-aware duration arithmetic and difference breakdowns."""

from __future__ import annotations

from typing import Any

import pytest

from chronoctl.domain.arithmetic import (
    DurationSpec,
    apply_duration,
    calendar_breakdown,
    diff,
    duration_between,
    humanize_ms,
    humanize_parts,
    split_fixed_ms,
)
from chronoctl.domain.errors import CalcError
from chronoctl.domain.timepoint import TimePoint, resolve_timestamp
from chronoctl.domain.types import ErrorCode

NY = "America/New_York"


def _tp(text: str, zone: str | None = None) -> TimePoint:
    point = resolve_timestamp(text, zone)
    assert point.is_valid, point.invalid_reason
    return point


def _shift(text: str, zone: str | None = None, *, sign: int = 1, **units: Any) -> str:
    return apply_duration(_tp(text, zone), DurationSpec.from_fields(**units), sign=sign).canonical()


# ---------------------------------------------------------------------------
# DurationSpec
# ---------------------------------------------------------------------------


class TestDurationSpec:
    def test_skips_none(self) -> None:
        spec = DurationSpec.from_fields(days=1, hours=None)
        assert spec.units == {"days": 1}
        assert not spec.is_empty

    def test_empty_spec(self) -> None:
        spec = DurationSpec.from_fields(years=None)
        assert spec.is_empty
        with pytest.raises(CalcError) as exc_info:
            spec.require_units("add")
        assert exc_info.value.code is ErrorCode.EMPTY_DURATION

    def test_zero_is_a_present_unit(self) -> None:
        spec = DurationSpec.from_fields(days=0)
        spec.require_units("add")
        assert spec.to_dict() == {"days": 0}

    @pytest.mark.parametrize(
        "fields",
        [{"days": "x"}, {"days": True}, {"hours": float("nan")}, {"weeks": 1}],
        ids=["string", "bool", "nan", "unknown-unit"],
    )
    def test_rejects_bad_fields(self, fields: dict[str, Any]) -> None:
        with pytest.raises(CalcError) as exc_info:
            DurationSpec.from_fields(**fields)
        assert exc_info.value.code is ErrorCode.INVALID_ARGUMENTS


# ---------------------------------------------------------------------------
# apply_duration
# ---------------------------------------------------------------------------


class TestApplyDuration:
    def test_mixed_units_across_dst(self) -> None:
        result = _shift(
            "2024-01-15T10:00:00Z",
            NY,
            years=1,
            months=2,
            days=5,
            hours=3,
            minutes=30,
            seconds=45,
        )
        assert result == "2025-03-20T08:30:45.000-04:00"

    def test_month_end_clamps_in_leap_year(self) -> None:
        assert _shift("2024-01-31T00:00:00Z", months=1) == "2024-02-29T00:00:00.000Z"

    def test_month_end_clamps_to_thirty_days(self) -> None:
        assert _shift("2023-03-31T00:00:00Z", months=1) == "2023-04-30T00:00:00.000Z"

    def test_leap_day_plus_one_year(self) -> None:
        assert _shift("2024-02-29T12:00:00Z", years=1) == "2025-02-28T12:00:00.000Z"

    def test_subtract(self) -> None:
        result = _shift("2024-07-15T14:00:00", NY, sign=-1, months=2, days=5)
        assert result == "2024-05-10T14:00:00.000-04:00"

    def test_fractional_day_spills_into_hours(self) -> None:
        assert _shift("2024-01-01T00:00:00Z", days=1.5) == "2024-01-02T12:00:00.000Z"

    def test_milliseconds(self) -> None:
        assert _shift("2024-01-01T00:00:00Z", milliseconds=1500) == "2024-01-01T00:00:01.500Z"

    def test_negative_units_move_backwards(self) -> None:
        assert _shift("2024-03-01T00:00:00Z", days=-1) == "2024-02-29T00:00:00.000Z"

    def test_calendar_day_keeps_wall_clock_over_dst(self) -> None:
        assert _shift("2024-03-10T00:00:00", NY, days=1) == "2024-03-11T00:00:00.000-04:00"

    def test_fixed_hours_are_elapsed_time_over_dst(self) -> None:
        assert _shift("2024-03-10T00:00:00", NY, hours=24) == "2024-03-11T01:00:00.000-04:00"

    def test_zone_is_preserved(self) -> None:
        shifted = apply_duration(_tp("2024-01-01T00:00:00", NY), DurationSpec({"hours": 1}))
        assert shifted.zone == NY

    def test_overflow(self) -> None:
        with pytest.raises(OverflowError):
            apply_duration(_tp("9999-12-31T00:00:00Z"), DurationSpec({"years": 1}))


# ---------------------------------------------------------------------------
# diff / duration_between
# ---------------------------------------------------------------------------


class TestDiff:
    def test_breakdown(self) -> None:
        result = diff(_tp("2024-01-01T10:00:00Z"), _tp("2024-01-03T14:30:15.250Z"))
        assert result["days"] == 2
        assert result["hours"] == 4
        assert result["minutes"] == 30
        assert result["seconds"] == 15
        assert result["milliseconds"] == 250
        assert result["total_milliseconds"] == 189_015_250
        assert "years" not in result

    def test_sign_follows_compare_minus_base(self) -> None:
        a = _tp("2024-01-01T10:00:00Z")
        b = _tp("2024-01-03T14:30:15.250Z")
        forward = diff(a, b)
        backward = diff(b, a)
        assert backward["total_milliseconds"] == -forward["total_milliseconds"]
        for unit in ("days", "hours", "minutes", "seconds", "milliseconds"):
            assert backward[unit] == -forward[unit]

    def test_two_hours(self) -> None:
        result = diff(_tp("2024-01-01T10:00:00Z"), _tp("2024-01-01T12:00:00Z"))
        assert result["hours"] == 2
        assert result["total_milliseconds"] == 7_200_000

    def test_equal_instants(self) -> None:
        result = diff(_tp("2024-01-01T10:00:00Z"), _tp("2024-01-01T11:00:00+01:00"))
        assert result["total_milliseconds"] == 0
        assert result["days"] == 0


class TestDurationBetween:
    def test_full_breakdown(self) -> None:
        base = _tp("2024-01-15T08:30:00Z", NY)
        compare = _tp("2025-03-20T14:45:30Z", NY)
        result = duration_between(base, compare)
        assert (result["years"], result["months"], result["days"]) == (1, 2, 5)
        assert (result["hours"], result["minutes"], result["seconds"]) == (7, 15, 30)
        assert result["milliseconds"] == 0
        assert result["total_milliseconds"] == 37_174_530_000
        assert result["human_readable"] == (
            "1 year, 2 months, 5 days, 7 hours, 15 minutes, 30 seconds, 0 milliseconds"
        )

    def test_month_anchor_does_not_overshoot(self) -> None:
        result = duration_between(_tp("2024-01-31T00:00:00Z"), _tp("2024-03-01T00:00:00Z"))
        assert (result["months"], result["days"]) == (1, 1)

    def test_negative_direction(self) -> None:
        result = duration_between(_tp("2024-03-01T00:00:00Z"), _tp("2024-01-31T00:00:00Z"))
        assert (result["months"], result["days"]) == (-1, -1)
        assert result["human_readable"].startswith("-1 month, -1 day")

    def test_dst_day_counts_as_one_calendar_day(self) -> None:
        result = duration_between(
            _tp("2024-03-10T00:00:00", NY), _tp("2024-03-11T00:00:00", NY)
        )
        assert result["days"] == 1
        assert result["hours"] == 0
        assert result["total_milliseconds"] == 23 * 3_600_000

    def test_partial_dst_day_is_elapsed_hours(self) -> None:
        result = duration_between(
            _tp("2024-03-10T00:00:00", NY), _tp("2024-03-10T23:00:00", NY)
        )
        assert result["days"] == 0
        assert result["hours"] == 22


@pytest.mark.parametrize(
    "base,compare,zone",
    [
        ("2024-01-31T00:00:00Z", "2024-03-01T00:00:00Z", None),
        ("2024-03-01T00:00:00Z", "2024-01-31T00:00:00Z", None),
        ("2024-01-15T08:30:00Z", "2025-03-20T14:45:30.123Z", NY),
        ("2024-03-09T12:00:00", "2024-11-03T01:30:00", NY),
        ("2020-02-29T23:59:59.999Z", "2024-02-28T00:00:00Z", "Asia/Tokyo"),
        ("2024-10-27T00:30:00", "2023-03-26T03:15:00", "Europe/London"),
    ],
)
def test_breakdown_applied_to_base_lands_on_compare(
    base: str, compare: str, zone: str | None
) -> None:
    b, c = _tp(base, zone), _tp(compare, zone)
    parts = calendar_breakdown(b.local(), c.local())
    landed = apply_duration(b, DurationSpec(units=dict(parts)))
    assert landed.epoch_ms == c.epoch_ms


# ---------------------------------------------------------------------------
# Human-readable rendering
# ---------------------------------------------------------------------------


class TestHumanize:
    def test_singular_and_plural(self) -> None:
        parts = {"days": 1, "hours": 2, "milliseconds": 1}
        assert humanize_parts(parts) == "1 day, 2 hours, 1 millisecond"

    def test_zero_units_are_skipped(self) -> None:
        assert humanize_parts({"years": 0, "days": 3, "milliseconds": 0}) == (
            "3 days, 0 milliseconds"
        )

    def test_milliseconds_always_present(self) -> None:
        assert humanize_ms(0) == "0 milliseconds"

    def test_week(self) -> None:
        assert humanize_ms(604_800_000) == "7 days, 0 milliseconds"

    def test_negative(self) -> None:
        assert humanize_ms(-90_000) == "-1 minute, 30 seconds, 0 milliseconds"

    def test_split_fixed_ms(self) -> None:
        assert split_fixed_ms(90_061_001) == {
            "days": 1,
            "hours": 1,
            "minutes": 1,
            "seconds": 1,
            "milliseconds": 1,
        }
