"""Set statistics and chronological sort over resolved TimePoints.

Two statistics sub-modes:
- Timestamp mode: dispersion of the instants themselves plus the
  intervals between consecutive sorted points.
- Duration-pair mode: ``compare[i] - base[i]`` for each index up to the
  shorter length, summarized as min/max/mean/median/std_dev/total.

Both need at least two samples; fewer raises INSUFFICIENT_SAMPLES.
"""

from __future__ import annotations

import statistics
from collections.abc import Sequence
from typing import Any

from chronoctl.domain.arithmetic import humanize_ms
from chronoctl.domain.errors import CalcError
from chronoctl.domain.timepoint import TimePoint, format_instant, from_epoch_ms
from chronoctl.domain.types import ErrorCode

MIN_SAMPLES = 2


def require_samples(count: int, what: str) -> None:
    if count < MIN_SAMPLES:
        raise CalcError(
            ErrorCode.INSUFFICIENT_SAMPLES,
            f"{what} requires at least {MIN_SAMPLES} timestamps, got {count}",
            detail={"count": count, "minimum": MIN_SAMPLES},
        )


def _ms_number(value: float) -> int | float:
    """Integral floats become ints; others keep three decimals."""
    if float(value).is_integer():
        return int(value)
    return round(value, 3)


def _measure(value: float) -> dict[str, Any]:
    return {"milliseconds": _ms_number(value), "human_readable": humanize_ms(value)}


def _instant_text(epoch_ms: float, zone: str) -> str:
    return format_instant(from_epoch_ms(epoch_ms, zone))


def timestamp_stats(points: Sequence[TimePoint]) -> dict[str, Any]:
    """Earliest/latest/mean/median/std_dev over instants plus interval stats."""
    require_samples(len(points), "stats")
    zone = points[0].zone
    ordered = sorted(points, key=lambda p: p.epoch_ms)
    values = [p.epoch_ms for p in ordered]
    intervals = [later - earlier for earlier, later in zip(values, values[1:], strict=False)]

    return {
        "mode": "timestamps",
        "count": len(values),
        "timezone": zone,
        "earliest": ordered[0].canonical(),
        "latest": ordered[-1].canonical(),
        "mean": _instant_text(statistics.fmean(values), zone),
        "median": _instant_text(statistics.median(values), zone),
        "std_dev_milliseconds": _ms_number(statistics.pstdev(values)),
        "span": _measure(values[-1] - values[0]),
        "intervals": {
            "count": len(intervals),
            "values_milliseconds": intervals,
            "mean": _measure(statistics.fmean(intervals)),
            "min": _measure(min(intervals)),
            "max": _measure(max(intervals)),
            "total": _measure(sum(intervals)),
        },
    }


def paired_durations(base: Sequence[TimePoint], compare: Sequence[TimePoint]) -> list[int]:
    """``compare[i] - base[i]`` in ms for each index present on both sides."""
    return [
        c.epoch_ms - b.epoch_ms
        for b, c in zip(base, compare, strict=False)
        if b.is_valid and c.is_valid
    ]


def summarize_durations(durations: Sequence[float]) -> dict[str, Any]:
    """min/max/mean/median/std_dev/total of a duration collection."""
    require_samples(len(durations), "duration stats")
    return {
        "mode": "durations",
        "count": len(durations),
        "durations_milliseconds": list(durations),
        "min": _measure(min(durations)),
        "max": _measure(max(durations)),
        "mean": _measure(statistics.fmean(durations)),
        "median": _measure(statistics.median(durations)),
        "std_dev": _measure(statistics.pstdev(durations)),
        "total": _measure(sum(durations)),
    }


def duration_stats(base: Sequence[TimePoint], compare: Sequence[TimePoint]) -> dict[str, Any]:
    """Duration-pair statistics; the base sequence governs the sample check."""
    require_samples(len(base), "stats")
    return summarize_durations(paired_durations(base, compare))


def sort_points(points: Sequence[TimePoint]) -> dict[str, Any]:
    """Stable chronological sort with three parallel views and span metadata."""
    require_samples(len(points), "sort")
    order = sorted(range(len(points)), key=lambda i: points[i].epoch_ms)
    ordered = [points[i] for i in order]
    span = ordered[-1].epoch_ms - ordered[0].epoch_ms

    return {
        "count": len(ordered),
        "original": [p.source for p in ordered],
        "canonical": [p.canonical() for p in ordered],
        "epoch_ms": [p.epoch_ms for p in ordered],
        "order": order,
        "earliest": ordered[0].source,
        "latest": ordered[-1].source,
        "span_milliseconds": span,
        "span_human_readable": humanize_ms(span),
        "timezone": points[0].zone,
    }
