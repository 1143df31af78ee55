"""Typed payload contracts for service and adapter boundaries.

These models validate payload shapes before they leave the service layer
so key regressions (for example ``results`` vs ``items``, or a missing
``metadata`` block) fail fast in tests and during development.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict.

    Optional keys absent from *data* stay absent in the output.
    """
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python", exclude_unset=True)


# ---------------------------------------------------------------------------
# Per-operation payloads
# ---------------------------------------------------------------------------


class ShiftPayload(BaseModel):
    """Result of applying a duration (add/subtract) to one timestamp."""

    model_config = ConfigDict(extra="forbid")

    input: str
    base_time: str
    result: str
    result_timezone: str
    source: Literal["base", "compare"] | None = None


class DiffPayload(BaseModel):
    """Whole calendar days plus cascading fixed units."""

    model_config = ConfigDict(extra="allow")

    base_time: str
    compare_time: str
    days: int
    hours: int
    minutes: int
    seconds: int
    milliseconds: int
    total_milliseconds: int


class DurationPayload(DiffPayload):
    """Full years-to-milliseconds breakdown."""

    years: int
    months: int
    human_readable: str


class Measure(BaseModel):
    """A duration rendered both as a number and as text."""

    milliseconds: int | float
    human_readable: str


class DurationStatsPayload(BaseModel):
    """Duration-pair statistics over ``compare[i] - base[i]``."""

    mode: Literal["durations"]
    count: int
    durations_milliseconds: list[int | float]
    min: Measure
    max: Measure
    mean: Measure
    median: Measure
    std_dev: Measure
    total: Measure


class IntervalStats(BaseModel):
    count: int
    values_milliseconds: list[int]
    mean: Measure
    min: Measure
    max: Measure
    total: Measure


class TimestampStatsPayload(BaseModel):
    """Dispersion of a set of instants."""

    mode: Literal["timestamps"]
    count: int
    timezone: str
    earliest: str
    latest: str
    mean: str
    median: str
    std_dev_milliseconds: int | float
    span: Measure
    intervals: IntervalStats


class SortPayload(BaseModel):
    """Chronological order in three parallel views."""

    count: int
    original: list[str]
    canonical: list[str]
    epoch_ms: list[int]
    order: list[int]
    earliest: str
    latest: str
    span_milliseconds: int
    span_human_readable: str
    timezone: str


# ---------------------------------------------------------------------------
# Calculator envelopes
# ---------------------------------------------------------------------------


class InputEcho(BaseModel):
    base_time: list[str]
    compare_time: list[str] | None = None
    duration: dict[str, float] | None = None


class ZoneEcho(BaseModel):
    base: str
    compare: str


class DebugInfo(BaseModel):
    calculation_time: str
    resolution_zone: str
    operation_count: int


class CalcMetadata(BaseModel):
    """Metadata attached to every calculator response."""

    input: InputEcho
    timezones: ZoneEcho
    interaction_mode: str
    debug: DebugInfo | None = None


class BatchItemError(BaseModel):
    code: str
    message: str


class BatchItem(BaseModel):
    """One entry of a batch ``results`` array; payload fields ride along."""

    model_config = ConfigDict(extra="allow")

    index: int
    ok: bool
    error: BatchItemError | None = None


class CalcSingleData(BaseModel):
    """Payload contract for a calculator call whose operation count is 1."""

    operation: str
    result: dict[str, Any]
    metadata: CalcMetadata


class CalcBatchData(BaseModel):
    """Payload contract for a calculator call with a ``results`` array."""

    operation: str
    count: int
    results: list[BatchItem]
    interaction_mode: str
    metadata: CalcMetadata
    aggregate: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Clock payloads
# ---------------------------------------------------------------------------


class CurrentTimeData(BaseModel):
    """Payload contract for ``ClockService.current_time``."""

    time: str
    timezone: str
    format: str
    epoch_ms: int
    locale: str | None = None


class ComparisonEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    ok: bool


class GetTimeData(BaseModel):
    """Payload contract for ``ClockService.get_time``."""

    base_time: str
    timezone: str
    epoch_ms: int
    conversions: dict[str, str] = Field(default_factory=dict)
    invalid_timezones: list[str] = Field(default_factory=list)
    comparisons: dict[str, ComparisonEntry] = Field(default_factory=dict)
    formatted: dict[str, str] | None = None
    locale: str | None = None
