"""Batch runner: dispatch resolved sequences through the executors.

A run moves through a small state machine::

    PLANNING -> RESOLVING -> EXECUTING -> ASSEMBLING -> DONE
         \\            \\
          +-> ABORTED  +-> ABORTED

PLANNING and RESOLVING failures abort the whole request with one
CalcError. Once EXECUTING, every unit of work is evaluated on its own and
failures are captured as :class:`ItemError` on their index, so one bad
element never hides the results of its neighbours.

Resolution policy:
- pairwise/aggregate carry invalid TimePoints forward as per-item errors;
- every other paired mode fails fast on the first invalid timestamp;
- add/subtract record every invalid element on its own index;
- stats/sort fail fast.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import structlog

from chronoctl.domain.arithmetic import DurationSpec, apply_duration, diff, duration_between
from chronoctl.domain.errors import CalcError
from chronoctl.domain.planner import (
    MAX_OPERATIONS,
    OperationPlan,
    check_ceiling,
    parse_mode,
    plan_interaction,
    resolve_requested,
)
from chronoctl.domain.stats import (
    MIN_SAMPLES,
    duration_stats,
    require_samples,
    sort_points,
    summarize_durations,
    timestamp_stats,
)
from chronoctl.domain.timepoint import DEFAULT_ZONE, TimePoint, resolve_timestamp
from chronoctl.domain.types import ErrorCode, InteractionMode, Operation
from chronoctl.services.contracts import (
    DiffPayload,
    DurationPayload,
    DurationStatsPayload,
    ShiftPayload,
    SortPayload,
    TimestampStatsPayload,
    dump_validated,
)
from chronoctl.services.telemetry import trace_span

log = structlog.get_logger(__name__)


class RunState(StrEnum):
    """Lifecycle of a single batch run."""

    PLANNING = "planning"
    RESOLVING = "resolving"
    EXECUTING = "executing"
    ASSEMBLING = "assembling"
    DONE = "done"
    ABORTED = "aborted"


_ALLOWED: dict[RunState, frozenset[RunState]] = {
    RunState.PLANNING: frozenset({RunState.RESOLVING, RunState.ABORTED}),
    RunState.RESOLVING: frozenset({RunState.EXECUTING, RunState.ABORTED}),
    RunState.EXECUTING: frozenset({RunState.ASSEMBLING}),
    RunState.ASSEMBLING: frozenset({RunState.DONE}),
    RunState.DONE: frozenset(),
    RunState.ABORTED: frozenset(),
}


# ---------------------------------------------------------------------------
# Item results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItemOk:
    """A unit of work that produced a payload."""

    index: int
    payload: dict[str, Any]

    ok = True

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "ok": True, **self.payload}


@dataclass(frozen=True)
class ItemError:
    """A unit of work that failed; echoes its inputs as received."""

    index: int
    code: ErrorCode
    message: str
    base: str | None = None
    compare: str | None = None

    ok = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "ok": False,
            "error": {"code": self.code.value, "message": self.message},
            "base_time": self.base,
            "compare_time": self.compare,
        }


BatchItemResult = ItemOk | ItemError


@dataclass
class BatchOutcome:
    """Everything the assembler needs from one run."""

    operation: Operation
    mode: InteractionMode
    operation_count: int
    items: list[BatchItemResult] = field(default_factory=list)
    aggregate: dict[str, Any] | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def failed(self) -> list[ItemError]:
        return [item for item in self.items if isinstance(item, ItemError)]

    @property
    def succeeded(self) -> list[ItemOk]:
        return [item for item in self.items if isinstance(item, ItemOk)]


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def _invalid_timestamp(point: TimePoint, field_name: str, index: int) -> CalcError:
    return CalcError(
        ErrorCode.INVALID_TIMESTAMP,
        f"Invalid {field_name} format: {point.source} - {point.invalid_reason}",
        detail={"field": field_name, "index": index, "value": point.source},
    )


def _item_message(point: TimePoint, field_name: str) -> str:
    return f"Invalid {field_name} format: {point.source} - {point.invalid_reason}"


def _first_invalid(base: TimePoint, compare: TimePoint) -> str | None:
    if not base.is_valid:
        return _item_message(base, "base_time")
    if not compare.is_valid:
        return _item_message(compare, "compare_time")
    return None


class BatchRunner:
    """Run one calculator request through plan, resolve, and execute.

    A runner is single-use: each request builds a fresh one so state never
    leaks between calls.
    """

    def __init__(
        self,
        operation: Operation,
        *,
        default_zone: str = DEFAULT_ZONE,
        limit: int = MAX_OPERATIONS,
    ) -> None:
        self._operation = operation
        self._default_zone = default_zone
        self._limit = limit
        self._state = RunState.PLANNING
        self._log = log.bind(operation=operation.value)

    @property
    def state(self) -> RunState:
        return self._state

    def _transition(self, target: RunState, **context: Any) -> None:
        if target not in _ALLOWED[self._state]:
            msg = f"Illegal batch transition {self._state.value} -> {target.value}"
            raise RuntimeError(msg)
        self._log.debug("batch.transition", src=self._state.value, dst=target.value, **context)
        self._state = target

    def _abort(self, exc: CalcError) -> None:
        self._transition(RunState.ABORTED, code=exc.code.value)

    def finish(self) -> None:
        """Mark the run DONE once the assembler has shaped the response."""
        self._transition(RunState.DONE)

    def _resolve(self, values: Sequence[str], zone: str | None) -> list[TimePoint]:
        return [resolve_timestamp(v, zone, default_zone=self._default_zone) for v in values]

    # -- add / subtract -----------------------------------------------------

    def run_shift(
        self,
        base: Sequence[str],
        compare: Sequence[str],
        duration: DurationSpec,
        *,
        base_zone: str | None = None,
        compare_zone: str | None = None,
        requested: InteractionMode | str | None = None,
    ) -> BatchOutcome:
        """Apply *duration* to every base element, then every compare element."""
        sign = -1 if self._operation is Operation.SUBTRACT else 1
        total = len(base) + len(compare)
        try:
            with trace_span("plan"):
                mode = resolve_requested(requested, len(base), len(compare))
                check_ceiling(total, self._limit, what="summed timestamp count")
        except CalcError as exc:
            self._abort(exc)
            raise

        self._transition(RunState.RESOLVING, count=total)
        with trace_span("resolve"):
            tagged = [("base", p) for p in self._resolve(base, base_zone)]
            tagged += [("compare", p) for p in self._resolve(compare, compare_zone)]

        self._transition(RunState.EXECUTING, mode=mode.value)
        outcome = BatchOutcome(self._operation, mode, total)
        with trace_span("execute") as span:
            for index, (source, point) in enumerate(tagged):
                outcome.items.append(self._shift_one(index, source, point, duration, sign, total))
            if span is not None:
                span.annotate("failed", len(outcome.failed))

        self._transition(RunState.ASSEMBLING, failed=len(outcome.failed))
        return outcome

    def _shift_one(
        self,
        index: int,
        source: str,
        point: TimePoint,
        duration: DurationSpec,
        sign: int,
        total: int,
    ) -> BatchItemResult:
        field_name = "base_time" if source == "base" else "compare_time"
        echo = {"base": point.source} if source == "base" else {"compare": point.source}
        if not point.is_valid:
            return ItemError(
                index, ErrorCode.INVALID_TIMESTAMP, _item_message(point, field_name), **echo
            )
        try:
            shifted = apply_duration(point, duration, sign=sign)
        except OverflowError as exc:
            return ItemError(
                index,
                ErrorCode.ARITHMETIC_OVERFLOW,
                f"Invalid result from {self._operation.value}: {exc}",
                **echo,
            )
        payload: dict[str, Any] = {
            "input": point.source,
            "base_time": point.canonical(),
            "result": shifted.canonical(),
            "result_timezone": shifted.zone,
        }
        if total > 1:
            payload["source"] = source
        return ItemOk(index, dump_validated(ShiftPayload, payload))

    # -- diff / duration_between --------------------------------------------

    def run_paired(
        self,
        base: Sequence[str],
        compare: Sequence[str],
        *,
        base_zone: str | None = None,
        compare_zone: str | None = None,
        requested: InteractionMode | str | None = None,
    ) -> BatchOutcome:
        """Evaluate every (base, compare) pair the plan produces."""
        try:
            with trace_span("plan"):
                if not compare:
                    raise CalcError(
                        ErrorCode.MISSING_COMPARE_TIME,
                        f"compare_time is required for {self._operation.value} operation",
                    )
                plan = plan_interaction(base, compare, requested, limit=self._limit)
        except CalcError as exc:
            self._abort(exc)
            raise

        self._transition(RunState.RESOLVING, mode=plan.mode.value, count=plan.operation_count)
        carry_invalid = plan.mode in (InteractionMode.PAIRWISE, InteractionMode.AGGREGATE)
        try:
            with trace_span("resolve"):
                base_points = self._resolve(plan.base, base_zone)
                compare_points = self._resolve(plan.compare or (), compare_zone)
                if not carry_invalid:
                    self._fail_fast(base_points, "base_time")
                    self._fail_fast(compare_points, "compare_time")
        except CalcError as exc:
            self._abort(exc)
            raise

        self._transition(RunState.EXECUTING)
        outcome = BatchOutcome(self._operation, plan.mode, plan.operation_count)
        with trace_span("execute") as span:
            outcome.items = self._execute_pairs(plan, base_points, compare_points)
            if span is not None:
                span.annotate("failed", len(outcome.failed))

        if plan.mode is InteractionMode.AGGREGATE:
            outcome.aggregate = self._aggregate(outcome)

        self._transition(RunState.ASSEMBLING, failed=len(outcome.failed))
        return outcome

    def _fail_fast(self, points: Sequence[TimePoint], field_name: str) -> None:
        for index, point in enumerate(points):
            if not point.is_valid:
                raise _invalid_timestamp(point, field_name, index)

    def _execute_pairs(
        self,
        plan: OperationPlan,
        base_points: Sequence[TimePoint],
        compare_points: Sequence[TimePoint],
    ) -> list[BatchItemResult]:
        executor: Callable[[TimePoint, TimePoint], dict[str, Any]]
        if self._operation is Operation.DIFF:
            executor, model = diff, DiffPayload
        else:
            executor, model = duration_between, DurationPayload

        items: list[BatchItemResult] = []
        for index, (i, j) in enumerate(plan.pairs()):
            b, c = base_points[i], compare_points[j]
            invalid = _first_invalid(b, c)
            if invalid is not None:
                items.append(
                    ItemError(index, ErrorCode.INVALID_TIMESTAMP, invalid, b.source, c.source)
                )
                continue
            try:
                payload = executor(b, c)
            except OverflowError as exc:
                items.append(
                    ItemError(index, ErrorCode.ARITHMETIC_OVERFLOW, str(exc), b.source, c.source)
                )
                continue
            if plan.mode is InteractionMode.CROSS_PRODUCT:
                payload = {**payload, "base_index": i, "compare_index": j}
            items.append(ItemOk(index, dump_validated(model, payload)))
        return items

    def _aggregate(self, outcome: BatchOutcome) -> dict[str, Any] | None:
        durations = [item.payload["total_milliseconds"] for item in outcome.succeeded]
        if len(durations) < MIN_SAMPLES:
            outcome.warnings.append(
                f"aggregate summary needs at least {MIN_SAMPLES} successful pairs, "
                f"got {len(durations)}"
            )
            return None
        return dump_validated(DurationStatsPayload, summarize_durations(durations))

    # -- stats / sort ---------------------------------------------------------

    def run_set(
        self,
        base: Sequence[str],
        compare: Sequence[str],
        *,
        base_zone: str | None = None,
        compare_zone: str | None = None,
        requested: InteractionMode | str | None = None,
    ) -> BatchOutcome:
        """Reduce the whole set to one summary (stats) or one ordering (sort)."""
        use_compare = self._operation is Operation.STATS and bool(compare)
        total = len(base) + (len(compare) if use_compare else 0)
        try:
            with trace_span("plan"):
                mode = parse_mode(requested)
                check_ceiling(total, self._limit, what="summed timestamp count")
        except CalcError as exc:
            self._abort(exc)
            raise

        self._transition(RunState.RESOLVING, count=total)
        try:
            with trace_span("resolve"):
                base_points = self._resolve(base, base_zone)
                compare_points = self._resolve(compare, compare_zone) if use_compare else []
                self._fail_fast(base_points, "base_time")
                self._fail_fast(compare_points, "compare_time")
                require_samples(len(base_points), self._operation.value)
                if use_compare:
                    pairs = min(len(base_points), len(compare_points))
                    require_samples(pairs, "duration stats")
        except CalcError as exc:
            self._abort(exc)
            raise

        self._transition(RunState.EXECUTING)
        outcome = BatchOutcome(self._operation, InteractionMode.AGGREGATE, 1)
        if mode not in (InteractionMode.AUTO_DETECT, InteractionMode.AGGREGATE):
            outcome.warnings.append(
                f"interaction_mode {mode.value} is ignored by {self._operation.value}"
            )
        if self._operation is Operation.SORT and compare:
            outcome.warnings.append("compare_time is ignored by sort")
        with trace_span("execute"):
            payload = self._reduce(base_points, compare_points, use_compare=use_compare)
        outcome.items.append(ItemOk(0, payload))
        self._transition(RunState.ASSEMBLING)
        return outcome

    def _reduce(
        self,
        base_points: list[TimePoint],
        compare_points: list[TimePoint],
        *,
        use_compare: bool,
    ) -> dict[str, Any]:
        if self._operation is Operation.SORT:
            return dump_validated(SortPayload, sort_points(base_points))
        if use_compare:
            return dump_validated(DurationStatsPayload, duration_stats(base_points, compare_points))
        return dump_validated(TimestampStatsPayload, timestamp_stats(base_points))
