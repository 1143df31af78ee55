"""CalculatorService — the single entry point of the batch time engine.

One ``execute`` call is one request:

1. capture "now" once and read the debug flag once;
2. reject unknown operations and zones before touching any timestamp;
3. normalize ``base_time`` / ``compare_time`` into sequences;
4. hand the sequences to a :class:`BatchRunner` for the operation family;
5. shape the outcome with the assembler.

Every CalcError raised along the way comes back as
``ServiceResult(ok=False)``; nothing unstructured escapes.
"""

from __future__ import annotations

from typing import Any

import structlog

from chronoctl.domain.arithmetic import DurationSpec
from chronoctl.domain.errors import CalcError
from chronoctl.domain.normalize import normalize_times
from chronoctl.domain.timepoint import is_valid_timezone
from chronoctl.domain.types import (
    DURATION_OPERATIONS,
    PAIRED_OPERATIONS,
    ErrorCode,
    Operation,
)
from chronoctl.services._helpers import now_iso
from chronoctl.services.assembler import RequestEcho, assemble, build_metadata
from chronoctl.services.base import BaseService
from chronoctl.services.batch import BatchOutcome, BatchRunner
from chronoctl.services.result import ServiceResult
from chronoctl.services.telemetry import (
    get_current_span,
    is_enabled,
    telemetry_scope,
    trace_span,
    traced,
)

log = structlog.get_logger(__name__)

OP_NAME = "time_calculator"


def parse_operation(value: str | Operation) -> Operation:
    """Parse an operation name; unknown names raise INVALID_ARGUMENTS."""
    try:
        return Operation(value)
    except ValueError as exc:
        allowed = ", ".join(op.value for op in Operation)
        raise CalcError(
            ErrorCode.INVALID_ARGUMENTS,
            f"Unsupported operation: {value!r}. Allowed: {allowed}",
        ) from exc


def check_timezone(name: str | None, field_name: str) -> None:
    """Raise INVALID_TIMEZONE when an explicitly supplied zone does not resolve."""
    if name is not None and not is_valid_timezone(name):
        raise CalcError(
            ErrorCode.INVALID_TIMEZONE,
            f"Invalid timezone: {name}",
            detail={"field": field_name, "value": name},
        )


class CalculatorService(BaseService):
    """Time arithmetic over single values and batches."""

    def execute(
        self,
        operation: str | Operation,
        interaction_mode: str | None = "auto_detect",
        base_time: Any = None,
        compare_time: Any = None,
        timezone: str | None = None,
        compare_time_timezone: str | None = None,
        *,
        years: float | None = None,
        months: float | None = None,
        days: float | None = None,
        hours: float | None = None,
        minutes: float | None = None,
        seconds: float | None = None,
        milliseconds: float | None = None,
        debug: bool | None = None,
    ) -> ServiceResult:
        """Run one calculator request.

        ``compare_time_timezone`` defaults to ``timezone``. An explicit
        *debug* overrides ``settings.debug`` for this request only, and
        also turns on span telemetry when it is not already on.
        """
        debug_on = self._settings.debug if debug is None else debug
        request = {
            "operation": operation,
            "interaction_mode": interaction_mode,
            "base_time": base_time,
            "compare_time": compare_time,
            "timezone": timezone,
            "compare_time_timezone": compare_time_timezone,
            "duration": {
                "years": years,
                "months": months,
                "days": days,
                "hours": hours,
                "minutes": minutes,
                "seconds": seconds,
                "milliseconds": milliseconds,
            },
        }
        if debug_on and not is_enabled():
            with telemetry_scope(True):
                return self._run(request, debug=True)
        return self._run(request, debug=debug_on)

    @traced
    def _run(self, request: dict[str, Any], *, debug: bool) -> ServiceResult:
        now = self._now()
        warnings: list[str] = []
        try:
            data = self._calculate(request, now=now, debug=debug, warnings=warnings)
        except CalcError as exc:
            log.debug("calculator.failed", code=exc.code.value, message=exc.message)
            return ServiceResult.failure(OP_NAME, exc)
        return ServiceResult(ok=True, op=OP_NAME, data=data, warnings=warnings)

    def _calculate(
        self,
        request: dict[str, Any],
        *,
        now: Any,
        debug: bool,
        warnings: list[str],
    ) -> dict[str, Any]:
        operation = parse_operation(request["operation"])
        timezone = request["timezone"]
        compare_timezone = request["compare_time_timezone"] or timezone
        check_timezone(timezone, "timezone")
        check_timezone(request["compare_time_timezone"], "compare_time_timezone")

        with trace_span("normalize"):
            base = normalize_times(request["base_time"], default=now_iso(now))
            compare = normalize_times(request["compare_time"])

        runner = BatchRunner(
            operation,
            default_zone=self.default_zone,
            limit=self._settings.calc.max_operations,
        )
        duration: DurationSpec | None = None
        outcome: BatchOutcome
        if operation in DURATION_OPERATIONS:
            duration = DurationSpec.from_fields(**request["duration"])
            duration.require_units(operation.value)
            outcome = runner.run_shift(
                base,
                compare,
                duration,
                base_zone=timezone,
                compare_zone=compare_timezone,
                requested=request["interaction_mode"],
            )
        elif operation in PAIRED_OPERATIONS:
            outcome = runner.run_paired(
                base,
                compare,
                base_zone=timezone,
                compare_zone=compare_timezone,
                requested=request["interaction_mode"],
            )
        else:
            outcome = runner.run_set(
                base,
                compare,
                base_zone=timezone,
                compare_zone=compare_timezone,
                requested=request["interaction_mode"],
            )

        with trace_span("assemble"):
            echo = RequestEcho(
                base=base,
                compare=compare,
                timezone=timezone,
                compare_timezone=request["compare_time_timezone"],
                duration=duration,
            )
            metadata = build_metadata(
                echo,
                outcome.mode,
                default_zone=self.default_zone,
                debug=debug,
                now=now,
                operation_count=outcome.operation_count,
            )
            data = assemble(outcome, metadata)
        runner.finish()
        root = get_current_span()
        if root is not None:
            root.annotate("operation", operation.value)
            root.annotate("operations", outcome.operation_count)
        warnings.extend(outcome.warnings)
        log.debug(
            "calculator.done",
            operation=operation.value,
            mode=outcome.mode.value,
            count=outcome.operation_count,
            failed=len(outcome.failed),
        )
        return data
