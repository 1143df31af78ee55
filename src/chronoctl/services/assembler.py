"""Response assembler: shape a BatchOutcome into ``ServiceResult.data``.

Two shapes:
- operation count 1: ``{operation, result, metadata}`` with the bare payload;
- otherwise: ``{operation, count, results, interaction_mode, metadata}``
  plus ``aggregate`` in aggregate mode.

``metadata`` is always present. ``metadata.debug`` only appears when the
request ran with the debug flag on.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from chronoctl.domain.arithmetic import DurationSpec
from chronoctl.domain.errors import CalcError
from chronoctl.domain.types import InteractionMode
from chronoctl.services._helpers import now_iso, zone_label
from chronoctl.services.batch import BatchOutcome, ItemError
from chronoctl.services.contracts import CalcBatchData, CalcSingleData, dump_validated


@dataclass(frozen=True)
class RequestEcho:
    """What the caller sent, after normalization, for the metadata block."""

    base: Sequence[str]
    compare: Sequence[str]
    timezone: str | None
    compare_timezone: str | None
    duration: DurationSpec | None = None


def build_metadata(
    echo: RequestEcho,
    mode: InteractionMode,
    *,
    default_zone: str,
    debug: bool = False,
    now: datetime | None = None,
    operation_count: int = 0,
) -> dict[str, Any]:
    """The always-present metadata block, with the debug block on request."""
    input_echo: dict[str, Any] = {"base_time": list(echo.base)}
    if echo.compare:
        input_echo["compare_time"] = list(echo.compare)
    if echo.duration is not None:
        input_echo["duration"] = echo.duration.to_dict()

    metadata: dict[str, Any] = {
        "input": input_echo,
        "timezones": {
            "base": zone_label(echo.timezone, default_zone),
            "compare": zone_label(echo.compare_timezone or echo.timezone, default_zone),
        },
        "interaction_mode": mode.value,
    }
    if debug and now is not None:
        metadata["debug"] = {
            "calculation_time": now_iso(now),
            "resolution_zone": default_zone,
            "operation_count": operation_count,
        }
    return metadata


def assemble(outcome: BatchOutcome, metadata: dict[str, Any]) -> dict[str, Any]:
    """Build the calculator payload, or raise when a lone item failed."""
    if outcome.operation_count == 1 and len(outcome.items) == 1:
        item = outcome.items[0]
        if isinstance(item, ItemError):
            raise CalcError(
                item.code,
                item.message,
                detail={"base_time": item.base, "compare_time": item.compare},
            )
        return dump_validated(
            CalcSingleData,
            {
                "operation": outcome.operation.value,
                "result": item.payload,
                "metadata": metadata,
            },
        )

    data: dict[str, Any] = {
        "operation": outcome.operation.value,
        "count": len(outcome.items),
        "results": [item.to_dict() for item in outcome.items],
        "interaction_mode": outcome.mode.value,
        "metadata": metadata,
    }
    if outcome.mode is InteractionMode.AGGREGATE:
        data["aggregate"] = outcome.aggregate
    return dump_validated(CalcBatchData, data)
