"""Interaction planner: mode resolution, cardinality checks, and the ceiling.

``auto_detect`` resolves through a pure table on the two sequence sizes:

    base  compare  mode
    ----  -------  ----------------
    <=1   <=1      single_to_single
    1     >1       single_to_many
    >1    <=1      many_to_single
    >1    >1       pairwise (truncated to the shorter length)

Explicit modes are validated against their cardinality preconditions.
Every plan is rejected when its operation count exceeds the ceiling.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chronoctl.domain.errors import CalcError
from chronoctl.domain.types import ErrorCode, InteractionMode

MAX_OPERATIONS = 10_000


@dataclass(frozen=True)
class OperationPlan:
    """A resolved, validated interaction plan for one request."""

    mode: InteractionMode
    operation_count: int
    base: tuple[str, ...]
    compare: tuple[str, ...] | None = None

    def pairs(self) -> list[tuple[int, int]]:
        """Index pairs ``(base_i, compare_i)`` in execution order."""
        n_compare = len(self.compare) if self.compare is not None else 0
        match self.mode:
            case InteractionMode.SINGLE_TO_SINGLE:
                return [(0, 0 if n_compare else -1)]
            case InteractionMode.SINGLE_TO_MANY:
                return [(0, j) for j in range(n_compare)]
            case InteractionMode.MANY_TO_SINGLE:
                return [(i, 0 if n_compare else -1) for i in range(len(self.base))]
            case InteractionMode.CROSS_PRODUCT:
                return [(i, j) for i in range(len(self.base)) for j in range(n_compare)]
            case _:
                return [(i, i) for i in range(self.operation_count)]


def resolve_mode(base_count: int, compare_count: int) -> InteractionMode:
    """Resolve ``auto_detect`` from the observed cardinalities."""
    if base_count <= 1 and compare_count <= 1:
        return InteractionMode.SINGLE_TO_SINGLE
    if base_count <= 1:
        return InteractionMode.SINGLE_TO_MANY
    if compare_count <= 1:
        return InteractionMode.MANY_TO_SINGLE
    return InteractionMode.PAIRWISE


def parse_mode(value: str | InteractionMode | None) -> InteractionMode:
    """Parse a mode name, defaulting to ``auto_detect``."""
    if value is None or value == "":
        return InteractionMode.AUTO_DETECT
    try:
        return InteractionMode(value)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in InteractionMode)
        raise CalcError(
            ErrorCode.INVALID_ARGUMENTS,
            f"Unknown interaction_mode: {value!r}. Allowed: {allowed}",
        ) from exc


def _mismatch(mode: InteractionMode, requirement: str, base: int, compare: int) -> CalcError:
    return CalcError(
        ErrorCode.CARDINALITY_MISMATCH,
        f"{mode.value} requires {requirement} (got {base} base, {compare} compare)",
        detail={"mode": mode.value, "base_count": base, "compare_count": compare},
    )


def _operation_count(
    mode: InteractionMode,
    base_count: int,
    compare_count: int,
    *,
    compare_given: bool,
) -> int:
    """Validate cardinality for *mode* and return its unit-of-work count."""
    match mode:
        case InteractionMode.SINGLE_TO_SINGLE:
            if base_count != 1 or compare_count > 1:
                raise _mismatch(
                    mode, "exactly 1 base and at most 1 compare", base_count, compare_count
                )
            return 1
        case InteractionMode.SINGLE_TO_MANY:
            if base_count != 1 or compare_count <= 1:
                raise _mismatch(
                    mode, "exactly 1 base and more than 1 compare", base_count, compare_count
                )
            return compare_count
        case InteractionMode.MANY_TO_SINGLE:
            if base_count <= 1 or compare_count != 1:
                raise _mismatch(
                    mode, "more than 1 base and exactly 1 compare", base_count, compare_count
                )
            return base_count
        case InteractionMode.PAIRWISE | InteractionMode.AGGREGATE | InteractionMode.CROSS_PRODUCT:
            if not compare_given:
                raise CalcError(
                    ErrorCode.MISSING_COMPARE_TIME,
                    f"compare_time is required for {mode.value} mode",
                )
            if base_count == 0 or compare_count == 0:
                raise _mismatch(mode, "non-empty base and compare", base_count, compare_count)
            if mode is InteractionMode.CROSS_PRODUCT:
                return base_count * compare_count
            return min(base_count, compare_count)
        case _:
            msg = f"Unresolved interaction mode: {mode.value}"
            raise CalcError(ErrorCode.INVALID_ARGUMENTS, msg)


def resolve_requested(
    requested: InteractionMode | str | None, base_count: int, compare_count: int
) -> InteractionMode:
    """Resolve a mode and check its cardinality without applying the ceiling."""
    mode = parse_mode(requested)
    if mode is InteractionMode.AUTO_DETECT:
        return resolve_mode(base_count, compare_count)
    _operation_count(mode, base_count, compare_count, compare_given=compare_count > 0)
    return mode


def _auto_count(mode: InteractionMode, base_count: int, compare_count: int) -> int:
    match mode:
        case InteractionMode.SINGLE_TO_SINGLE:
            return 1
        case InteractionMode.SINGLE_TO_MANY:
            return compare_count
        case InteractionMode.MANY_TO_SINGLE:
            return base_count
        case _:
            return min(base_count, compare_count)


def check_ceiling(
    count: int,
    limit: int = MAX_OPERATIONS,
    *,
    what: str = "operation count",
) -> None:
    """Raise OPERATION_COUNT_EXCEEDED when *count* is above *limit*."""
    if count > limit:
        raise CalcError(
            ErrorCode.OPERATION_COUNT_EXCEEDED,
            f"{what} {count} exceeds the maximum of {limit}",
            detail={"count": count, "limit": limit},
        )


def plan_interaction(
    base: Sequence[str],
    compare: Sequence[str] | None,
    requested: InteractionMode | str | None = InteractionMode.AUTO_DETECT,
    *,
    limit: int = MAX_OPERATIONS,
) -> OperationPlan:
    """Build an OperationPlan or raise CalcError.

    Pairwise and aggregate plans truncate both sequences to the shorter
    length; unmatched trailing elements are dropped without error.
    """
    mode = parse_mode(requested)
    base_count = len(base)
    compare_given = compare is not None and len(compare) > 0
    compare_count = len(compare) if compare is not None else 0

    if mode is InteractionMode.AUTO_DETECT:
        mode = resolve_mode(base_count, compare_count)
        count = _auto_count(mode, base_count, compare_count)
    else:
        count = _operation_count(mode, base_count, compare_count, compare_given=compare_given)
    check_ceiling(count, limit)

    base_seq = tuple(base)
    compare_seq = tuple(compare) if compare_given and compare is not None else None
    if mode in (InteractionMode.PAIRWISE, InteractionMode.AGGREGATE):
        base_seq = base_seq[:count]
        compare_seq = compare_seq[:count] if compare_seq is not None else None

    return OperationPlan(
        mode=mode,
        operation_count=count,
        base=base_seq,
        compare=compare_seq,
    )
