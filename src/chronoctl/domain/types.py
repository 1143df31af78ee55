"""Operation, interaction-mode, and error-code enums.

These enums close the set of names the calculator accepts so that
dispatch and mode resolution are exhaustive rather than string-matched.
"""

from __future__ import annotations

from enum import StrEnum


class Operation(StrEnum):
    """Operations exposed by the time calculator."""

    ADD = "add"
    SUBTRACT = "subtract"
    DIFF = "diff"
    DURATION_BETWEEN = "duration_between"
    STATS = "stats"
    SORT = "sort"


class InteractionMode(StrEnum):
    """How the base and compare sequences pair up."""

    AUTO_DETECT = "auto_detect"
    SINGLE_TO_SINGLE = "single_to_single"
    SINGLE_TO_MANY = "single_to_many"
    MANY_TO_SINGLE = "many_to_single"
    PAIRWISE = "pairwise"
    CROSS_PRODUCT = "cross_product"
    AGGREGATE = "aggregate"


class ErrorCode(StrEnum):
    """Structured error codes surfaced in ServiceError.code."""

    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    INVALID_TIMEZONE = "INVALID_TIMEZONE"
    EMPTY_DURATION = "EMPTY_DURATION"
    MISSING_COMPARE_TIME = "MISSING_COMPARE_TIME"
    CARDINALITY_MISMATCH = "CARDINALITY_MISMATCH"
    OPERATION_COUNT_EXCEEDED = "OPERATION_COUNT_EXCEEDED"
    INSUFFICIENT_SAMPLES = "INSUFFICIENT_SAMPLES"
    ARITHMETIC_OVERFLOW = "ARITHMETIC_OVERFLOW"


# Operations that pair a base with a compare timestamp.
PAIRED_OPERATIONS: frozenset[Operation] = frozenset(
    {Operation.DIFF, Operation.DURATION_BETWEEN}
)

# Operations that apply a DurationSpec to every element.
DURATION_OPERATIONS: frozenset[Operation] = frozenset({Operation.ADD, Operation.SUBTRACT})

# Operations over a whole set of timestamps.
SET_OPERATIONS: frozenset[Operation] = frozenset({Operation.STATS, Operation.SORT})
