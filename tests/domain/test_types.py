"""Tests for domain type enums: parametrized."""

import pytest

from chronoctl.domain.errors import CalcError
from chronoctl.domain.types import (
    DURATION_OPERATIONS,
    PAIRED_OPERATIONS,
    SET_OPERATIONS,
    ErrorCode,
    InteractionMode,
    Operation,
)

ENUM_CASES = [
    (
        Operation,
        {"add", "subtract", "diff", "duration_between", "stats", "sort"},
    ),
    (
        InteractionMode,
        {
            "auto_detect",
            "single_to_single",
            "single_to_many",
            "many_to_single",
            "pairwise",
            "cross_product",
            "aggregate",
        },
    ),
    (
        ErrorCode,
        {
            "INVALID_ARGUMENTS",
            "INVALID_TIMESTAMP",
            "INVALID_TIMEZONE",
            "EMPTY_DURATION",
            "MISSING_COMPARE_TIME",
            "CARDINALITY_MISMATCH",
            "OPERATION_COUNT_EXCEEDED",
            "INSUFFICIENT_SAMPLES",
            "ARITHMETIC_OVERFLOW",
        },
    ),
]


@pytest.mark.parametrize(
    "enum_cls,expected_values",
    ENUM_CASES,
    ids=[cls.__name__ for cls, _ in ENUM_CASES],
)
def test_enum_members_and_values(enum_cls: type, expected_values: set[str]) -> None:
    """Each StrEnum has the expected members with matching string values."""
    actual_values = {e.value for e in enum_cls}
    assert actual_values == expected_values
    for member in enum_cls:
        assert member == member.value
        assert isinstance(member, str)


def test_operation_families_partition_operations() -> None:
    families = [PAIRED_OPERATIONS, DURATION_OPERATIONS, SET_OPERATIONS]
    assert set().union(*families) == set(Operation)
    assert sum(len(f) for f in families) == len(Operation)


class TestCalcError:
    def test_carries_code_and_message(self) -> None:
        exc = CalcError(ErrorCode.EMPTY_DURATION, "nothing to add")
        assert exc.code is ErrorCode.EMPTY_DURATION
        assert exc.message == "nothing to add"
        assert str(exc) == "nothing to add"
        assert exc.detail == {}

    def test_detail_is_kept(self) -> None:
        exc = CalcError(ErrorCode.INVALID_TIMEZONE, "bad", detail={"value": "Mars/Base"})
        assert exc.detail == {"value": "Mars/Base"}

    def test_repr_names_code(self) -> None:
        exc = CalcError(ErrorCode.INVALID_ARGUMENTS, "oops")
        assert "INVALID_ARGUMENTS" in repr(exc)
