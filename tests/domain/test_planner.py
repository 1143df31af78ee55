"""Tests for interaction planning: mode resolution, cardinality, ceiling."""

from __future__ import annotations

import pytest

from chronoctl.domain.errors import CalcError
from chronoctl.domain.planner import (
    MAX_OPERATIONS,
    check_ceiling,
    parse_mode,
    plan_interaction,
    resolve_mode,
    resolve_requested,
)
from chronoctl.domain.types import ErrorCode, InteractionMode


def _seq(n: int, prefix: str = "t") -> list[str]:
    return [f"{prefix}{i}" for i in range(n)]


class TestResolveMode:
    @pytest.mark.parametrize(
        "base,compare,expected",
        [
            (1, 0, InteractionMode.SINGLE_TO_SINGLE),
            (1, 1, InteractionMode.SINGLE_TO_SINGLE),
            (0, 0, InteractionMode.SINGLE_TO_SINGLE),
            (1, 3, InteractionMode.SINGLE_TO_MANY),
            (3, 1, InteractionMode.MANY_TO_SINGLE),
            (3, 0, InteractionMode.MANY_TO_SINGLE),
            (3, 5, InteractionMode.PAIRWISE),
        ],
    )
    def test_table(self, base: int, compare: int, expected: InteractionMode) -> None:
        assert resolve_mode(base, compare) is expected


class TestParseMode:
    def test_default_is_auto(self) -> None:
        assert parse_mode(None) is InteractionMode.AUTO_DETECT
        assert parse_mode("") is InteractionMode.AUTO_DETECT

    def test_known_name(self) -> None:
        assert parse_mode("cross_product") is InteractionMode.CROSS_PRODUCT

    def test_unknown_name(self) -> None:
        with pytest.raises(CalcError) as exc_info:
            parse_mode("zigzag")
        assert exc_info.value.code is ErrorCode.INVALID_ARGUMENTS


class TestPlanInteraction:
    def test_single_without_compare(self) -> None:
        plan = plan_interaction(["a"], None)
        assert plan.mode is InteractionMode.SINGLE_TO_SINGLE
        assert plan.operation_count == 1
        assert plan.pairs() == [(0, -1)]

    def test_single_to_many(self) -> None:
        plan = plan_interaction(["a"], _seq(4))
        assert plan.mode is InteractionMode.SINGLE_TO_MANY
        assert plan.pairs() == [(0, 0), (0, 1), (0, 2), (0, 3)]

    def test_many_to_single(self) -> None:
        plan = plan_interaction(_seq(3), ["c"])
        assert plan.mode is InteractionMode.MANY_TO_SINGLE
        assert plan.pairs() == [(0, 0), (1, 0), (2, 0)]

    def test_pairwise_truncates_to_shorter(self) -> None:
        plan = plan_interaction(_seq(5), _seq(3, "c"))
        assert plan.mode is InteractionMode.PAIRWISE
        assert plan.operation_count == 3
        assert plan.base == ("t0", "t1", "t2")
        assert plan.pairs() == [(0, 0), (1, 1), (2, 2)]

    def test_cross_product_is_base_major(self) -> None:
        plan = plan_interaction(_seq(3), _seq(4, "c"), "cross_product")
        assert plan.operation_count == 12
        pairs = plan.pairs()
        assert pairs[:4] == [(0, 0), (0, 1), (0, 2), (0, 3)]
        assert pairs[-1] == (2, 3)

    def test_aggregate_pairs_like_pairwise(self) -> None:
        plan = plan_interaction(_seq(4), _seq(2, "c"), InteractionMode.AGGREGATE)
        assert plan.mode is InteractionMode.AGGREGATE
        assert plan.operation_count == 2

    @pytest.mark.parametrize(
        "mode,base,compare",
        [
            ("single_to_single", 2, 1),
            ("single_to_many", 2, 3),
            ("single_to_many", 1, 1),
            ("many_to_single", 1, 1),
            ("many_to_single", 3, 2),
        ],
    )
    def test_cardinality_mismatch(self, mode: str, base: int, compare: int) -> None:
        with pytest.raises(CalcError) as exc_info:
            plan_interaction(_seq(base), _seq(compare, "c"), mode)
        assert exc_info.value.code is ErrorCode.CARDINALITY_MISMATCH

    @pytest.mark.parametrize("mode", ["pairwise", "cross_product", "aggregate"])
    def test_modes_that_need_compare(self, mode: str) -> None:
        with pytest.raises(CalcError) as exc_info:
            plan_interaction(_seq(3), [], mode)
        assert exc_info.value.code is ErrorCode.MISSING_COMPARE_TIME


class TestResolveRequested:
    def test_auto_uses_the_table(self) -> None:
        assert resolve_requested(None, 3, 2) is InteractionMode.PAIRWISE

    def test_explicit_mode_is_checked(self) -> None:
        with pytest.raises(CalcError) as exc_info:
            resolve_requested("single_to_many", 3, 0)
        assert exc_info.value.code is ErrorCode.CARDINALITY_MISMATCH

    def test_cross_product_ignores_the_ceiling(self) -> None:
        mode = resolve_requested("cross_product", 100, 100)
        assert mode is InteractionMode.CROSS_PRODUCT


class TestCeiling:
    def test_limit_constant(self) -> None:
        assert MAX_OPERATIONS == 10_000

    def test_at_limit_is_accepted(self) -> None:
        check_ceiling(10_000)
        plan = plan_interaction(_seq(100), _seq(100, "c"), "cross_product")
        assert plan.operation_count == 10_000

    def test_over_limit_is_rejected(self) -> None:
        with pytest.raises(CalcError) as exc_info:
            plan_interaction(_seq(100), _seq(101, "c"), "cross_product")
        assert exc_info.value.code is ErrorCode.OPERATION_COUNT_EXCEEDED
        assert exc_info.value.detail == {"count": 10_100, "limit": 10_000}

    def test_custom_limit(self) -> None:
        with pytest.raises(CalcError):
            plan_interaction(_seq(3), _seq(3, "c"), limit=2)

    def test_message_names_what_was_counted(self) -> None:
        with pytest.raises(CalcError, match="summed timestamp count 11 exceeds"):
            check_ceiling(11, 10, what="summed timestamp count")
