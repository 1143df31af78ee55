"""Tests for the single-value-or-array input normalizer."""

from __future__ import annotations

from typing import Any

import pytest

from chronoctl.domain.normalize import normalize_times, parse_array_literal


class TestParseArrayLiteral:
    def test_string_array(self) -> None:
        assert parse_array_literal('["a", "b"]') == ["a", "b"]

    def test_non_string_elements_are_stringified(self) -> None:
        assert parse_array_literal("[1, 2]") == ["1", "2"]

    @pytest.mark.parametrize("text", ["[not json", '{"a": 1}', "2024-01-01", "[1, 2"])
    def test_not_an_array(self, text: str) -> None:
        assert parse_array_literal(text) is None

    def test_surrounding_whitespace(self) -> None:
        assert parse_array_literal('  ["x"]  ') == ["x"]


class TestNormalizeTimes:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-01-01", ["2024-01-01"]),
            (["a", "b"], ["a", "b"]),
            (("a", "b"), ["a", "b"]),
            ([1, "b"], ["1", "b"]),
            ('["a","b"]', ["a", "b"]),
            ("[not json", ["[not json"]),
            (42, ["42"]),
        ],
        ids=["string", "list", "tuple", "mixed", "json-literal", "broken-literal", "number"],
    )
    def test_shapes(self, value: Any, expected: list[str]) -> None:
        assert normalize_times(value) == expected

    def test_none_without_default(self) -> None:
        assert normalize_times(None) == []

    def test_none_with_default(self) -> None:
        assert normalize_times(None, default="now") == ["now"]

    def test_empty_array_uses_default(self) -> None:
        assert normalize_times([], default="now") == ["now"]
        assert normalize_times("[]", default="now") == ["now"]
        assert normalize_times([]) == []

    def test_order_is_preserved(self) -> None:
        values = [f"2024-01-{d:02d}" for d in range(31, 0, -1)]
        assert normalize_times(values) == values

    def test_invalid_elements_pass_through(self) -> None:
        assert normalize_times(["ok", "", "garbage"]) == ["ok", "", "garbage"]
