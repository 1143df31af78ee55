"""Tests for config models — defaults and sparse overrides."""

import pytest
from pydantic import ValidationError

from chronoctl.config.models import CalcConfig, ChronoConfig, McpConfig


class TestChronoConfig:
    def test_full_defaults(self) -> None:
        cfg = ChronoConfig()
        assert cfg.calc.default_timezone == "UTC"
        assert cfg.calc.max_operations == 10_000
        assert cfg.mcp.transport == "stdio"
        assert cfg.mcp.host == "127.0.0.1"
        assert cfg.mcp.port == 8000

    def test_sparse_override(self) -> None:
        """Only override fields you care about; the rest keeps defaults."""
        cfg = ChronoConfig.model_validate({"calc": {"max_operations": 100}})
        assert cfg.calc.max_operations == 100
        assert cfg.calc.default_timezone == "UTC"

    def test_frozen(self) -> None:
        cfg = McpConfig()
        with pytest.raises(ValidationError):
            cfg.port = 1  # type: ignore[misc]


class TestCalcConfig:
    def test_rejects_unknown_zone(self) -> None:
        with pytest.raises(ValidationError, match="Unknown timezone"):
            CalcConfig(default_timezone="Atlantis/Capital")

    def test_rejects_non_positive_ceiling(self) -> None:
        with pytest.raises(ValidationError):
            CalcConfig(max_operations=0)
