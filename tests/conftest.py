"""Shared pytest fixtures and test helpers for chronoctl tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from chronoctl.config.settings import ChronoSettings
from chronoctl.services.calculator import CalculatorService
from chronoctl.services.clock import ClockService
from chronoctl.services.telemetry import _current_span, disable_telemetry

# 2024-06-15 is a Saturday; New York is on EDT (-04:00).
FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolated_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None]:
    """Run every test in an empty directory with no chronoctl env overrides.

    Also resets telemetry and root logging, which the CLI configures
    process-wide on each invocation.
    """
    for name in ("CHRONOCTL_CONFIG", "CHRONOCTL_DEBUG", "CHRONO_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    disable_telemetry()
    _current_span.set(None)
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """A clock pinned to :data:`FIXED_NOW`."""
    return lambda: FIXED_NOW


@pytest.fixture
def settings(tmp_path: Path) -> ChronoSettings:
    """Default settings rooted at an empty temp directory."""
    return ChronoSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def calculator(
    settings: ChronoSettings, fixed_clock: Callable[[], datetime]
) -> CalculatorService:
    return CalculatorService(settings, clock=fixed_clock)


@pytest.fixture
def clock_service(
    settings: ChronoSettings, fixed_clock: Callable[[], datetime]
) -> ClockService:
    return ClockService(settings, clock=fixed_clock)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write a ``chronoctl.toml`` into the temp directory and return its path."""

    def _write(body: str) -> Path:
        path = tmp_path / "chronoctl.toml"
        path.write_text(body, encoding="utf-8")
        return path

    return _write
