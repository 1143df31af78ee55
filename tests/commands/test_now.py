"""Tests for the now and convert commands."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime

from click.testing import CliRunner

from chronoctl.cli import cli


class TestNowCommand:
    def test_default(self, cli_runner: CliRunner, fixed_clock: Callable[[], datetime]) -> None:
        result = cli_runner.invoke(cli, ["-q", "now"], obj={"clock": fixed_clock})
        assert result.exit_code == 0
        assert result.output.strip() == "2024-06-15T12:00:00.000Z"

    def test_zone_and_format(
        self, cli_runner: CliRunner, fixed_clock: Callable[[], datetime]
    ) -> None:
        result = cli_runner.invoke(
            cli,
            ["-q", "now", "--tz", "America/New_York", "--format", "sql"],
            obj={"clock": fixed_clock},
        )
        assert result.output.strip() == "2024-06-15 08:00:00.000 -04:00"

    def test_json(self, cli_runner: CliRunner, fixed_clock: Callable[[], datetime]) -> None:
        result = cli_runner.invoke(cli, ["--json", "now"], obj={"clock": fixed_clock})
        data = json.loads(result.output)
        assert data["data"]["epoch_ms"] == 1_718_452_800_000

    def test_bad_format_is_a_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["now", "--format", "yaml"])
        assert result.exit_code == 2

    def test_locale_format(
        self, cli_runner: CliRunner, fixed_clock: Callable[[], datetime]
    ) -> None:
        result = cli_runner.invoke(
            cli,
            ["-q", "now", "--tz", "Europe/Paris", "--format", "full", "--locale", "fr-FR"],
            obj={"clock": fixed_clock},
        )
        assert result.exit_code == 0, result.output
        assert "samedi 15 juin 2024" in result.output

    def test_unknown_locale(
        self, cli_runner: CliRunner, fixed_clock: Callable[[], datetime]
    ) -> None:
        result = cli_runner.invoke(
            cli, ["now", "--format", "long", "--locale", "xx-YY"], obj={"clock": fixed_clock}
        )
        assert result.exit_code == 1
        assert "Unknown locale" in result.output

    def test_bad_zone(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["now", "--tz", "Mars/Base"])
        assert result.exit_code == 1
        assert "INVALID_TIMEZONE" in result.output


class TestConvertCommand:
    def test_conversions(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "convert",
                "2024-12-25T15:00:00",
                "--tz",
                "America/Los_Angeles",
                "--to",
                "Asia/Tokyo",
                "--offsets",
            ],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["data"]["conversions"] == {"Asia/Tokyo": "2024-12-26T08:00:00.000+09:00"}

    def test_comparisons(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "convert", "2024-12-25T15:00:00Z", "--compare", "2024-12-25T10:00:00Z"],
        )
        data = json.loads(result.output)
        assert data["data"]["comparisons"]["2024-12-25T10:00:00Z"]["hours"] == -5

    def test_invalid_target_warns(
        self, cli_runner: CliRunner, fixed_clock: Callable[[], datetime]
    ) -> None:
        result = cli_runner.invoke(
            cli, ["convert", "--to", "Mars/Base"], obj={"clock": fixed_clock}
        )
        assert result.exit_code == 0
        assert "WARNING: Invalid timezone: Mars/Base" in result.output

    def test_extra_formats(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "convert",
                "2024-06-15T08:00:00",
                "--tz",
                "Europe/Berlin",
                "--format",
                "long",
                "--format",
                "sql",
                "--locale",
                "de-DE",
            ],
        )
        assert result.exit_code == 0, result.output
        formatted = json.loads(result.output)["data"]["formatted"]
        assert "15. Juni 2024" in formatted["long"]
        assert formatted["sql"] == "2024-06-15 08:00:00.000 +02:00"

    def test_extra_formats_are_rendered(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["convert", "2024-06-15T08:00:00Z", "--format", "short"]
        )
        assert result.exit_code == 0, result.output
        assert "short:" in result.output
        assert "6/15/24" in result.output
