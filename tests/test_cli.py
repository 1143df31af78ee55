"""Tests for the root chronoctl CLI."""

from click.testing import CliRunner

from chronoctl import __version__
from chronoctl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "chronoctl" in result.output
    for command in ("calc", "now", "convert", "serve"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_invalid_config_is_reported(cli_runner: CliRunner, write_config) -> None:
    write_config("[calc\n")
    result = cli_runner.invoke(cli, ["now"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


def test_explicit_config_flag(cli_runner: CliRunner, tmp_path) -> None:
    custom = tmp_path / "elsewhere.toml"
    custom.write_text('[calc]\ndefault_timezone = "Asia/Tokyo"\n')
    result = cli_runner.invoke(cli, ["-c", str(custom), "-q", "now", "--format", "local"])
    assert result.exit_code == 0
    assert result.output.strip().endswith("JST")


def test_verbose_attaches_telemetry(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-v", "calc", "add", "-b", "2024-01-01", "--days", "1"])
    assert result.exit_code == 0
    assert "CalculatorService._run" in result.output
