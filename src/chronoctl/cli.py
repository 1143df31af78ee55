"""Root CLI group for chronoctl with global flags and command registration."""

from __future__ import annotations

import click

from chronoctl import __version__
from chronoctl.commands import register_commands
from chronoctl.commands._context import AppContext
from chronoctl.config.settings import ChronoSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="chronoctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--debug", is_flag=True, help="Attach debug metadata to calculator results.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this chronoctl.toml instead of searching for one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Batch time arithmetic: shift, diff, sort and summarize timestamps across zones."""
    ctx.ensure_object(dict)
    clock = ctx.obj.get("clock") if isinstance(ctx.obj, dict) else None
    settings = ChronoSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        # Only an explicit flag overrides CHRONO_DEBUG / chronoctl.toml.
        debug=True if debug else None,
    )
    ctx.obj = AppContext(settings, clock=clock)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
