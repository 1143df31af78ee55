"""Command: show the current time."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoctl.commands._base import ChronoCommand
from chronoctl.services.clock import TIME_FORMATS

if TYPE_CHECKING:
    from chronoctl.commands._context import AppContext


@click.command(
    cls=ChronoCommand,
    examples="""\
  chronoctl now
  chronoctl now --tz Asia/Tokyo
  chronoctl now --tz Europe/London --format rfc2822
  chronoctl -q now --format http
  chronoctl now --tz Europe/Paris --format full --locale fr-FR""",
)
@click.option("--tz", "timezone", default=None, help="IANA zone (default: calc.default_timezone).")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(TIME_FORMATS)),
    default="iso",
    help="Output format.",
)
@click.option("--locale", default=None, help="Locale for short/medium/long/full (default: en-US).")
@click.pass_obj
def now(app: AppContext, timezone: str | None, fmt: str, locale: str | None) -> None:
    """Show the current time in a zone and format."""
    app.emit(app.clock_service().current_time(timezone, fmt, locale))
