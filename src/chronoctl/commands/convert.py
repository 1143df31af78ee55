"""Command: convert one instant across zones and compare others against it."""

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
  # Now, in three zones
  chronoctl convert --to America/New_York --to Asia/Tokyo --to Europe/London

  # A Los Angeles wall-clock time, with offsets
  chronoctl convert 2024-12-25T15:00:00 --tz America/Los_Angeles --to Asia/Tokyo --offsets

  # Compare other instants against the base
  chronoctl convert 2024-12-25T15:00:00Z --compare 2024-12-25T10:00:00Z \\
      --compare 2024-12-26T08:00:00Z

  # Render the base in extra formats, localized
  chronoctl convert 2024-06-15T08:00:00 --tz Europe/Berlin --format long --locale de-DE""",
)
@click.argument("datetime_text", required=False, default=None, metavar="[DATETIME]")
@click.option("--tz", "timezone", default=None, help="Zone for a zone-less DATETIME.")
@click.option("--to", "targets", multiple=True, help="Target zone (repeatable).")
@click.option("--offsets", is_flag=True, help="Include UTC offsets in conversions.")
@click.option("--compare", "comparisons", multiple=True, help="Timestamp to diff (repeatable).")
@click.option(
    "--format",
    "formats",
    type=click.Choice(list(TIME_FORMATS)),
    multiple=True,
    help="Also render the base time in this format (repeatable).",
)
@click.option("--locale", default=None, help="Locale for short/medium/long/full (default: en-US).")
@click.pass_obj
def convert(
    app: AppContext,
    datetime_text: str | None,
    timezone: str | None,
    targets: tuple[str, ...],
    offsets: bool,
    comparisons: tuple[str, ...],
    formats: tuple[str, ...],
    locale: str | None,
) -> None:
    """Convert a time (default: now) into other zones."""
    result = app.clock_service().get_time(
        datetime_text,
        timezone=timezone,
        timezones=list(targets),
        include_offsets=offsets,
        comparisons=list(comparisons),
        formats=list(formats),
        locale=locale,
    )
    app.emit(result)
