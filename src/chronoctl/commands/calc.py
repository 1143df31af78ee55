"""Command: batch time arithmetic (add, subtract, diff, duration_between, stats, sort)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from chronoctl.commands._base import ChronoCommand
from chronoctl.domain.types import InteractionMode, Operation

if TYPE_CHECKING:
    from chronoctl.commands._context import AppContext


def _times(values: tuple[str, ...]) -> Any:
    """Collapse repeated options: none -> None, one -> str, many -> list."""
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return list(values)


@click.command(
    cls=ChronoCommand,
    examples="""\
  # Add 5 days and 3 hours to a specific time
  chronoctl calc add -b 2024-12-25T10:00:00Z --days 5 --hours 3

  # Subtract 2 months from now in New York
  chronoctl calc subtract --months 2 --tz America/New_York

  # Difference between two instants
  chronoctl calc diff -b 2024-01-01T00:00:00Z -C 2024-12-25T15:30:00Z

  # Duration across zones
  chronoctl calc duration_between -b 2024-12-25T09:00:00 --tz America/New_York \\
      -C 2024-12-25T18:00:00 --compare-tz Europe/London

  # One base against many compares, or every pair
  chronoctl calc diff -b 2024-01-01 -C 2024-02-01 -C 2024-03-01
  chronoctl calc diff -b 2024-01-01 -b 2024-06-01 -C 2024-02-01 -C 2024-07-01 --mode cross_product

  # Statistics and sorting
  chronoctl calc stats -b 2024-01-01 -b 2024-01-08 -b 2024-01-29
  chronoctl --json calc sort -b '["2024-03-01", "2024-01-01", "2024-02-01"]'""",
)
@click.argument("operation", type=click.Choice([op.value for op in Operation]))
@click.option("-b", "--base", "base", multiple=True, help="Base timestamp (repeatable).")
@click.option("-C", "--compare", "compare", multiple=True, help="Compare timestamp (repeatable).")
@click.option("--tz", "timezone", default=None, help="Zone for base timestamps.")
@click.option(
    "--compare-tz",
    "compare_timezone",
    default=None,
    help="Zone for compare timestamps (defaults to --tz).",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in InteractionMode]),
    default=InteractionMode.AUTO_DETECT.value,
    help="How base and compare sequences pair up.",
)
@click.option("--years", type=float, default=None, help="Years to add/subtract.")
@click.option("--months", type=float, default=None, help="Months to add/subtract.")
@click.option("--days", type=float, default=None, help="Days to add/subtract.")
@click.option("--hours", type=float, default=None, help="Hours to add/subtract.")
@click.option("--minutes", type=float, default=None, help="Minutes to add/subtract.")
@click.option("--seconds", type=float, default=None, help="Seconds to add/subtract.")
@click.option("--milliseconds", type=float, default=None, help="Milliseconds to add/subtract.")
@click.pass_obj
def calc(
    app: AppContext,
    operation: str,
    base: tuple[str, ...],
    compare: tuple[str, ...],
    timezone: str | None,
    compare_timezone: str | None,
    mode: str,
    years: float | None,
    months: float | None,
    days: float | None,
    hours: float | None,
    minutes: float | None,
    seconds: float | None,
    milliseconds: float | None,
) -> None:
    """Run time arithmetic over one or many timestamps."""
    result = app.calculator().execute(
        operation,
        interaction_mode=mode,
        base_time=_times(base),
        compare_time=_times(compare),
        timezone=timezone,
        compare_time_timezone=compare_timezone,
        years=years,
        months=months,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        milliseconds=milliseconds,
    )
    app.emit(result)
