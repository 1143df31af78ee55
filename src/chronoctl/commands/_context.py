"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Builds services on demand and centralizes result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from chronoctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from chronoctl.config.settings import ChronoSettings
    from chronoctl.services.base import Clock
    from chronoctl.services.calculator import CalculatorService
    from chronoctl.services.clock import ClockService
    from chronoctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  *clock* is forwarded
    to every service, so tests can pin "now" for a whole invocation.
    """

    def __init__(self, settings: ChronoSettings, *, clock: Clock | None = None) -> None:
        self.settings = settings
        self.clock = clock

        from chronoctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Span trees are shown with --verbose and attached for --debug.
        if settings.verbose or settings.debug:
            from chronoctl.services.telemetry import enable_telemetry

            enable_telemetry()

    def calculator(self) -> CalculatorService:
        """A CalculatorService bound to this invocation's settings and clock."""
        from chronoctl.services.calculator import CalculatorService

        return CalculatorService(self.settings, clock=self.clock)

    def clock_service(self) -> ClockService:
        """A ClockService bound to this invocation's settings and clock."""
        from chronoctl.services.clock import ClockService

        return ClockService(self.settings, clock=self.clock)

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and turn a failure into exit status 1.

        Results go to stdout. Errors, and warnings outside ``--json``
        (where they are part of the payload), go to stderr.
        """
        mode = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        rendered = format_result(result, settings=mode)
        if not result.ok:
            click.echo(rendered, err=True)
            raise SystemExit(1)

        click.echo(rendered)
        if not mode.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
