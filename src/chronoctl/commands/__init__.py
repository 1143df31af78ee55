"""Subcommand modules for chronoctl.

Provides register_commands() which uses deferred imports to keep
``chronoctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from chronoctl.commands.calc import calc
    from chronoctl.commands.convert import convert
    from chronoctl.commands.now import now
    from chronoctl.commands.serve import serve

    cli.add_command(calc)
    cli.add_command(now)
    cli.add_command(convert)
    cli.add_command(serve)
