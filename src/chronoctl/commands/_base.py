"""ChronoCommand: a Click command with an ``--examples`` flag.

``--help`` stays short; ``--examples`` prints worked invocations and exits
before any argument is validated.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesOption(click.Option):
    """Eager ``--examples`` flag that prints the owning command's examples."""

    def __init__(self) -> None:
        super().__init__(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=self._show,
            help="Show usage examples.",
        )

    @staticmethod
    def _show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        examples = getattr(ctx.command, "examples", None) or ""
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)


class ChronoCommand(click.Command):
    """click.Command taking an ``examples=`` block for ``--examples``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(ExamplesOption())
