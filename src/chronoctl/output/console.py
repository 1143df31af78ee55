"""Rich Console factory and theme for chronoctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CHRONO_THEME = Theme(
    {
        "chrono.ok": "bold green",
        "chrono.error": "bold red",
        "chrono.warning": "bold yellow",
        "chrono.op": "bold cyan",
        "chrono.key": "dim",
        "chrono.time": "bold blue",
        "chrono.zone": "magenta",
        "chrono.duration": "green",
        "chrono.index": "dim",
    }
)

_SOURCE_STYLES: dict[str, str] = {
    "base": "chrono.time",
    "compare": "chrono.zone",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CHRONO_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_source(source: str) -> str:
    """Return the Rich style for an add/subtract item's ``source`` tag."""
    return _SOURCE_STYLES.get(source, "")
