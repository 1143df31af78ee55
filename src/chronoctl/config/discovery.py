"""Locate and read ``chronoctl.toml``.

The file is searched from the working directory upward, the way git
finds ``.git/``.  ``CHRONOCTL_CONFIG`` pins an exact file instead and
disables the search.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from chronoctl.config.models import ChronoConfig

CONFIG_FILENAME = "chronoctl.toml"
CONFIG_ENV_VAR = "CHRONOCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``chronoctl.toml`` at or above *start*, or None.

    When ``CHRONOCTL_CONFIG`` is set, only that path is considered.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> ChronoConfig:
    """Parse and validate one config file.

    Malformed TOML is reported as a :class:`click.ClickException` naming
    the file; bad values raise pydantic's ``ValidationError``.
    """
    try:
        with path.open("rb") as fh:
            data: dict[str, Any] = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
    return ChronoConfig.model_validate(data)


def config_overrides(path: Path | None) -> dict[str, Any]:
    """The keys a config file actually sets, validated, as plain data."""
    if path is None or not path.is_file():
        return {}
    return load_config(path).model_dump(exclude_unset=True)
