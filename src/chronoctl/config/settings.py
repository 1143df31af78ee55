"""ChronoSettings: one frozen object for CLI flags, env vars and ``chronoctl.toml``.

Highest priority first:

1. keyword arguments (the global CLI flags)
2. ``CHRONOCTL_*`` environment variables, nested with ``__``;
   ``CHRONO_DEBUG`` is accepted for ``debug`` as well
3. the discovered ``chronoctl.toml``
4. defaults from :mod:`chronoctl.config.models`
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from chronoctl.config.discovery import config_overrides, find_config
from chronoctl.config.models import CalcConfig, McpConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feeds the keys set in ``chronoctl.toml`` into settings validation."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = config_overrides(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


# pydantic-settings builds sources from a classmethod, so the path chosen by
# from_cli() travels through a thread-local for the duration of __init__.
_tls = threading.local()


class ChronoSettings(BaseSettings):
    """Settings shared by the CLI, the services and the MCP server.

    Attributes:
        project_root: Directory holding ``chronoctl.toml``, or the CWD.
        config_path: The config file in use, if any.
        debug: Attach debug metadata (and span telemetry) to calculator results.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CHRONOCTL_",
        "env_nested_delimiter": "__",
        "populate_by_name": True,
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("chronoctl_debug", "chrono_debug"),
    )

    calc: CalcConfig = Field(default_factory=CalcConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None))
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> ChronoSettings:
        """Build settings for one invocation.

        An explicit *config_path* skips discovery. Flags passed as ``None``
        are left out so that env vars and the TOML file still apply.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=project_root,
                config_path=toml_path,
                **{name: value for name, value in cli_flags.items() if value is not None},
            )
        finally:
            _tls.toml_path = None
