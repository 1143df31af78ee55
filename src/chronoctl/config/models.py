"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, chronoctl.toml only contains overrides.
An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from chronoctl.domain.planner import MAX_OPERATIONS
from chronoctl.domain.timepoint import DEFAULT_ZONE, is_valid_timezone

# --- chronoctl.toml sections ---


class CalcConfig(BaseModel):
    """[calc] section."""

    model_config = {"frozen": True}

    default_timezone: str = DEFAULT_ZONE
    max_operations: int = Field(default=MAX_OPERATIONS, ge=1)

    @field_validator("default_timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        if not is_valid_timezone(value):
            msg = f"Unknown timezone: {value!r}"
            raise ValueError(msg)
        return value


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class ChronoConfig(BaseModel):
    """Root configuration: top-level switches plus the sections."""

    model_config = {"frozen": True}

    debug: bool = False
    calc: CalcConfig = Field(default_factory=CalcConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)
