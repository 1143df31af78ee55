"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
The CLI and the MCP adapter both consume this type; neither ever sees a
raw CalcError.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from chronoctl.domain.errors import CalcError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_calc_error(cls, exc: CalcError) -> ServiceError:
        """Lift a domain CalcError into the service contract."""
        return cls(code=exc.code.value, message=exc.message, detail=dict(exc.detail))


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"time_calculator"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: CalcError) -> ServiceResult:
        """Build a failed result from a CalcError."""
        return cls(ok=False, op=op, error=ServiceError.from_calc_error(exc))
