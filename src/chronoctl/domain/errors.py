"""CalcError: the single exception type raised inside the calculator core.

Services convert it to a ``ServiceResult(ok=False, ...)`` at the boundary,
so callers only ever see structured errors.
"""

from __future__ import annotations

from typing import Any

from chronoctl.domain.types import ErrorCode


class CalcError(Exception):
    """A fail-fast calculator error carrying a structured code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail or {}

    def __repr__(self) -> str:
        return f"CalcError({self.code.value!r}, {self.message!r})"
