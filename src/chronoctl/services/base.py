"""BaseService — foundation for chronoctl services.

Every service receives the frozen :class:`ChronoSettings` and a clock at
construction time. The clock is the only source of "now"; services call
it at most once per request so every defaulted timestamp agrees.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from chronoctl.services._helpers import now_utc

if TYPE_CHECKING:
    from chronoctl.config.settings import ChronoSettings

Clock = Callable[[], datetime]


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class CalculatorService(BaseService):
            def execute(self, operation: str, ...) -> ServiceResult:
                now = self._now()
                ...
    """

    def __init__(self, settings: ChronoSettings, *, clock: Clock | None = None) -> None:
        self._settings = settings
        self._clock: Clock = clock or now_utc

    @property
    def settings(self) -> ChronoSettings:
        return self._settings

    @property
    def default_zone(self) -> str:
        return self._settings.calc.default_timezone

    def _now(self) -> datetime:
        """Read the injected clock once; naive values are taken as UTC."""
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return now
