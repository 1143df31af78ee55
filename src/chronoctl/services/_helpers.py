"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from chronoctl.domain.timepoint import format_instant


def now_utc() -> datetime:
    """The system clock as an aware UTC datetime (the default service clock)."""
    return datetime.now(UTC)


def now_iso(now: datetime) -> str:
    """Render *now* as canonical ISO 8601 with milliseconds."""
    return format_instant(now.astimezone(UTC))


def zone_label(explicit: str | None, default_zone: str) -> str:
    """Report an explicit zone as-is, an implicit one as ``default:<zone>``.

    Examples:
        >>> zone_label("Europe/Paris", "UTC")
        'Europe/Paris'
        >>> zone_label(None, "UTC")
        'default:UTC'
    """
    return explicit if explicit else f"default:{default_zone}"

