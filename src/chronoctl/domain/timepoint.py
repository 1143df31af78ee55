"""TimePoint and the timestamp resolver.

A TimePoint is an absolute instant plus the zone used to display it.
Resolution never raises: strings that match no supported ISO 8601
representation (or name an unknown zone) yield an *invalid* TimePoint
that carries the reason, and the caller decides whether that is fatal.

Zone rules:
- A string ending in ``Z`` or a numeric offset keeps its instant and is
  re-expressed in the explicit zone (or the default zone).
- A zone-less string is read as wall-clock time in the explicit zone
  (or the default zone).

Instants have millisecond precision; sub-millisecond input is truncated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_ZONE = "UTC"

_UTC_ALIASES = frozenset({"UTC", "Z", "Etc/UTC"})


@dataclass(frozen=True)
class TimePoint:
    """An instant expressed in a zone, or an invalid parse with its reason."""

    source: str
    instant: datetime | None
    zone: str
    invalid_reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.instant is not None and self.invalid_reason is None

    @property
    def epoch_ms(self) -> int:
        """Milliseconds since the Unix epoch (valid TimePoints only)."""
        return to_epoch_ms(self._require())

    def canonical(self) -> str:
        """ISO 8601 with milliseconds; UTC renders with a ``Z`` suffix."""
        return format_instant(self._require())

    def local(self) -> datetime:
        """The instant as an aware datetime in this TimePoint's zone."""
        return self._require()

    def with_instant(self, instant: datetime) -> TimePoint:
        """Return a new TimePoint in the same zone at *instant*."""
        zone = get_zone(self.zone)
        return TimePoint(
            source=self.source,
            instant=instant.astimezone(zone),
            zone=self.zone,
        )

    def _require(self) -> datetime:
        if self.instant is None or self.invalid_reason is not None:
            msg = f"TimePoint {self.source!r} is invalid: {self.invalid_reason}"
            raise ValueError(msg)
        return self.instant


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------


@lru_cache(maxsize=256)
def get_zone(name: str) -> tzinfo:
    """Return a tzinfo for an IANA *name*; raises KeyError when unknown."""
    if name in _UTC_ALIASES:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise KeyError(name) from exc


def is_valid_timezone(name: str) -> bool:
    """Whether *name* resolves to a known timezone."""
    if not name:
        return False
    try:
        get_zone(name)
    except KeyError:
        return False
    return True


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def to_epoch_ms(instant: datetime) -> int:
    """Integer milliseconds since the epoch for an aware datetime."""
    delta = instant.astimezone(UTC) - datetime(1970, 1, 1, tzinfo=UTC)
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000


def from_epoch_ms(value: float, zone: str = DEFAULT_ZONE) -> datetime:
    """Aware datetime in *zone* for an epoch-millisecond value."""
    base = datetime(1970, 1, 1, tzinfo=UTC)
    return (base + timedelta(milliseconds=round(value))).astimezone(get_zone(zone))


def format_instant(instant: datetime) -> str:
    """Render an aware datetime as ISO 8601 with millisecond precision."""
    text = instant.isoformat(timespec="milliseconds")
    if instant.utcoffset() is not None and instant.tzinfo is UTC:
        return text.removesuffix("+00:00") + "Z"
    return text


def _truncate_ms(instant: datetime) -> datetime:
    return instant.replace(microsecond=(instant.microsecond // 1000) * 1000)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


def resolve_timestamp(
    text: str,
    zone: str | None = None,
    *,
    default_zone: str = DEFAULT_ZONE,
) -> TimePoint:
    """Parse *text* into a TimePoint, optionally under an explicit *zone*.

    Never raises. Returns an invalid TimePoint when *text* is not a
    supported ISO 8601 representation or a zone name does not resolve.
    """
    zone_name = zone or default_zone
    try:
        tz = get_zone(zone_name)
    except KeyError:
        return TimePoint(
            source=text,
            instant=None,
            zone=zone_name,
            invalid_reason=f"unsupported zone: {zone_name}",
        )

    candidate = text.strip() if isinstance(text, str) else ""
    if not candidate:
        return TimePoint(source=text, instant=None, zone=zone_name, invalid_reason="empty input")

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        return TimePoint(
            source=text,
            instant=None,
            zone=zone_name,
            invalid_reason=f"unparsable: {exc}",
        )

    if parsed.tzinfo is None:
        # Wall-clock reading; fold=0 picks the earlier offset for ambiguous times.
        local = parsed.replace(tzinfo=tz)
        instant = local.astimezone(UTC).astimezone(tz)
    else:
        instant = parsed.astimezone(tz)

    return TimePoint(source=text, instant=_truncate_ms(instant), zone=zone_name)


def timepoint_at(instant: datetime, zone: str = DEFAULT_ZONE) -> TimePoint:
    """Build a valid TimePoint directly from an aware datetime."""
    tz = get_zone(zone)
    local = _truncate_ms(instant.astimezone(tz))
    return TimePoint(source=format_instant(local), instant=local, zone=zone)
