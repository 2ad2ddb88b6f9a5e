"""Timezone-explicit calendar helpers.

Every start-of-day computation goes through this module with a named zone;
the process-local timezone is never used. Instants are exchanged with storage
as epoch milliseconds.
"""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sazio.errors import InvalidInputError

DEFAULT_TIMEZONE = "UTC"
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def resolve_zone(name: str | None) -> ZoneInfo:
    """Return the zone for an IANA name, defaulting to UTC."""
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInputError(f"Unknown timezone: {name}") from exc


def ensure_aware(at: datetime) -> datetime:
    """Treat naive instants as UTC."""
    if at.tzinfo is None:
        return at.replace(tzinfo=UTC)
    return at


def start_of_day(at: datetime, zone: ZoneInfo) -> datetime:
    """Return local midnight of the calendar day containing ``at``.

    A naive ``at`` is wall-clock time in ``zone``, so a bare date names that
    local day. An aware ``at`` is converted into ``zone`` first.
    """
    if at.tzinfo is None:
        local = at.replace(tzinfo=zone)
    else:
        local = at.astimezone(zone)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def to_epoch_ms(at: datetime) -> int:
    """Convert an instant to epoch milliseconds."""
    return (ensure_aware(at) - EPOCH) // _ONE_MS


def from_epoch_ms(value: int, zone: ZoneInfo) -> datetime:
    """Convert epoch milliseconds to an aware datetime in ``zone``."""
    return (EPOCH + timedelta(milliseconds=value)).astimezone(zone)


def day_window(at: datetime, zone: ZoneInfo, days: int = 1) -> tuple[int, int]:
    """Return the [start, end) epoch-ms window of ``days`` calendar days.

    Days are added in local wall-clock time, so windows spanning a DST change
    are 23 or 25 hours long per affected day.
    """
    start = start_of_day(at, zone)
    end = start + timedelta(days=days)
    return to_epoch_ms(start), to_epoch_ms(end)


def iso_date(value: int, zone: ZoneInfo) -> str:
    """Return the ISO calendar date of an epoch-ms instant in ``zone``."""
    return from_epoch_ms(value, zone).date().isoformat()
