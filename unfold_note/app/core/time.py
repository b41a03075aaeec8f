"""Time utilities for timezone-aware UTC datetimes."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_cursor(raw: str) -> datetime:
    """Parse an ISO-8601 pagination cursor into an aware UTC datetime.

    Raises ValueError for malformed input.
    """
    value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    return as_utc(value)
