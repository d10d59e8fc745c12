"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime

_SECONDS_PER_DAY = 86_400


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_utc(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 string (or pass through a datetime) as UTC-aware.

    Accepts a trailing 'Z'. Raises ValueError on malformed input.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    result = ensure_utc(parsed)
    assert result is not None
    return result


def age_in_days(then: datetime, now: datetime) -> float:
    """Fractional days elapsed from `then` to `now`; never negative."""
    seconds = (ensure_utc(now) - ensure_utc(then)).total_seconds()  # type: ignore[operator]
    return max(seconds, 0.0) / _SECONDS_PER_DAY


def from_timestamp_utc(timestamp: float) -> datetime:
    """
    Create a UTC-aware datetime from a Unix timestamp.
    Use instead of datetime.fromtimestamp() which returns naive local time.
    """
    return datetime.fromtimestamp(timestamp, tz=UTC)
