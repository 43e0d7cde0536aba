"""
UTC datetime utilities for Firestore timestamps.

All datetime values handled by the codec are timezone-aware UTC.
Firestore emits RFC 3339 timestamps with up to nanosecond precision;
Python datetimes carry microseconds, so extra fractional digits are
truncated on parse.
"""

import re
from datetime import UTC, datetime

# RFC 3339 with optional fraction; fraction is captured so it can be cut to 6 digits.
_FRACTION_RE = re.compile(r"\.(\d+)(?=(Z|z|[+-]\d{2}:?\d{2})$)")

_FORMAT_WITH_FRACTION = "%Y-%m-%dT%H:%M:%S.%f%z"
_FORMAT_WITHOUT_FRACTION = "%Y-%m-%dT%H:%M:%S%z"


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume it's UTC and attach timezone
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def format_timestamp(dt: datetime) -> str:
    """
    Format a datetime as an RFC 3339 UTC timestamp with microseconds.

    Example: 2024-01-01T00:00:00.000000Z

    Args:
        dt: Naive (treated as UTC) or aware datetime

    Returns:
        Timestamp string accepted by the Firestore REST API
    """
    dt = ensure_utc(dt)
    # strftime("%Y") does not zero-pad years below 1000 on every platform
    return f"{dt.year:04d}-{dt:%m-%dT%H:%M:%S.%f}Z"


def parse_timestamp(value: str) -> datetime | None:
    """
    Parse an RFC 3339 timestamp into a UTC-aware datetime.

    Tries the fractional-seconds form first, then the plain form.
    Fractions longer than microseconds are truncated.

    Args:
        value: Timestamp string (e.g. 2024-01-01T00:00:00.123456789Z)

    Returns:
        UTC-aware datetime, or None if the string is not a valid timestamp
    """
    if not isinstance(value, str):
        return None
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6], value.strip())
    for fmt in (_FORMAT_WITH_FRACTION, _FORMAT_WITHOUT_FRACTION):
        try:
            return datetime.strptime(text, fmt).astimezone(UTC)
        except ValueError:
            continue
    return None
