"""Parsing of the date strings found in Twitter exports."""

from datetime import datetime, timezone
from typing import Any, List

from .errors import InvalidDateFormat

# Fallbacks for values fromisoformat rejects, e.g. the classic API format
TIMESTAMP_FORMATS: List[str] = [
    "%a %b %d %H:%M:%S %z %Y",
    "%Y-%m-%d %H:%M:%S%z",
]


def parse_twitter_date(value: Any) -> datetime:
    """Convert an archive date string into an aware UTC datetime.

    Accepts ISO 8601 (``2020-01-01T00:00:00.000Z``, explicit offsets) and
    the ``Wed Oct 10 20:19:24 +0000 2018`` format. Naive values are read
    as UTC.

    Raises:
        InvalidDateFormat: if the value is not a string or matches no format.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateFormat(f"Not a date string: {value!r}")

    ts = value.strip()
    if ts.endswith('Z'):
        ts = ts[:-1] + '+00:00'

    try:
        dt = datetime.fromisoformat(ts)
    except ValueError:
        dt = None
        for fmt in TIMESTAMP_FORMATS:
            try:
                dt = datetime.strptime(ts, fmt)
                break
            except ValueError:
                continue

    if dt is None:
        raise InvalidDateFormat(f"Unrecognised date format: {value!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_msec_timestamp(value: Any) -> datetime:
    """Convert a stringified millisecond epoch (``"1546300800000"``)."""
    try:
        ms = int(value)
    except (TypeError, ValueError):
        raise InvalidDateFormat(f"Not a millisecond timestamp: {value!r}")
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def coerce_date(value: Any) -> Any:
    """Return ``value`` parsed if it is a string, untouched otherwise."""
    if isinstance(value, str):
        return parse_twitter_date(value)
    return value
