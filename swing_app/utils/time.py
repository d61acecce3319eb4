"""
Timestamp helpers for bar histories.

Bars are keyed by UTC market timestamps. Feeds deliver them as epoch
seconds, epoch milliseconds, ISO-8601 strings or datetimes; everything is
normalized to timezone-aware UTC datetimes here.
"""

from datetime import UTC, datetime
from typing import Union

# Epoch values above this are treated as milliseconds (year 2286 in seconds)
_MS_THRESHOLD = 10_000_000_000

TimestampLike = Union[datetime, int, float, str]


def ensure_utc(ts: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def parse_timestamp(value: TimestampLike) -> datetime:
    """
    Parse a feed timestamp into a UTC datetime.

    Args:
        value: datetime, epoch seconds/milliseconds (number or numeric string)
            or ISO-8601 string

    Returns:
        Timezone-aware UTC datetime

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")

    if isinstance(value, str):
        text = value.strip()
        try:
            value = float(text)
        except ValueError:
            # ISO-8601; fromisoformat handles a trailing Z from 3.11
            return ensure_utc(datetime.fromisoformat(text))

    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if abs(value) >= _MS_THRESHOLD else float(value)
        return datetime.fromtimestamp(seconds, tz=UTC)

    raise ValueError(f"Invalid timestamp: {value!r}")


def to_epoch_ms(ts: datetime) -> int:
    """Convert a datetime to integer epoch milliseconds."""
    return int(ensure_utc(ts).timestamp() * 1000)
