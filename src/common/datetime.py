"""Datetime utilities."""

from datetime import datetime, timezone
from typing import Any, Optional

# Epoch values above this are milliseconds; below it, seconds.
MILLISECONDS_THRESHOLD = 10_000_000_000


def to_number(value: Any) -> Optional[float]:
    """Coerce an int, float or numeric string to a float. Booleans are not numbers."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def parse_timestamp(value: Any) -> datetime:
    """Parse an epoch timestamp in seconds or milliseconds.

    Returns the current UTC time when the value is missing, not numeric,
    or outside the range the platform can represent.
    """
    number = to_number(value)
    if number is None:
        return datetime.now(timezone.utc)
    if number > MILLISECONDS_THRESHOLD:
        number = number / 1000
    try:
        return datetime.fromtimestamp(number, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return datetime.now(timezone.utc)
