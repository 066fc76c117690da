"""
Utility functions for duration formatting and calendar bucketing.

This module provides the compact duration display format used on time
records and the date helpers that decide which calendar day, week or
month a record belongs to.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from timetracker.fastapi.core.exceptions import ValidationError


SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

_DURATION_PATTERNS = (
    (re.compile(r"^(\d+)h (\d+)m$"), (SECONDS_PER_HOUR, SECONDS_PER_MINUTE)),
    (re.compile(r"^(\d+)m (\d+)s$"), (SECONDS_PER_MINUTE, 1)),
    (re.compile(r"^(\d+)s$"), (1,)),
)


def format_duration(total_seconds: int) -> str:
    """
    Format elapsed seconds for display.

    Examples:
        3661 -> "1h 1m"
        125  -> "2m 5s"
        45   -> "45s"

    Args:
        total_seconds: Non-negative whole number of seconds

    Returns:
        Display string; seconds are dropped once the value reaches an hour

    Raises:
        ValidationError: If the value is negative or not an integer
    """
    if isinstance(total_seconds, bool) or not isinstance(total_seconds, int):
        raise ValidationError(f"Duration must be a whole number of seconds, got {total_seconds!r}")
    if total_seconds < 0:
        raise ValidationError(f"Duration cannot be negative ({total_seconds}s)")

    hours = total_seconds // SECONDS_PER_HOUR
    minutes = (total_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    seconds = total_seconds % SECONDS_PER_MINUTE

    if hours > 0:
        return f"{hours}h {minutes}m"
    elif minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def parse_duration(text: str) -> int:
    """
    Parse a display string produced by format_duration back into seconds.

    Values of an hour or more come back truncated to the minute, since the
    display format does not carry their seconds.

    Raises:
        ValidationError: If the text is not one of the three display shapes
    """
    candidate = (text or "").strip()
    for pattern, multipliers in _DURATION_PATTERNS:
        match = pattern.match(candidate)
        if match:
            return sum(int(part) * factor for part, factor in zip(match.groups(), multipliers))
    raise ValidationError(f"Unrecognised duration format: {text!r}")


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware timestamp to server-local naive time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def calendar_date(value: datetime) -> str:
    """Server-local calendar date of a timestamp as YYYY-MM-DD."""
    return to_local_naive(value).date().isoformat()


def start_of_week(day: date) -> date:
    """Monday of the week containing the given day."""
    return day - timedelta(days=day.weekday())


def start_of_month(day: date) -> date:
    """First day of the month containing the given day."""
    return day.replace(day=1)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two timestamps, floored; may be negative."""
    delta = to_local_naive(end) - to_local_naive(start)
    return delta // timedelta(seconds=1)


def hours_from_seconds(total_seconds: Optional[int]) -> float:
    """Seconds to hours rounded to one decimal place."""
    return round((total_seconds or 0) / SECONDS_PER_HOUR, 1)
