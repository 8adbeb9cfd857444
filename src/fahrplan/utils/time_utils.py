"""Time-related utility functions."""

from datetime import datetime, timedelta
from typing import Optional

from fahrplan.models.base import ensure_utc, utc_now

SHORT_FORMAT = "%H:%M"
LONG_FORMAT = "%Y-%m-%d  %H:%M"


def parse_duration(value: str) -> timedelta:
    """Parse a schedule duration to a timedelta.

    Args:
        value: String like "01:30", "1:30" or "00:45:30"

    Returns:
        The duration

    Raises:
        ValueError: If the string is not HH:MM or HH:MM:SS
    """
    parts = value.strip().split(":")
    if len(parts) == 2:
        hours, minutes = parts
        seconds = "0"
    elif len(parts) == 3:
        hours, minutes, seconds = parts
    else:
        raise ValueError(f"Invalid duration format: {value}")

    try:
        return timedelta(hours=int(hours), minutes=int(minutes), seconds=int(seconds))
    except ValueError as e:
        raise ValueError(f"Invalid duration format: {value}") from e


def format_duration(duration: timedelta) -> str:
    """Format a duration as human-readable string.

    Args:
        duration: Non-negative duration

    Returns:
        Formatted string like "2h 15m" or "45m 30s"
    """
    minutes, seconds = divmod(int(duration.total_seconds()), 60)
    hours, minutes = divmod(minutes, 60)

    # two units at most, the larger one always shown
    if hours:
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}m {seconds}s" if seconds else f"{minutes}m"
    return f"{seconds}s"


def format_point(point: datetime, now: Optional[datetime] = None) -> str:
    """Format a point in time for display.

    Only the time of day is shown when the point lies on the same UTC
    date as `now`, the full date otherwise.

    Args:
        point: Timezone-aware point in time
        now: Reference time (default: current time)

    Returns:
        Formatted string like "14:30" or "2023-12-27  14:30"
    """
    now = now or utc_now()
    if ensure_utc(point).date() == ensure_utc(now).date():
        return point.strftime(SHORT_FORMAT)
    return point.strftime(LONG_FORMAT)
