"""Timezone and time-of-day parsing helpers."""

import re
from datetime import time
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_TIME_OF_DAY = re.compile(r"^(\d{2}):(\d{2})$")


@lru_cache(maxsize=128)
def resolve_timezone(name: str) -> ZoneInfo:
    """
    Resolve an IANA timezone name.

    Args:
        name: Timezone name such as "America/New_York" or "UTC"

    Returns:
        ZoneInfo instance

    Raises:
        ValueError: If the name is empty or not in the timezone database
    """
    if not name or not name.strip():
        raise ValueError("Timezone name is empty")
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ValueError(f"Unknown timezone: {name!r}") from None


def parse_time_of_day(value: str) -> time:
    """
    Parse an "HH:MM" string (24-hour clock).

    Raises:
        ValueError: If the string is malformed or out of range
    """
    match = _TIME_OF_DAY.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Time of day must be HH:MM, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time of day out of range: {value!r}")
    return time(hour, minute)
