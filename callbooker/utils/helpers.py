"""Small shared helpers for pacing and display."""

import asyncio
import random
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from ..constants import Intervals
from .timezones import resolve_timezone

__all__ = [
    "random_delay",
    "format_local_datetime",
]


async def random_delay(
    min_seconds: Optional[float] = None, max_seconds: Optional[float] = None
) -> None:
    """
    Add a random delay to simulate human behavior.

    Args:
        min_seconds: Minimum delay (defaults to Intervals.HUMAN_DELAY_MIN)
        max_seconds: Maximum delay (defaults to Intervals.HUMAN_DELAY_MAX)
    """
    min_val = min_seconds or Intervals.HUMAN_DELAY_MIN
    max_val = max_seconds or Intervals.HUMAN_DELAY_MAX
    await asyncio.sleep(random.uniform(min_val, max_val))


def format_local_datetime(
    utc_dt: Optional[datetime] = None,
    tz_name: str = "UTC",
    fmt: str = "%a %d %b %Y %H:%M %Z",
) -> str:
    """
    Convert UTC datetime to a local timezone and format it for display.

    Args:
        utc_dt: UTC datetime to convert. If None, uses current UTC time.
        tz_name: IANA timezone name
        fmt: strftime format string

    Returns:
        Formatted datetime string in local timezone
    """
    if utc_dt is None:
        utc_dt = datetime.now(timezone.utc)

    if utc_dt.tzinfo is None:
        utc_dt = utc_dt.replace(tzinfo=timezone.utc)

    try:
        return utc_dt.astimezone(resolve_timezone(tz_name)).strftime(fmt)
    except ValueError as e:
        logger.error(f"Error converting timezone: {e}, falling back to UTC")
        return utc_dt.astimezone(timezone.utc).strftime(fmt)
