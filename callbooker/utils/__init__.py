"""Utility helpers."""

from .helpers import format_local_datetime, random_delay
from .masking import mask_email, mask_sensitive_data
from .timezones import parse_time_of_day, resolve_timezone

__all__ = [
    "format_local_datetime",
    "mask_email",
    "mask_sensitive_data",
    "parse_time_of_day",
    "random_delay",
    "resolve_timezone",
]
