"""Caller availability windows."""

from dataclasses import dataclass
from datetime import time
from typing import FrozenSet, Iterable
from zoneinfo import ZoneInfo

from ..core.enums import Weekday
from ..core.exceptions import InvalidAvailabilityWindowError
from ..utils.timezones import parse_time_of_day, resolve_timezone


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    Recurring weekly time range in a caller-chosen timezone.

    The range is half-open: ``start <= local time < end``. Windows that cross
    midnight are not supported and are rejected.
    """

    days: FrozenSet[Weekday]
    start: time
    end: time
    timezone: str

    def __post_init__(self) -> None:
        if not self.days:
            raise InvalidAvailabilityWindowError("At least one day is required", field="days")
        if self.start >= self.end:
            raise InvalidAvailabilityWindowError(
                f"start ({self.start:%H:%M}) must be before end ({self.end:%H:%M})",
                field="start",
            )
        try:
            resolve_timezone(self.timezone)
        except ValueError as e:
            raise InvalidAvailabilityWindowError(str(e), field="timezone") from e

    @property
    def tz(self) -> ZoneInfo:
        return resolve_timezone(self.timezone)

    @classmethod
    def from_strings(
        cls, days: Iterable[str], start: str, end: str, timezone: str
    ) -> "AvailabilityWindow":
        """
        Build a window from request-style values.

        Args:
            days: Day names such as ["Mon", "Tue"]
            start: "HH:MM"
            end: "HH:MM"
            timezone: IANA timezone name

        Raises:
            InvalidAvailabilityWindowError: If any value is malformed
        """
        try:
            parsed_days = frozenset(Weekday.parse(d) for d in days)
        except (ValueError, AttributeError) as e:
            raise InvalidAvailabilityWindowError(str(e), field="days") from e
        try:
            start_time = parse_time_of_day(start)
        except ValueError as e:
            raise InvalidAvailabilityWindowError(str(e), field="start") from e
        try:
            end_time = parse_time_of_day(end)
        except ValueError as e:
            raise InvalidAvailabilityWindowError(str(e), field="end") from e

        return cls(days=parsed_days, start=start_time, end=end_time, timezone=timezone)

    def describe(self) -> str:
        """Short human readable form, e.g. 'Mon,Tue 09:00-17:00 UTC'."""
        ordered = [d.value for d in Weekday if d in self.days]
        return f"{','.join(ordered)} {self.start:%H:%M}-{self.end:%H:%M} {self.timezone}"
