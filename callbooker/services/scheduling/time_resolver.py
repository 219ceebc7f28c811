"""Timezone conversion and weekly availability window checks."""

from datetime import datetime, timezone
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from ...core.enums import Weekday
from ...models.availability import AvailabilityWindow
from ...utils.timezones import resolve_timezone

TimezoneLike = Union[str, ZoneInfo]


class TimeResolver:
    """
    Pure timezone arithmetic used by the slot matcher.

    All instants must be timezone-aware. A window is evaluated in its own
    timezone, so the same instant can fall on a Monday for one window and a
    Tuesday for another.
    """

    @staticmethod
    def resolve_timezone(tz: TimezoneLike) -> ZoneInfo:
        """Accept an IANA name or an already resolved ZoneInfo."""
        if isinstance(tz, ZoneInfo):
            return tz
        return resolve_timezone(tz)

    @staticmethod
    def _require_aware(instant: datetime) -> None:
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise ValueError(f"Instant must be timezone-aware, got naive {instant.isoformat()}")

    @classmethod
    def convert_to_timezone(cls, instant: datetime, target_tz: TimezoneLike) -> datetime:
        """
        Express an instant in another timezone.

        Raises:
            ValueError: If the instant is naive or the timezone is unknown
        """
        cls._require_aware(instant)
        return instant.astimezone(cls.resolve_timezone(target_tz))

    @classmethod
    def to_utc(cls, instant: datetime) -> datetime:
        cls._require_aware(instant)
        return instant.astimezone(timezone.utc)

    @classmethod
    def localize(cls, naive: datetime, tz: TimezoneLike) -> datetime:
        """
        Attach a timezone to a wall-clock datetime.

        Ambiguous times (DST fall-back) resolve to the first occurrence and
        non-existent times (DST spring-forward) keep the pre-transition offset,
        both via ``fold=0``.
        """
        if naive.tzinfo is not None:
            raise ValueError("localize() expects a naive datetime")
        return naive.replace(tzinfo=cls.resolve_timezone(tz), fold=0)

    @classmethod
    def is_instant_within_window(cls, instant: datetime, window: AvailabilityWindow) -> bool:
        """
        Check one window: weekday in the window's days and ``start <= time < end``.

        Raises:
            ValueError: If the instant is naive
        """
        local = cls.convert_to_timezone(instant, window.tz)
        if Weekday.from_datetime(local) not in window.days:
            return False
        local_time = local.time().replace(tzinfo=None)
        return window.start <= local_time < window.end

    @classmethod
    def first_matching_window(
        cls, instant: datetime, windows: Iterable[AvailabilityWindow]
    ) -> Optional[AvailabilityWindow]:
        """Return the first window containing the instant, or None."""
        for window in windows:
            if cls.is_instant_within_window(instant, window):
                return window
        return None

    @classmethod
    def is_instant_within_any_window(
        cls, instant: datetime, windows: Iterable[AvailabilityWindow]
    ) -> bool:
        """Union semantics: any matching window is enough."""
        return cls.first_matching_window(instant, windows) is not None
