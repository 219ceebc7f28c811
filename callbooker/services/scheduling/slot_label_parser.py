"""Parse booking-page slot labels into timezone-aware instants."""

import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo

from loguru import logger

from .time_resolver import TimeResolver

# Labels with an explicit year, tried in order
_FULL_FORMATS: Tuple[str, ...] = (
    "%a, %d %b %Y %I:%M %p",
    "%a %d %b %Y %I:%M %p",
    "%d %b %Y %I:%M %p",
    "%a, %d %b %Y %H:%M",
    "%d %b %Y %H:%M",
    "%d %B %Y %I:%M %p",
    "%d %B %Y %H:%M",
)

# Labels without a year; the year is inferred from the reference date
_YEARLESS_FORMATS: Tuple[str, ...] = (
    "%a, %d %b %I:%M %p",
    "%a %d %b %I:%M %p",
    "%d %b %I:%M %p",
    "%a %d %b %H:%M",
    "%d %b %H:%M",
)

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"\s*(?:·|\||•|-{1,2}|@|\bat\b)\s*", re.IGNORECASE)
_DAY_SUFFIX = re.compile(r"(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)
_COMPACT_MERIDIEM = re.compile(r"(\d)(am|pm)\b", re.IGNORECASE)


class SlotLabelParser:
    """
    Turn slot labels shown by the marketplace into aware datetimes.

    Labels carrying an offset (ISO-8601 with ``Z`` or ``+HH:MM``) keep it.
    Everything else is wall-clock time in the expert's timezone.
    """

    def __init__(self, reference_date: Optional[date] = None):
        """
        Args:
            reference_date: "Today" used to infer missing years (default: today)
        """
        self._reference_date = reference_date

    @property
    def reference_date(self) -> date:
        return self._reference_date or date.today()

    @staticmethod
    def _normalize(label: str) -> str:
        text = _WHITESPACE.sub(" ", label.strip())
        text = _SEPARATORS.sub(" ", text)
        text = _DAY_SUFFIX.sub(r"\1", text)
        text = _COMPACT_MERIDIEM.sub(r"\1 \2", text)
        return text.replace(".", "").strip()

    @staticmethod
    def _parse_iso(label: str) -> Optional[datetime]:
        text = label.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None

    def _infer_year(self, parsed: datetime) -> datetime:
        """Pick the first occurrence on or after yesterday (slots are never far in the past)."""
        earliest = self.reference_date - timedelta(days=1)
        candidate = parsed.replace(year=earliest.year)
        if candidate.date() < earliest:
            candidate = candidate.replace(year=earliest.year + 1)
        return candidate

    def _parse_naive(self, label: str) -> Optional[datetime]:
        text = self._normalize(label)
        for fmt in _FULL_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        for fmt in _YEARLESS_FORMATS:
            try:
                # Year 2000 is a leap year, so "29 Feb" survives strptime
                parsed = datetime.strptime(f"2000 {text}", f"%Y {fmt}")
            except ValueError:
                continue
            try:
                return self._infer_year(parsed)
            except ValueError:
                # 29 Feb in a non-leap year
                return None
        return None

    def parse(self, label: str, expert_timezone: Union[str, ZoneInfo]) -> Optional[datetime]:
        """
        Parse a slot label.

        Args:
            label: Text shown on the booking page, or an ISO-8601 string
            expert_timezone: Timezone the page displays slots in

        Returns:
            Aware datetime, or None when the label is not recognised
        """
        if not label or not label.strip():
            return None

        iso = self._parse_iso(label)
        if iso is not None:
            if iso.tzinfo is not None:
                return iso
            return TimeResolver.localize(iso, expert_timezone)

        naive = self._parse_naive(label)
        if naive is None:
            logger.debug(f"Unrecognised slot label: {label!r}")
            return None
        return TimeResolver.localize(naive, expert_timezone)
