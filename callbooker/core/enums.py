"""Centralized enum definitions for the call booker."""

import re
from datetime import datetime
from enum import Enum
from typing import Any


class Weekday(str, Enum):
    """Days of week as accepted in availability windows."""
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @classmethod
    def from_datetime(cls, value: datetime) -> "Weekday":
        """Weekday of a (local) datetime."""
        return list(cls)[value.weekday()]

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Parse 'Mon', 'monday' or 'MON' into a Weekday."""
        key = value.strip()[:3].title()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown day of week: {value!r}") from None


class ServiceType(str, Enum):
    """Kinds of services an expert can offer."""
    VIDEO_MEETING = "video-meeting"
    CALL = "call"
    CHAT = "chat"
    PRIORITY_MESSAGE = "priority-message"
    DOCUMENT = "document"
    OTHER = "other"

    @property
    def is_live(self) -> bool:
        """Whether the service is a live interactive session."""
        return self in LIVE_SERVICE_TYPES

    @classmethod
    def from_raw(cls, raw: Any) -> "ServiceType":
        """
        Classify the marketplace's raw service type.

        The profile API reports numeric codes, the website shows labels such as
        "Video meeting" or "Priority DM".

        Args:
            raw: Numeric code or free-text label

        Returns:
            Matching ServiceType, OTHER when unknown
        """
        if raw is None or isinstance(raw, bool):
            return cls.OTHER

        if isinstance(raw, int) or (isinstance(raw, str) and raw.strip().isdigit()):
            return _NUMERIC_SERVICE_TYPES.get(int(raw), cls.OTHER)

        text = str(raw).strip().lower()
        if not text:
            return cls.OTHER
        try:
            return cls(text)
        except ValueError:
            pass

        if "priority" in text or _DM_PATTERN.search(text) or "message" in text:
            return cls.PRIORITY_MESSAGE
        if "video" in text or "meeting" in text:
            return cls.VIDEO_MEETING
        if "call" in text:
            return cls.CALL
        if "chat" in text:
            return cls.CHAT
        if any(k in text for k in ("document", "pdf", "digital", "download")):
            return cls.DOCUMENT
        return cls.OTHER


LIVE_SERVICE_TYPES = frozenset({ServiceType.VIDEO_MEETING, ServiceType.CALL, ServiceType.CHAT})

_NUMERIC_SERVICE_TYPES = {
    1: ServiceType.VIDEO_MEETING,
    2: ServiceType.PRIORITY_MESSAGE,
    3: ServiceType.DOCUMENT,
}

_DM_PATTERN = re.compile(r"\bdm\b")


class SkipReason(str, Enum):
    """Why a candidate did not result in a booking."""
    PROFILE_FETCH_FAILED = "profile fetch failed"
    CRITERIA_MISMATCH = "criteria mismatch"
    NO_AFFORDABLE_LIVE_SERVICE = "no affordable live service"
    BOOKING_PAGE_ERROR = "booking page error"
    NO_SLOT_IN_AVAILABILITY = "no slot in availability"
    SUBMISSION_FAILED = "submission failed"


class RunState(str, Enum):
    """States of a booking orchestration run."""
    SEARCHING = "searching"
    ENUMERATING = "enumerating"
    QUALIFYING = "qualifying"
    SLOT_MATCHING = "slot_matching"
    BOOKING = "booking"
    SKIPPING = "skipping"
    DONE = "done"
