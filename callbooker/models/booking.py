"""Booking-side domain models: slots, qualification results and run outcomes."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.enums import SkipReason
from ..core.exceptions import ValidationError
from ..utils.timezones import resolve_timezone
from .availability import AvailabilityWindow
from .expert import CandidateIdentity, ServiceOffering


@dataclass(frozen=True)
class CallerDetails:
    """Identity entered on booking forms."""

    name: str
    email: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class SlotCandidate:
    """
    A slot offered on a booking page.

    ``source_reference`` is an opaque handle understood only by the driver that
    produced the slot. ``instant`` is filled in once the label is resolved.
    """

    raw_label: str
    source_reference: Any = None
    instant: Optional[datetime] = None


@dataclass(frozen=True)
class QualificationResult:
    """Outcome of checking one expert against company, role and price."""

    candidate: CandidateIdentity
    qualifying_services: Tuple[ServiceOffering, ...] = ()
    criteria_matched: bool = False
    reason: Optional[SkipReason] = None

    @property
    def matched(self) -> bool:
        """True only when criteria matched and at least one service qualifies."""
        return self.criteria_matched and bool(self.qualifying_services)


@dataclass(frozen=True)
class BookingConfirmation:
    """What the booking page returned after submission."""

    confirmation_url: str


@dataclass(frozen=True)
class BookingRecord:
    """A successfully committed booking."""

    expert_username: str
    expert_name: str
    expert_title: str
    service_title: str
    price: float
    currency: str
    instant: datetime
    caller_timezone: str
    profile_url: str
    booking_url: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for API and CLI output."""
        local = self.instant.astimezone(resolve_timezone(self.caller_timezone))
        return {
            "expert_username": self.expert_username,
            "expert_name": self.expert_name,
            "expert_title": self.expert_title,
            "service_title": self.service_title,
            "session_price": self.price,
            "currency": self.currency,
            "time_user_tz": local.isoformat(),
            "user_timezone": self.caller_timezone,
            "time_utc": self.instant.astimezone(timezone.utc).isoformat(),
            "topmate_profile_url": self.profile_url,
            "topmate_booking_url": self.booking_url,
        }


@dataclass(frozen=True)
class SkipEntry:
    """A candidate that was processed but not booked."""

    username: str
    reason: SkipReason

    def to_dict(self) -> Dict[str, str]:
        return {"username": self.username, "reason": self.reason.value}


@dataclass
class BookingOutcome:
    """Aggregate result of one orchestration run."""

    bookings: List[BookingRecord] = field(default_factory=list)
    skipped: List[SkipEntry] = field(default_factory=list)

    @property
    def booked_count(self) -> int:
        return len(self.bookings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "booked": self.booked_count,
            "bookings": [b.to_dict() for b in self.bookings],
            "skipped_candidates": [s.to_dict() for s in self.skipped],
        }


@dataclass(frozen=True)
class BookingRequest:
    """Validated input of a booking run."""

    target_company: str
    target_role: str
    num_calls: int
    max_price: float
    availability: Tuple[AvailabilityWindow, ...]

    def __post_init__(self) -> None:
        if not self.target_company or not self.target_company.strip():
            raise ValidationError("must not be empty", field="target_company")
        if not self.target_role or not self.target_role.strip():
            raise ValidationError("must not be empty", field="target_role")
        if self.num_calls < 1:
            raise ValidationError("must be at least 1", field="num_calls")
        if self.max_price < 0:
            raise ValidationError("must not be negative", field="max_price")
        if not self.availability:
            raise ValidationError("at least one window is required", field="availability")

    @classmethod
    def create(
        cls,
        target_company: str,
        target_role: str,
        num_calls: int,
        max_price: float,
        availability: Sequence[AvailabilityWindow],
    ) -> "BookingRequest":
        return cls(
            target_company=target_company.strip(),
            target_role=target_role.strip(),
            num_calls=num_calls,
            max_price=max_price,
            availability=tuple(availability),
        )

    @property
    def search_query(self) -> str:
        """Free-text query sent to the marketplace search."""
        return f"{self.target_company} {self.target_role}"

    @property
    def primary_timezone(self) -> str:
        """Timezone used to present booked times to the caller."""
        return self.availability[0].timezone
