"""Booking API models."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from callbooker.core.exceptions import InvalidAvailabilityWindowError
from callbooker.models.availability import AvailabilityWindow
from callbooker.models.booking import BookingRequest
from callbooker.utils.timezones import resolve_timezone

DayName = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
TIME_OF_DAY_PATTERN = r"^\d{2}:\d{2}$"


class AvailabilityWindowModel(BaseModel):
    """Availability window as sent by API clients."""

    days: List[DayName] = Field(..., min_length=1)
    start: str = Field(..., pattern=TIME_OF_DAY_PATTERN, examples=["09:00"])
    end: str = Field(..., pattern=TIME_OF_DAY_PATTERN, examples=["17:00"])
    timezone: str = Field(..., min_length=1, examples=["America/New_York"])

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        resolve_timezone(v)
        return v.strip()

    @model_validator(mode="after")
    def validate_window(self) -> "AvailabilityWindowModel":
        """Reject out-of-range times and start >= end."""
        try:
            self.to_domain()
        except InvalidAvailabilityWindowError as e:
            raise ValueError(e.message) from e
        return self

    def to_domain(self) -> AvailabilityWindow:
        return AvailabilityWindow.from_strings(self.days, self.start, self.end, self.timezone)


class BookCallsRequest(BaseModel):
    """Body of POST /api/book-calls."""

    target_company: str = Field(..., min_length=1, examples=["Netflix"])
    target_role: str = Field(..., min_length=1, examples=["Product Manager"])
    num_calls: int = Field(default=3, ge=1)
    max_price: float = Field(default=0, ge=0)
    availability: List[AvailabilityWindowModel] = Field(..., min_length=1)

    @field_validator("target_company", "target_role")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    def to_domain(self) -> BookingRequest:
        return BookingRequest.create(
            target_company=self.target_company,
            target_role=self.target_role,
            num_calls=self.num_calls,
            max_price=self.max_price,
            availability=[w.to_domain() for w in self.availability],
        )


class BookingRecordResponse(BaseModel):
    """A booked call."""

    expert_username: str
    expert_name: str
    expert_title: str
    session_price: float
    currency: str
    service_title: str
    time_user_tz: str
    user_timezone: str
    time_utc: str
    topmate_profile_url: str
    topmate_booking_url: Optional[str] = None


class SkippedCandidateResponse(BaseModel):
    """A candidate that was not booked."""

    username: str
    reason: str


class BookCallsResponse(BaseModel):
    """Result of a booking run."""

    status: str = "success"
    booked: int
    bookings: List[BookingRecordResponse]
    skipped_candidates: List[SkippedCandidateResponse]
