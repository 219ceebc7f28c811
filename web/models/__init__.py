"""Request and response models for the web API."""

from .booking import (
    AvailabilityWindowModel,
    BookCallsRequest,
    BookCallsResponse,
    BookingRecordResponse,
    SkippedCandidateResponse,
)

__all__ = [
    "AvailabilityWindowModel",
    "BookCallsRequest",
    "BookCallsResponse",
    "BookingRecordResponse",
    "SkippedCandidateResponse",
]
