"""Domain models shared by the booking pipeline."""

from .availability import AvailabilityWindow
from .booking import (
    BookingConfirmation,
    BookingOutcome,
    BookingRecord,
    BookingRequest,
    CallerDetails,
    QualificationResult,
    SkipEntry,
    SlotCandidate,
)
from .expert import CandidateIdentity, ExpertProfile, Price, ServiceOffering

__all__ = [
    "AvailabilityWindow",
    "BookingConfirmation",
    "BookingOutcome",
    "BookingRecord",
    "BookingRequest",
    "CallerDetails",
    "CandidateIdentity",
    "ExpertProfile",
    "Price",
    "QualificationResult",
    "ServiceOffering",
    "SkipEntry",
    "SlotCandidate",
]
