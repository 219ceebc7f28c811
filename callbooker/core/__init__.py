"""Core infrastructure module."""

from .enums import RunState, ServiceType, SkipReason, Weekday
from .environment import Environment
from .exceptions import (
    # Base exception
    BookerError,
    # Configuration
    ConfigurationError,
    CallerIdentityMissingError,
    # Validation
    ValidationError,
    InvalidAvailabilityWindowError,
    # Run-level
    SearchError,
    # Per-candidate
    MarketplaceApiError,
    TransientApiError,
    ProfileFetchError,
    BookingPageError,
    SlotSelectionError,
    BookingSubmissionError,
    SelectorNotFoundError,
    BrowserNotStartedError,
)

__all__ = [
    "RunState",
    "ServiceType",
    "SkipReason",
    "Weekday",
    "Environment",
    "BookerError",
    "ConfigurationError",
    "CallerIdentityMissingError",
    "ValidationError",
    "InvalidAvailabilityWindowError",
    "SearchError",
    "MarketplaceApiError",
    "TransientApiError",
    "ProfileFetchError",
    "BookingPageError",
    "SlotSelectionError",
    "BookingSubmissionError",
    "SelectorNotFoundError",
    "BrowserNotStartedError",
]
