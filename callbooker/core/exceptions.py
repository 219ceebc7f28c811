"""Custom exception classes for the call booker."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class BookerError(Exception):
    """Base exception for the call booker."""

    http_status: int = 500
    error_code: str = "BOOKER_ERROR"

    def __init__(
        self, message: str, recoverable: bool = True, details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize booker error.

        Args:
            message: Error message
            recoverable: Whether the run can continue past this error
            details: Additional error details
        """
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    @property
    def title(self) -> str:
        """Human readable title for problem responses."""
        return self.error_code.replace("_", " ").title()

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.error_code,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
            "timestamp": self.timestamp,
        }


# Configuration Errors
class ConfigurationError(BookerError):
    """Configuration error occurred."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str = "Configuration error",
        recoverable: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, recoverable, details)


class CallerIdentityMissingError(ConfigurationError):
    """Raised when the caller's name or email is not configured."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(
            "Missing required configuration: "
            f"{' and '.join(m.upper() for m in missing)} must be set",
            details={"missing": [m.upper() for m in missing]},
        )


# Validation Errors
class ValidationError(BookerError):
    """Input validation error."""

    http_status = 422
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation error", field: Optional[str] = None):
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
        """
        self.field = field
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, recoverable=False, details={"field": field} if field else {})


class InvalidAvailabilityWindowError(ValidationError):
    """Availability window is malformed (empty days, start >= end, unknown timezone)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)


# Run-level Errors
class SearchError(BookerError):
    """Expert search failed - aborts the whole run."""

    http_status = 502
    error_code = "BOOKING_FAILED"

    def __init__(self, message: str = "Expert search failed", query: Optional[str] = None):
        self.query = query
        super().__init__(message, recoverable=False, details={"query": query} if query else {})


# Per-candidate Errors
class MarketplaceApiError(BookerError):
    """Marketplace REST API error occurred."""

    http_status = 502
    error_code = "MARKETPLACE_API_ERROR"

    def __init__(
        self,
        message: str = "Marketplace API error occurred",
        status: Optional[int] = None,
        recoverable: bool = True,
    ):
        self.status = status
        super().__init__(message, recoverable, details={"status": status} if status else {})


class TransientApiError(MarketplaceApiError):
    """Retryable API failure (5xx, 429, connection reset)."""

    def __init__(
        self, message: str = "Transient marketplace API failure", status: Optional[int] = None
    ):
        super().__init__(message, status=status, recoverable=True)


class ProfileFetchError(BookerError):
    """Expert profile could not be fetched."""

    error_code = "PROFILE_FETCH_FAILED"

    def __init__(self, username: str, message: Optional[str] = None):
        self.username = username
        super().__init__(
            message or f"Failed to fetch profile for '{username}'",
            recoverable=True,
            details={"username": username},
        )


class BookingPageError(BookerError):
    """Booking page could not be opened or its slots could not be listed."""

    error_code = "BOOKING_PAGE_ERROR"

    def __init__(self, message: str = "Booking page error", recoverable: bool = True):
        super().__init__(message, recoverable)


class SlotSelectionError(BookingPageError):
    """A listed slot could not be selected on the booking page."""

    def __init__(self, message: str = "Slot selection failed"):
        super().__init__(message, recoverable=True)


class BookingSubmissionError(BookerError):
    """Booking form submission failed."""

    error_code = "SUBMISSION_FAILED"

    def __init__(
        self,
        message: str = "Booking submission failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, recoverable=True, details=details)


class SelectorNotFoundError(BookerError):
    """Selector not found - marketplace page structure may have changed."""

    error_code = "SELECTOR_NOT_FOUND"

    def __init__(self, selector_name: str, tried_selectors: Optional[List[str]] = None):
        """
        Initialize selector not found error.

        Args:
            selector_name: Name of the selector that was not found
            tried_selectors: List of selector strings that were tried
        """
        self.selector_name = selector_name
        self.tried_selectors = tried_selectors or []
        message = f"Selector '{selector_name}' not found."
        if self.tried_selectors:
            message += f" Tried: {', '.join(self.tried_selectors)}"
        super().__init__(message, recoverable=True)


class BrowserNotStartedError(BookerError):
    """Browser session used before start() or after close()."""

    error_code = "BROWSER_NOT_STARTED"

    def __init__(self, message: str = "Browser context is not initialized. Call start() first."):
        super().__init__(message, recoverable=False)
