"""Tests for custom exceptions."""

import pytest

from callbooker.core.exceptions import (
    BookerError,
    BookingPageError,
    BookingSubmissionError,
    BrowserNotStartedError,
    CallerIdentityMissingError,
    ConfigurationError,
    InvalidAvailabilityWindowError,
    MarketplaceApiError,
    ProfileFetchError,
    SearchError,
    SelectorNotFoundError,
    SlotSelectionError,
    TransientApiError,
    ValidationError,
)


def test_base_error_to_dict():
    """Test BookerError serialization."""
    error = BookerError("Something broke", recoverable=False, details={"k": "v"})

    data = error.to_dict()

    assert data["error"] == "BOOKER_ERROR"
    assert data["message"] == "Something broke"
    assert data["recoverable"] is False
    assert data["details"] == {"k": "v"}
    assert "timestamp" in data
    assert str(error) == "Something broke"


def test_title_derived_from_code():
    assert SearchError().title == "Booking Failed"


@pytest.mark.parametrize(
    "error,status,code",
    [
        (ConfigurationError(), 500, "CONFIGURATION_ERROR"),
        (CallerIdentityMissingError(["user_email"]), 500, "CONFIGURATION_ERROR"),
        (ValidationError("bad"), 422, "VALIDATION_ERROR"),
        (InvalidAvailabilityWindowError("bad", field="start"), 422, "VALIDATION_ERROR"),
        (SearchError("down"), 502, "BOOKING_FAILED"),
        (MarketplaceApiError(), 502, "MARKETPLACE_API_ERROR"),
    ],
)
def test_http_mapping(error, status, code):
    """Test each fatal error carries its HTTP status and code."""
    assert error.http_status == status
    assert error.error_code == code


def test_validation_error_field():
    error = ValidationError("must be at least 1", field="num_calls")
    assert error.field == "num_calls"
    assert "num_calls" in error.message
    assert error.details == {"field": "num_calls"}
    assert not error.recoverable


def test_search_error_query():
    error = SearchError("timed out", query="Netflix PM")
    assert error.details == {"query": "Netflix PM"}
    assert not error.recoverable


def test_transient_api_error_is_recoverable():
    error = TransientApiError(status=503)
    assert isinstance(error, MarketplaceApiError)
    assert error.recoverable
    assert error.status == 503


@pytest.mark.parametrize(
    "error,code",
    [
        (ProfileFetchError("jane"), "PROFILE_FETCH_FAILED"),
        (BookingPageError(), "BOOKING_PAGE_ERROR"),
        (SlotSelectionError(), "BOOKING_PAGE_ERROR"),
        (BookingSubmissionError(), "SUBMISSION_FAILED"),
        (SelectorNotFoundError("booking.submit"), "SELECTOR_NOT_FOUND"),
    ],
)
def test_per_candidate_errors_are_recoverable(error, code):
    assert error.recoverable
    assert error.error_code == code


def test_profile_fetch_error_default_message():
    assert ProfileFetchError("jane").message == "Failed to fetch profile for 'jane'"


def test_selector_not_found_lists_tried():
    error = SelectorNotFoundError("booking.name", ["#name", "input[name='name']"])
    assert "#name" in error.message
    assert error.tried_selectors == ["#name", "input[name='name']"]


def test_browser_not_started_is_fatal():
    assert not BrowserNotStartedError().recoverable
