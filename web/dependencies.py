"""Shared dependencies for the web application."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from callbooker.core.config import get_settings
from callbooker.services.booking.runner import BookingRunner

# Shared by the app (state + exception handler) and the rate limited routes
limiter = Limiter(key_func=get_remote_address)


def booking_rate_limit() -> str:
    """Rate limit for the booking endpoint, read per request so tests can change it."""
    return get_settings().booking_rate_limit


def get_booking_runner() -> BookingRunner:
    """
    Booking runner dependency.

    A fresh runner per request; it owns no resources until ``run`` is awaited.
    """
    return BookingRunner(get_settings())
