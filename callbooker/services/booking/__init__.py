"""Booking flow components.

The scoped runner that wires real adapters lives in ``runner`` and is imported
from there directly.
"""

from .booking_orchestrator import BookingOrchestrator
from .booking_page_driver import PlaywrightBookingPageDriver
from .form_filler import FormFiller
from .interfaces import BookingPageDriver, ProfileProvider, SearchProvider

__all__ = [
    "BookingOrchestrator",
    "BookingPageDriver",
    "FormFiller",
    "PlaywrightBookingPageDriver",
    "ProfileProvider",
    "SearchProvider",
]
