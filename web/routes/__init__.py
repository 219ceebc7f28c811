"""Routes package for the web application."""

from .booking import router as booking_router
from .health import router as health_router

__all__ = ["booking_router", "health_router"]
