"""Health and diagnostic routes."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends
from loguru import logger

from callbooker import __version__
from callbooker.services.booking.runner import BookingRunner
from web.dependencies import get_booking_runner

router = APIRouter(tags=["health"])


@router.get("/")
async def service_info() -> Dict[str, Any]:
    """Service banner with the available endpoints."""
    return {
        "status": "ok",
        "message": "Expert call booking service is running",
        "endpoints": {
            "info": "GET /",
            "health": "GET /health",
            "browser_check": "GET /api/browser-check",
            "book_calls": "POST /api/book-calls",
        },
    }


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Liveness check."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/api/browser-check")
async def browser_check(runner: BookingRunner = Depends(get_booking_runner)) -> Dict[str, Any]:
    """
    Launch the browser and load the marketplace search page.

    Returns:
        Page title on success, error message otherwise
    """
    try:
        return await runner.browser_check()
    except Exception as e:
        logger.warning(f"Browser check failed: {e}")
        return {"status": "error", "message": str(e)}
