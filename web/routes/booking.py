"""Booking routes."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from loguru import logger

from callbooker.services.booking.runner import BookingRunner
from web.dependencies import booking_rate_limit, get_booking_runner, limiter
from web.models import BookCallsRequest, BookCallsResponse

router = APIRouter(prefix="/api", tags=["booking"])


@router.post("/book-calls", response_model=BookCallsResponse)
@router.post("/book-topmate-calls", response_model=BookCallsResponse, include_in_schema=False)
@limiter.limit(booking_rate_limit)
async def book_calls(
    request: Request,
    payload: BookCallsRequest,
    runner: BookingRunner = Depends(get_booking_runner),
) -> Dict[str, Any]:
    """
    Search, qualify and book up to ``num_calls`` calls.

    Per-candidate problems are reported in ``skipped_candidates``; only
    configuration and search failures turn into error responses.

    Args:
        request: FastAPI request object (required for rate limiter)
        payload: Validated booking request
        runner: Booking runner

    Returns:
        Booking outcome
    """
    booking_request = payload.to_domain()
    logger.info(
        f"Booking request received: company={booking_request.target_company!r} "
        f"role={booking_request.target_role!r} calls={booking_request.num_calls} "
        f"max_price={booking_request.max_price}"
    )
    outcome = await runner.run(booking_request)
    return {"status": "success", **outcome.to_dict()}
