"""Request correlation ID middleware for tracking requests across logs."""

import re
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.logger import correlation_id_ctx

# Accept only short, header-safe client supplied IDs
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to add correlation ID to all requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request and add correlation ID.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response with correlation ID header
        """
        request_id = request.headers.get("X-Request-ID", "")
        if not _VALID_REQUEST_ID.match(request_id):
            request_id = str(uuid.uuid4())

        # Store in context variable so the loguru patcher picks it up
        token = correlation_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_ctx.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response


def get_correlation_id() -> str:
    """
    Get the current request's correlation ID.

    Returns:
        Correlation ID string, or empty string if not set
    """
    return correlation_id_ctx.get() or ""
