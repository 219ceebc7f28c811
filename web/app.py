"""FastAPI application for the expert call booker."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from callbooker import __version__
from callbooker.core.config import BookerSettings, get_settings
from callbooker.core.exceptions import BookerError
from callbooker.middleware import CorrelationMiddleware
from web.dependencies import limiter
from web.exception_handlers import (
    booker_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from web.routes import booking_router, health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    settings: BookerSettings = app.state.settings
    logger.info(f"Call booker API starting (env={settings.env}, version={__version__})")
    if not settings.user_name or not settings.user_email:
        logger.warning("USER_NAME / USER_EMAIL not set, booking requests will fail")
    if settings.topmate_api_token is None:
        logger.warning("TOPMATE_API_TOKEN not set, profile enrichment may fail")

    yield

    logger.info("Call booker API shutting down")


def create_app(settings: Optional[BookerSettings] = None) -> FastAPI:
    """
    Factory function to create FastAPI application instance.

    Args:
        settings: Settings to use (default: the settings singleton)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    is_dev = settings.is_development()

    app = FastAPI(
        title="Expert Call Booker API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if is_dev else None,
        redoc_url="/redoc" if is_dev else None,
        openapi_url="/openapi.json" if is_dev else None,
        description=(
            "Finds marketplace experts matching a company and role, filters them by "
            "price and session type, and books calls inside the caller's availability."
        ),
        openapi_tags=[
            {"name": "booking", "description": "Search, qualify and book expert calls"},
            {"name": "health", "description": "Service health and diagnostics"},
        ],
    )
    app.state.settings = settings

    # Correlation ID middleware for request tracking
    app.add_middleware(CorrelationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Accept", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=3600,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(BookerError, booker_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(booking_router)

    return app
