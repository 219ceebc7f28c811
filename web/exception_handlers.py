"""RFC 7807 Problem Details exception handlers for FastAPI."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from callbooker.core.exceptions import BookerError
from callbooker.middleware import get_correlation_id
from callbooker.utils.masking import mask_sensitive_data

_ERROR_TYPES = {
    400: "urn:callbooker:error:bad-request",
    404: "urn:callbooker:error:not-found",
    405: "urn:callbooker:error:method-not-allowed",
    422: "urn:callbooker:error:validation",
    429: "urn:callbooker:error:rate-limit",
    500: "urn:callbooker:error:internal-server",
    502: "urn:callbooker:error:upstream",
}

_ERROR_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Validation Error",
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
}

PROBLEM_JSON = "application/problem+json"


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Convert FastAPI HTTPException to RFC 7807 Problem Details format."""
    status_code = exc.status_code

    content = {
        "type": _ERROR_TYPES.get(status_code, f"urn:callbooker:error:http-{status_code}"),
        "title": _ERROR_TITLES.get(status_code, "Error"),
        "status": status_code,
        "detail": exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        "instance": request.url.path,
    }

    headers = getattr(exc, "headers", None) or {}

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers,
        media_type=PROBLEM_JSON,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert Pydantic validation errors to RFC 7807 format."""
    errors = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        errors[field or "body"] = error["msg"]

    return JSONResponse(
        status_code=422,
        content={
            "type": _ERROR_TYPES[422],
            "title": "Validation Error",
            "status": 422,
            "detail": "Request validation failed",
            "instance": request.url.path,
            "error": "VALIDATION_ERROR",
            "errors": errors,
        },
        media_type=PROBLEM_JSON,
    )


async def booker_error_handler(request: Request, exc: BookerError) -> JSONResponse:
    """Render application errors; the status code comes from the exception class."""
    status_code = exc.http_status
    if status_code >= 500:
        logger.error(
            f"{exc.error_code} on {request.url.path}: {mask_sensitive_data(exc.message)}"
        )
    else:
        logger.warning(
            f"{exc.error_code} on {request.url.path}: {mask_sensitive_data(exc.message)}"
        )

    content = {
        "type": f"urn:callbooker:error:{exc.error_code.lower().replace('_', '-')}",
        "title": exc.title,
        "status": status_code,
        "detail": exc.message,
        "instance": request.url.path,
        "error": exc.error_code,
    }
    if exc.details:
        content["details"] = exc.details

    return JSONResponse(status_code=status_code, content=content, media_type=PROBLEM_JSON)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; never leaks stack traces to clients."""
    logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "type": _ERROR_TYPES[500],
            "title": _ERROR_TITLES[500],
            "status": 500,
            "detail": "An unexpected error occurred",
            "instance": request.url.path,
            "error": "INTERNAL_ERROR",
            "request_id": get_correlation_id() or None,
        },
        media_type=PROBLEM_JSON,
    )
