#!/usr/bin/env python3
"""
Expert call booker - finds marketplace experts and books calls.

Main entry point for the application.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from callbooker.core.config import get_settings
from callbooker.core.exceptions import BookerError, ValidationError
from callbooker.core.logger import setup_structured_logging
from callbooker.models import BookingRequest
from callbooker.services.booking.runner import BookingRunner


def run_web_mode(host: str, port: int) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from web.app import create_app

    logger.info(f"Starting call booker API on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_config=None)


def load_request(path: Path) -> Dict[str, Any]:
    """Read a booking request JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def parse_request(path: Path) -> BookingRequest:
    """
    Load and validate a booking request file.

    Args:
        path: JSON file with the same shape as the POST /api/book-calls body

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object
        pydantic.ValidationError: If a field is invalid
    """
    from web.models import BookCallsRequest

    return BookCallsRequest.model_validate(load_request(path)).to_domain()


async def run_book_mode(request: BookingRequest) -> Dict[str, Any]:
    """
    Run one booking.

    Returns:
        Outcome in the API response shape
    """
    outcome = await BookingRunner().run(request)
    return {"status": "success", **outcome.to_dict()}


async def run_preview_mode(company: str, role: str, max_price: float) -> List[Dict[str, Any]]:
    """Search and qualify candidates without booking."""
    return await BookingRunner().preview(company, role, max_price)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expert call booker")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL setting)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting)")

    book = sub.add_parser("book", help="Run one booking from a JSON request file")
    book.add_argument("--request", required=True, type=Path, help="Path to request JSON")

    preview = sub.add_parser("preview", help="Search and qualify without booking")
    preview.add_argument("company", help="Target company, e.g. Netflix")
    preview.add_argument("role", help="Target role, e.g. 'Product Manager'")
    preview.add_argument("--max-price", type=float, default=0.0, help="Highest acceptable price")

    return parser


def main() -> None:
    """Main entry point."""
    load_dotenv()
    args = build_parser().parse_args()

    try:
        settings = get_settings()
    except PydanticValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(2)

    setup_structured_logging(
        args.log_level or settings.log_level, json_format=settings.json_logging
    )

    booking_request: Optional[BookingRequest] = None
    if args.command == "book":
        try:
            booking_request = parse_request(args.request)
        except (FileNotFoundError, ValueError, PydanticValidationError, ValidationError) as e:
            logger.error(f"Invalid request: {e}")
            sys.exit(2)

    try:
        if args.command == "serve":
            run_web_mode(args.host or settings.host, args.port or settings.port)
            return

        if booking_request is not None:
            result: Any = asyncio.run(run_book_mode(booking_request))
        else:
            result = asyncio.run(run_preview_mode(args.company, args.role, args.max_price))
        print(json.dumps(result, indent=2, ensure_ascii=False))

    except KeyboardInterrupt:
        logger.warning("Interrupted")
        sys.exit(130)
    except BookerError as e:
        logger.error(f"{e.error_code}: {e.message}")
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.opt(exception=e).error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
