"""Advanced logging with Loguru."""

import contextvars
import logging
import sys
from pathlib import Path
from types import FrameType
from typing import Any, Dict, Optional

from loguru import logger

from .environment import Environment

# Context variable for request correlation ID
correlation_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

__all__ = ["correlation_id_ctx", "setup_structured_logging", "InterceptHandler"]


def _correlation_patcher(record: Dict[str, Any]) -> None:
    """
    Patch log records with correlation_id from context.

    Called by Loguru for each record to inject the correlation_id from the
    ContextVar into the log's extra fields.
    """
    corr_id = correlation_id_ctx.get()
    if corr_id:
        record["extra"]["correlation_id"] = corr_id


class InterceptHandler(logging.Handler):
    """Redirect standard logging records (uvicorn, aiohttp, asyncio) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level: Any = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame: Optional[FrameType] = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_structured_logging(
    level: str = "INFO", json_format: bool = True, logs_dir: Optional[Path] = None
) -> None:
    """
    Setup Loguru logging with structured output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON format for the file sink (True for production)
        logs_dir: Directory for file sinks (default: ./logs)
    """
    # Remove default handler
    logger.remove()

    logger.configure(patcher=_correlation_patcher)

    logs_dir = logs_dir or Path("logs")
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Console handler - human readable
    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )
    logger.add(sys.stdout, format=console_format, level=level, colorize=True)

    if json_format:
        logger.add(
            logs_dir / "call_booker.jsonl",
            format="{message}",
            level=level,
            rotation="10 MB",
            retention="14 days",
            compression="zip",
            serialize=True,
        )
    else:
        logger.add(
            logs_dir / "call_booker.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level,
            rotation="10 MB",
            retention="14 days",
            compression="zip",
        )

    # Error file - variable values only outside production
    logger.add(
        logs_dir / "errors_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} - {message}",
        level="ERROR",
        rotation="10 MB",
        retention="30 days",
        backtrace=True,
        diagnose=Environment.is_development(),
    )

    logger.info(f"Logging initialized (level={level}, json={json_format})")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
