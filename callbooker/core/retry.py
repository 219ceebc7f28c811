"""Retry strategies for marketplace API calls."""

import logging as stdlib_logging
from typing import Tuple, Type, Union

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from ..constants import Intervals
from .exceptions import TransientApiError

# Stdlib logger needed for tenacity's before_sleep_log
_stdlib_logger = stdlib_logging.getLogger(__name__)


def _make_retry(
    attempts: int,
    wait_strategy: object,
    exception_types: Union[Type[Exception], Tuple[Type[Exception], ...]],
) -> object:
    """
    Factory for creating retry decorators with consistent configuration.

    Args:
        attempts: Maximum number of attempts
        wait_strategy: Tenacity wait strategy
        exception_types: Exception type(s) to retry on

    Returns:
        Configured retry decorator
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_strategy,
        retry=retry_if_exception_type(exception_types),
        before_sleep=before_sleep_log(_stdlib_logger, stdlib_logging.WARNING),
        reraise=True,
    )


def get_api_retry(
    attempts: int = 3,
    min_wait: float = Intervals.RETRY_WAIT_MIN,
    max_wait: float = Intervals.RETRY_WAIT_MAX,
):
    """
    Get retry strategy for profile API requests.

    Only transient failures (5xx, 429, connection errors) are retried.

    Returns:
        Retry decorator configured for transient API errors
    """
    return _make_retry(
        attempts=attempts,
        wait_strategy=wait_exponential(multiplier=0.5, min=min_wait, max=max_wait)
        + wait_random(0, 0.5),
        exception_types=TransientApiError,
    )
