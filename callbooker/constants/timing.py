"""Timing-related constants (timeouts, intervals, delays)."""

from typing import Final


class Timeouts:
    """Timeout values - MILLISECONDS for Playwright, SECONDS noted separately."""

    # Playwright timeouts (milliseconds)
    NAVIGATION: Final[int] = 30_000
    SELECTOR_WAIT: Final[int] = 10_000
    SEARCH_RESULTS: Final[int] = 20_000
    NETWORK_IDLE: Final[int] = 30_000

    # API timeouts (seconds)
    API_REQUEST_SECONDS: Final[float] = 15.0


class Intervals:
    """Interval values in SECONDS."""

    HUMAN_DELAY_MIN: Final[float] = 0.1
    HUMAN_DELAY_MAX: Final[float] = 0.5
    RETRY_WAIT_MIN: Final[float] = 0.5
    RETRY_WAIT_MAX: Final[float] = 4.0


class Delays:
    """UI interaction delays in SECONDS."""

    AFTER_SEARCH_SUBMIT: Final[float] = 2.0
    AFTER_SERVICE_CLICK: Final[float] = 1.5
    AFTER_DATE_CLICK: Final[float] = 1.0
    AFTER_SUBMIT: Final[float] = 2.0
