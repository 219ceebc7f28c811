"""Constants for the call booker.

All classes can be imported directly from this package:
    from callbooker.constants import Timeouts, Marketplace
"""

from .marketplace import Marketplace
from .selectors import MARKETPLACE_SELECTORS, service_card_selector
from .timing import Delays, Intervals, Timeouts

__all__ = [
    "Delays",
    "Intervals",
    "MARKETPLACE_SELECTORS",
    "Marketplace",
    "Timeouts",
    "service_card_selector",
]
