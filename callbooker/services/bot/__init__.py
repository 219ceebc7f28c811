"""Browser automation components.

Public API:
- BrowserManager: Browser lifecycle management
- PlaywrightSearchProvider: Expert search on the marketplace website
"""

from .browser_manager import BrowserManager
from .search_provider import PlaywrightSearchProvider

__all__ = ["BrowserManager", "PlaywrightSearchProvider"]
