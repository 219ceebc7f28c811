"""Browser lifecycle and context management for marketplace automation."""

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from ...constants import Timeouts
from ...core.exceptions import BrowserNotStartedError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

LAUNCH_ARGS: List[str] = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
]


class BrowserManager:
    """
    Owns one Chromium browser, one context and the pages created from it.

    Use as an async context manager so the browser closes on every exit path::

        async with BrowserManager(headless=True) as browser:
            page = await browser.new_page()
    """

    def __init__(
        self,
        headless: bool = True,
        default_timeout: int = Timeouts.NAVIGATION,
        timezone_id: Optional[str] = "UTC",
        user_agent: str = DEFAULT_USER_AGENT,
        viewport: Optional[Dict[str, int]] = None,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run Chromium without a window
            default_timeout: Default timeout in ms applied to new pages
            timezone_id: Timezone the pages render dates in (None: host timezone)
            user_agent: Desktop user agent string
            viewport: Viewport size (default 1280x800)
        """
        self.headless = headless
        self.default_timeout = default_timeout
        self.timezone_id = timezone_id
        self.user_agent = user_agent
        self.viewport = viewport or {"width": 1280, "height": 800}
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.playwright: Optional[Playwright] = None

    @property
    def is_started(self) -> bool:
        return self.context is not None

    async def start(self) -> None:
        """Launch browser and create the context."""
        if self.browser is not None:
            logger.warning("Browser already started")
            return

        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.headless, args=LAUNCH_ARGS
            )

            context_options: Dict[str, Any] = {
                "viewport": self.viewport,
                "user_agent": self.user_agent,
            }
            if self.timezone_id:
                context_options["timezone_id"] = self.timezone_id
            self.context = await self.browser.new_context(**context_options)

            logger.info(f"Browser started (headless={self.headless})")
        except Exception:
            # Clean up partial resources on error
            await self.close()
            raise

    async def close(self) -> None:
        """Clean up browser resources. Safe to call more than once."""
        if self.context:
            try:
                await self.context.close()
                logger.debug("Browser context closed")
            except Exception as e:
                logger.warning(f"Failed to close browser context: {e}")
            finally:
                self.context = None

        if self.browser:
            try:
                await self.browser.close()
                logger.debug("Browser closed")
            except Exception as e:
                logger.warning(f"Failed to close browser: {e}")
            finally:
                self.browser = None

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop Playwright: {e}")
            finally:
                self.playwright = None

        logger.info("Browser resources cleaned up")

    async def new_page(self) -> Page:
        """
        Create a new page with the default timeout applied.

        Raises:
            BrowserNotStartedError: If start() has not been called
        """
        if self.context is None:
            raise BrowserNotStartedError()

        page = await self.context.new_page()
        page.set_default_timeout(self.default_timeout)
        return page

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
