"""Expert search on the marketplace's chat-style search page."""

import asyncio
from typing import Any, Dict, List
from urllib.parse import urlparse

from loguru import logger
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ...constants import Delays, Marketplace, Timeouts
from ...core.exceptions import SearchError, SelectorNotFoundError
from ...models.expert import CandidateIdentity
from ..booking.selector_utils import combined_selector, try_selectors

# Runs in the page: collect link, name and description of each expert card
_EXTRACT_CARDS_JS = """
([cardSel, nameSel, descSel]) => {
    const results = [];
    document.querySelectorAll(cardSel).forEach((card) => {
        const link = card.closest('a') || card.querySelector('a');
        if (!link) return;
        const name = card.querySelector(nameSel);
        const desc = card.querySelector(descSel);
        results.push({
            href: link.href,
            name: name ? name.textContent.trim() : '',
            description: desc ? desc.textContent.trim() : '',
        });
    });
    return results;
}
"""


def username_from_url(href: str) -> str:
    """Last path segment of a profile link, without query string."""
    path = urlparse(href).path.strip("/")
    return path.split("/")[-1] if path else ""


class PlaywrightSearchProvider:
    """Types a query into the marketplace search chat and scrapes expert cards."""

    def __init__(
        self,
        page: Page,
        site_base: str = "https://topmate.io",
        navigation_timeout: int = Timeouts.NAVIGATION,
        results_timeout: int = Timeouts.SEARCH_RESULTS,
    ):
        self.page = page
        self.site_base = site_base
        self.navigation_timeout = navigation_timeout
        self.results_timeout = results_timeout

    @property
    def search_url(self) -> str:
        return f"{self.site_base}{Marketplace.SEARCH_PATH}"

    async def open_search(self) -> str:
        """
        Load the search page and wait for the chat input.

        Returns:
            Page title
        """
        logger.info(f"Navigating to {self.search_url}")
        await self.page.goto(
            self.search_url, wait_until="networkidle", timeout=self.navigation_timeout
        )
        await try_selectors(self.page, "search.input", "wait", timeout=Timeouts.SELECTOR_WAIT)
        return await self.page.title()

    def _to_candidates(self, raw_cards: List[Dict[str, Any]]) -> List[CandidateIdentity]:
        candidates = []
        for card in raw_cards:
            username = username_from_url(card.get("href", ""))
            name = (card.get("name") or "").strip()
            if not username or not name or username in Marketplace.RESERVED_PATHS:
                continue
            candidates.append(
                CandidateIdentity(
                    username=username,
                    display_name=name,
                    profile_url=Marketplace.profile_url(self.site_base, username),
                    short_description=(card.get("description") or "").strip(),
                )
            )
        return candidates

    async def search(self, query: str) -> List[CandidateIdentity]:
        """
        Run a search.

        Args:
            query: Free-text query such as "Netflix Product Manager"

        Returns:
            Candidates in the order the page lists them, empty when no expert
            card appears within the results timeout

        Raises:
            SearchError: If the page or its search input cannot be used
        """
        try:
            await self.open_search()
            await try_selectors(self.page, "search.input", "fill", query)
            await self.page.keyboard.press("Enter")
        except SelectorNotFoundError as e:
            raise SearchError(f"Search page layout not recognised: {e.message}", query) from e
        except Exception as e:
            raise SearchError(f"Search page could not be loaded: {e}", query) from e

        try:
            await self.page.wait_for_selector(
                combined_selector("search.expert_card"),
                state="visible",
                timeout=self.results_timeout,
            )
        except PlaywrightTimeoutError:
            logger.info(f"No experts found for {query!r}")
            return []
        except Exception as e:
            raise SearchError(f"Search failed: {e}", query) from e

        try:
            # Cards keep streaming in after the first one renders
            await asyncio.sleep(Delays.AFTER_SEARCH_SUBMIT)

            raw_cards = await self.page.evaluate(
                _EXTRACT_CARDS_JS,
                [
                    combined_selector("search.expert_card"),
                    combined_selector("search.expert_name"),
                    combined_selector("search.expert_desc"),
                ],
            )
        except Exception as e:
            raise SearchError(f"Search failed: {e}", query) from e

        candidates = self._to_candidates(raw_cards or [])
        logger.info(f"Extracted {len(candidates)} experts")
        return candidates
