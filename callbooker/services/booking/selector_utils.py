"""Selector resolution utilities for marketplace pages."""

from typing import List, Optional

from loguru import logger
from playwright.async_api import Locator, Page

from ...constants import MARKETPLACE_SELECTORS
from ...core.exceptions import SelectorNotFoundError


def resolve_selector(selector_key: str) -> List[str]:
    """
    Resolve a selector key to a list of selectors.

    Args:
        selector_key: Registry key like "booking.name"; unknown keys are used as-is

    Returns:
        List of selector strings (primary + fallbacks)
    """
    return list(MARKETPLACE_SELECTORS.get(selector_key, [selector_key]))


def combined_selector(selector_key: str) -> str:
    """All fallbacks joined into one CSS selector list."""
    return ", ".join(resolve_selector(selector_key))


async def first_present(page: Page, selector_key: str) -> Optional[Locator]:
    """
    Locator for the first selector variant that matches anything on the page.

    Returns:
        Locator, or None if no variant matches
    """
    for selector in resolve_selector(selector_key):
        locator = page.locator(selector)
        if await locator.count() > 0:
            return locator
    return None


async def try_selectors(
    page: Page,
    selector_key: str,
    action: str = "click",
    text: Optional[str] = None,
    timeout: int = 5000,
) -> str:
    """
    Try each selector variant in order until the action succeeds.

    Args:
        page: Playwright page
        selector_key: Registry key or literal selector
        action: 'click', 'fill' or 'wait'
        text: Text to fill (for 'fill' action)
        timeout: Timeout per selector in ms

    Returns:
        The selector that worked

    Raises:
        SelectorNotFoundError: If no selector works
    """
    selectors = resolve_selector(selector_key)
    for selector in selectors:
        try:
            element = page.locator(selector).first
            if action == "click":
                await element.click(timeout=timeout)
            elif action == "fill":
                await element.fill(text or "", timeout=timeout)
            elif action == "wait":
                await element.wait_for(state="visible", timeout=timeout)
            else:
                raise ValueError(f"Unsupported action: {action}")
            return selector
        except ValueError:
            raise
        except Exception as e:
            logger.debug(f"Selector '{selector}' failed for {action}: {e}")
            continue

    raise SelectorNotFoundError(selector_name=selector_key, tried_selectors=selectors)
