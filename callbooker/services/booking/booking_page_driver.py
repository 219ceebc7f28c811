"""Playwright driver for an expert's booking page."""

import asyncio
import re
from typing import Any, List, Optional, Tuple

from loguru import logger
from playwright.async_api import Page

from ...constants import Delays, Marketplace, Timeouts, service_card_selector
from ...core.exceptions import (
    BookingPageError,
    BookingSubmissionError,
    SelectorNotFoundError,
    SlotSelectionError,
)
from ...models.booking import BookingConfirmation, CallerDetails, SlotCandidate
from .form_filler import FormFiller
from .selector_utils import combined_selector, first_present, try_selectors

_WHITESPACE = re.compile(r"\s+")

# (date chip index or None, time button index)
SlotReference = Tuple[Optional[int], int]


def _clean(text: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


class PlaywrightBookingPageDriver:
    """
    Booking flow on the marketplace website.

    Slots are enumerated as date chip x time button pairs. The label of each
    slot is the chip text followed by the button text, e.g. "Mon 20 Oct 10:00 AM".
    """

    def __init__(
        self,
        page: Page,
        site_base: str = "https://topmate.io",
        navigation_timeout: int = Timeouts.NAVIGATION,
        display_timezone: Optional[str] = None,
        form_filler: Optional[FormFiller] = None,
        max_date_chips: Optional[int] = None,
    ):
        """
        Initialize booking page driver.

        Args:
            page: Playwright page owned by the current run
            site_base: Marketplace website base URL
            navigation_timeout: Navigation timeout in ms
            display_timezone: Timezone the browser renders slot times in
            form_filler: Optional FormFiller instance
            max_date_chips: Scan at most this many date chips (None: all)
        """
        self.page = page
        self.site_base = site_base
        self.navigation_timeout = navigation_timeout
        self.display_timezone = display_timezone
        self.form_filler = form_filler or FormFiller()
        self.max_date_chips = max_date_chips
        self._service_title = ""

    async def open_service(self, username: str, service_id: str) -> None:
        """
        Open the expert profile and click the service card.

        Raises:
            BookingPageError: If the profile or service card cannot be opened
        """
        url = Marketplace.profile_url(self.site_base, username)
        logger.info(f"Opening profile: {url}")
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout)
            await try_selectors(
                self.page, "profile.service_card", "wait", timeout=Timeouts.SELECTOR_WAIT
            )

            card = self.page.locator(service_card_selector(service_id))
            if await card.count() == 0:
                raise BookingPageError(f"Service {service_id} not listed on @{username}'s page")
            self._service_title = _clean((await card.first.inner_text()).split("\n")[0])
            await card.first.click(timeout=Timeouts.SELECTOR_WAIT)

            await self.page.wait_for_selector(
                combined_selector("booking.slot_container"),
                state="visible",
                timeout=Timeouts.SELECTOR_WAIT,
            )
            await asyncio.sleep(Delays.AFTER_SERVICE_CLICK)
        except (BookingPageError, SelectorNotFoundError):
            raise
        except Exception as e:
            raise BookingPageError(
                f"Could not open service {service_id} for @{username}: {e}"
            ) from e

    async def _time_labels(self) -> List[str]:
        buttons = await first_present(self.page, "booking.time_slot")
        if buttons is None:
            return []
        return [_clean(text) for text in await buttons.all_inner_texts()]

    async def list_slots(self) -> List[SlotCandidate]:
        """
        Enumerate every date chip and the time buttons it reveals.

        Raises:
            BookingPageError: If the slot list cannot be read
        """
        slots: List[SlotCandidate] = []
        try:
            chips = await first_present(self.page, "booking.date_chip")
            if chips is None:
                for j, label in enumerate(await self._time_labels()):
                    if label:
                        slots.append(SlotCandidate(raw_label=label, source_reference=(None, j)))
                return slots

            chip_count = await chips.count()
            if self.max_date_chips is not None and chip_count > self.max_date_chips:
                logger.debug(f"Scanning first {self.max_date_chips} of {chip_count} dates")
                chip_count = self.max_date_chips
            for i in range(chip_count):
                chip = chips.nth(i)
                date_text = _clean(await chip.inner_text())
                await chip.click(timeout=Timeouts.SELECTOR_WAIT)
                await asyncio.sleep(Delays.AFTER_DATE_CLICK)
                for j, time_text in enumerate(await self._time_labels()):
                    if time_text:
                        slots.append(
                            SlotCandidate(
                                raw_label=f"{date_text} {time_text}", source_reference=(i, j)
                            )
                        )
        except Exception as e:
            raise BookingPageError(f"Could not list slots: {e}") from e

        logger.info(f"Found {len(slots)} available slots")
        return slots

    async def select_slot(self, source_reference: Any) -> None:
        """
        Click the date chip and time button identified by ``source_reference``.

        Raises:
            SlotSelectionError: If the reference is invalid or the click fails
        """
        try:
            chip_index, time_index = source_reference
        except (TypeError, ValueError):
            raise SlotSelectionError(f"Invalid slot reference: {source_reference!r}") from None

        try:
            if chip_index is not None:
                chips = await first_present(self.page, "booking.date_chip")
                if chips is None:
                    raise SlotSelectionError("Date chips disappeared from the booking page")
                await chips.nth(chip_index).click(timeout=Timeouts.SELECTOR_WAIT)
                await asyncio.sleep(Delays.AFTER_DATE_CLICK)

            buttons = await first_present(self.page, "booking.time_slot")
            if buttons is None or await buttons.count() <= time_index:
                raise SlotSelectionError(f"Time slot #{time_index} no longer available")
            await buttons.nth(time_index).click(timeout=Timeouts.SELECTOR_WAIT)
        except SlotSelectionError:
            raise
        except Exception as e:
            raise SlotSelectionError(f"Could not select slot {source_reference!r}: {e}") from e

    async def submit_booking_form(self, caller: CallerDetails) -> BookingConfirmation:
        """
        Fill the form, click the booking CTA and wait for the page to settle.

        Returns:
            BookingConfirmation with the resulting page URL

        Raises:
            BookingSubmissionError: If filling or submitting fails
        """
        try:
            await self.form_filler.fill_booking_form(self.page, caller, self._service_title)
            await try_selectors(
                self.page, "booking.submit", "click", timeout=Timeouts.SELECTOR_WAIT
            )
            await self.page.wait_for_load_state("networkidle", timeout=Timeouts.NETWORK_IDLE)
            await asyncio.sleep(Delays.AFTER_SUBMIT)
        except Exception as e:
            raise BookingSubmissionError(
                f"Booking submission failed: {e}", details={"url": self.page.url}
            ) from e

        logger.info(f"Booking submitted, landed on {self.page.url}")
        return BookingConfirmation(confirmation_url=self.page.url)
