"""Booking form filling."""

from loguru import logger
from playwright.async_api import Page

from ...models.booking import CallerDetails
from ...utils.helpers import random_delay
from ...utils.masking import mask_email
from .selector_utils import first_present, try_selectors


class FormFiller:
    """Fills the marketplace booking form with the caller's details."""

    QUESTION_ANSWER = "Booking {service_title} via automated system"

    def __init__(self, field_timeout: int = 5000, question_answer: str = QUESTION_ANSWER):
        """
        Initialize form filler.

        Args:
            field_timeout: Timeout per field selector in ms
            question_answer: Template for custom question fields
        """
        self.field_timeout = field_timeout
        self.question_answer = question_answer

    async def fill_booking_form(
        self, page: Page, caller: CallerDetails, service_title: str = ""
    ) -> int:
        """
        Fill name, email, optional phone and custom questions.

        Args:
            page: Playwright page showing the booking form
            caller: Caller identity
            service_title: Used in answers to custom questions

        Returns:
            Number of custom question fields filled

        Raises:
            SelectorNotFoundError: If name or email field is missing
        """
        logger.info(f"Filling booking form for {mask_email(caller.email)}")

        await try_selectors(page, "booking.name", "fill", caller.name, self.field_timeout)
        await random_delay()
        await try_selectors(page, "booking.email", "fill", caller.email, self.field_timeout)

        if caller.phone:
            phone = await first_present(page, "booking.phone")
            if phone is not None:
                await phone.first.fill(caller.phone, timeout=self.field_timeout)
            else:
                logger.debug("Booking form has no phone field")

        questions = await first_present(page, "booking.questions")
        filled = 0
        if questions is not None:
            answer = self.question_answer.format(service_title=service_title or "a session")
            for field in await questions.all():
                await field.fill(answer, timeout=self.field_timeout)
                filled += 1

        logger.debug(f"Booking form filled ({filled} custom question(s))")
        return filled
