"""Booking orchestrator - search, qualify, match a slot and book across candidates."""

import asyncio
from typing import Awaitable, List, Optional, TypeVar

from loguru import logger

from ...constants import Marketplace, Timeouts
from ...core.enums import RunState, SkipReason
from ...core.exceptions import SearchError
from ...models.booking import (
    BookingOutcome,
    BookingRecord,
    BookingRequest,
    CallerDetails,
    SkipEntry,
)
from ...models.expert import CandidateIdentity, ExpertProfile
from ...utils.helpers import format_local_datetime
from ..qualification.engine import QualificationEngine
from ..scheduling.slot_matcher import SlotMatcher
from ..scheduling.time_resolver import TimeResolver
from .interfaces import BookingPageDriver, ProfileProvider, SearchProvider

T = TypeVar("T")

DEFAULT_EXPERT_TIMEZONE = "UTC"


class _CandidateSkipped(Exception):
    """Internal signal: stop processing the current candidate."""

    def __init__(self, reason: SkipReason):
        self.reason = reason
        super().__init__(reason.value)


class BookingOrchestrator:
    """
    Drives one booking run.

    Candidates are processed sequentially in search order, deduplicated by
    username, until ``num_calls`` bookings are made or candidates run out.
    Only the first qualifying service of each expert is attempted.

    Per-candidate failures become skip entries. Search failure raises
    SearchError. Cancellation always propagates.
    """

    def __init__(
        self,
        search_provider: SearchProvider,
        profile_provider: ProfileProvider,
        page_driver: BookingPageDriver,
        caller: CallerDetails,
        qualification_engine: Optional[QualificationEngine] = None,
        slot_matcher: Optional[SlotMatcher] = None,
        navigation_timeout: float = Timeouts.NAVIGATION / 1000,
        api_timeout: float = Timeouts.API_REQUEST_SECONDS,
        search_timeout: Optional[float] = None,
        slot_listing_timeout: Optional[float] = None,
        site_base: str = "https://topmate.io",
    ):
        """
        Initialize booking orchestrator.

        Args:
            search_provider: Finds candidates
            profile_provider: Fetches expert profiles
            page_driver: Drives booking pages
            caller: Identity entered on booking forms
            qualification_engine: Optional engine (default synonym table)
            slot_matcher: Optional matcher
            navigation_timeout: Seconds allowed for each page operation
            api_timeout: Seconds allowed for each profile fetch
            search_timeout: Seconds allowed for the search (default: 2x navigation)
            slot_listing_timeout: Seconds allowed for listing slots, which clicks
                every date chip (default: 4x navigation)
            site_base: Marketplace website, used for profile URLs
        """
        self.search_provider = search_provider
        self.profile_provider = profile_provider
        self.page_driver = page_driver
        self.caller = caller
        self.qualification_engine = qualification_engine or QualificationEngine()
        self.slot_matcher = slot_matcher or SlotMatcher()
        self.navigation_timeout = navigation_timeout
        self.api_timeout = api_timeout
        self.search_timeout = search_timeout or navigation_timeout * 2
        self.slot_listing_timeout = slot_listing_timeout or navigation_timeout * 4
        self.site_base = site_base
        self.state: Optional[RunState] = None

    def _transition(self, state: RunState, username: Optional[str] = None) -> None:
        self.state = state
        suffix = f" (@{username})" if username else ""
        logger.debug(f"Run state -> {state.value}{suffix}")

    async def _bounded(self, awaitable: Awaitable[T], timeout: float) -> T:
        return await asyncio.wait_for(awaitable, timeout=timeout)

    async def _search(self, query: str) -> List[CandidateIdentity]:
        self._transition(RunState.SEARCHING)
        logger.info(f"Searching for: {query}")
        try:
            candidates = await self._bounded(
                self.search_provider.search(query), self.search_timeout
            )
        except SearchError:
            raise
        except asyncio.TimeoutError as e:
            raise SearchError(f"Search timed out after {self.search_timeout:.0f}s", query) from e
        except Exception as e:
            raise SearchError(f"Search failed: {e}", query) from e
        logger.info(f"Found {len(candidates)} candidates")
        return candidates

    @staticmethod
    def _dedupe(candidates: List[CandidateIdentity]) -> List[CandidateIdentity]:
        seen = set()
        unique = []
        for candidate in candidates:
            if candidate.username in seen:
                logger.debug(f"Dropping duplicate candidate @{candidate.username}")
                continue
            seen.add(candidate.username)
            unique.append(candidate)
        return unique

    async def _fetch_profile(self, candidate: CandidateIdentity) -> ExpertProfile:
        try:
            profile = await self._bounded(
                self.profile_provider.fetch_profile(candidate.username), self.api_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Profile fetch timed out for @{candidate.username}")
            raise _CandidateSkipped(SkipReason.PROFILE_FETCH_FAILED) from None
        except Exception as e:
            logger.warning(f"Profile fetch failed for @{candidate.username}: {e}")
            raise _CandidateSkipped(SkipReason.PROFILE_FETCH_FAILED) from e
        if profile is None:
            raise _CandidateSkipped(SkipReason.PROFILE_FETCH_FAILED)
        return profile

    async def _page_step(
        self,
        awaitable: Awaitable[T],
        reason: SkipReason,
        what: str,
        timeout: Optional[float] = None,
    ) -> T:
        timeout = timeout or self.navigation_timeout
        try:
            return await self._bounded(awaitable, timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{what} timed out after {timeout:.0f}s")
            raise _CandidateSkipped(reason) from None
        except Exception as e:
            logger.warning(f"{what} failed: {e}")
            raise _CandidateSkipped(reason) from e

    def _slot_timezone(self, profile: ExpertProfile) -> str:
        """Timezone the listed slot labels are expressed in."""
        tz = self.page_driver.display_timezone or profile.timezone
        if tz:
            try:
                TimeResolver.resolve_timezone(tz)
                return tz
            except ValueError:
                logger.warning(f"@{profile.username} reports unknown timezone {tz!r}, using UTC")
        return DEFAULT_EXPERT_TIMEZONE

    async def _process_candidate(
        self, candidate: CandidateIdentity, request: BookingRequest
    ) -> BookingRecord:
        username = candidate.username

        self._transition(RunState.QUALIFYING, username)
        profile = await self._fetch_profile(candidate)
        result = self.qualification_engine.qualify(
            profile, request.target_company, request.target_role, request.max_price, candidate
        )
        if not result.matched:
            raise _CandidateSkipped(result.reason or SkipReason.CRITERIA_MISMATCH)

        # Only the first qualifying service is attempted
        service = result.qualifying_services[0]
        logger.info(f"Attempting to book '{service.title}' with @{username}")

        self._transition(RunState.SLOT_MATCHING, username)
        await self._page_step(
            self.page_driver.open_service(username, service.service_id),
            SkipReason.BOOKING_PAGE_ERROR,
            f"Opening service {service.service_id}",
        )
        slots = await self._page_step(
            self.page_driver.list_slots(),
            SkipReason.BOOKING_PAGE_ERROR,
            "Listing slots",
            timeout=self.slot_listing_timeout,
        )

        expert_tz = self._slot_timezone(profile)
        slot = self.slot_matcher.find_matching_slot(slots, request.availability, expert_tz)
        if slot is None or slot.instant is None:
            raise _CandidateSkipped(SkipReason.NO_SLOT_IN_AVAILABILITY)

        self._transition(RunState.BOOKING, username)
        logger.info(f"Booking slot {slot.raw_label!r} ({slot.instant.isoformat()})")
        await self._page_step(
            self.page_driver.select_slot(slot.source_reference),
            SkipReason.SUBMISSION_FAILED,
            "Selecting slot",
        )
        confirmation = await self._page_step(
            self.page_driver.submit_booking_form(self.caller),
            SkipReason.SUBMISSION_FAILED,
            "Submitting booking form",
        )

        window = TimeResolver.first_matching_window(slot.instant, request.availability)
        return BookingRecord(
            expert_username=username,
            expert_name=profile.full_name or candidate.display_name,
            expert_title=profile.headline,
            service_title=service.title,
            price=service.price.amount,
            currency=service.price.currency,
            instant=slot.instant,
            caller_timezone=window.timezone if window else request.primary_timezone,
            profile_url=candidate.profile_url or Marketplace.profile_url(self.site_base, username),
            booking_url=confirmation.confirmation_url,
        )

    async def run(self, request: BookingRequest) -> BookingOutcome:
        """
        Execute a booking run.

        Args:
            request: Validated booking request

        Returns:
            BookingOutcome with bookings and skipped candidates in processing order

        Raises:
            SearchError: If the search step fails
        """
        outcome = BookingOutcome()
        candidates = await self._search(request.search_query)

        self._transition(RunState.ENUMERATING)
        for candidate in self._dedupe(candidates):
            if outcome.booked_count >= request.num_calls:
                logger.info("Reached target number of bookings")
                break

            logger.info(f"Processing {candidate.display_name} (@{candidate.username})")
            try:
                record = await self._process_candidate(candidate, request)
            except _CandidateSkipped as skip:
                self._transition(RunState.SKIPPING, candidate.username)
                logger.info(f"Skipping @{candidate.username}: {skip.reason.value}")
                outcome.skipped.append(SkipEntry(candidate.username, skip.reason))
                continue

            outcome.bookings.append(record)
            logger.success(
                f"Booked {record.service_title} with @{record.expert_username} at "
                f"{format_local_datetime(record.instant, record.caller_timezone)}"
            )
            self._transition(RunState.ENUMERATING)

        self._transition(RunState.DONE)
        logger.info(
            f"Run finished: {outcome.booked_count}/{request.num_calls} booked, "
            f"{len(outcome.skipped)} skipped"
        )
        return outcome

