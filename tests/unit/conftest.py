"""Fakes and builders shared by unit tests."""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from callbooker.core.enums import ServiceType
from callbooker.core.exceptions import BookingPageError
from callbooker.models import (
    AvailabilityWindow,
    BookingConfirmation,
    BookingRequest,
    CallerDetails,
    CandidateIdentity,
    ExpertProfile,
    Price,
    ServiceOffering,
    SlotCandidate,
)


class FakeSearchProvider:
    """Returns a fixed candidate list, optionally after a delay or with an error."""

    def __init__(self, candidates=None, error: Optional[Exception] = None, delay: float = 0.0):
        self.candidates = list(candidates or [])
        self.error = error
        self.delay = delay
        self.queries: List[str] = []

    async def search(self, query: str) -> List[CandidateIdentity]:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.candidates)


class FakeProfileProvider:
    """Profiles keyed by username; unknown usernames return None."""

    def __init__(
        self,
        profiles: Optional[Dict[str, ExpertProfile]] = None,
        errors: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None,
        service_details: Optional[Dict[str, ServiceOffering]] = None,
    ):
        self.profiles = dict(profiles or {})
        self.service_details = dict(service_details or {})
        self.requested_services: List[str] = []
        self.errors = errors or {}
        self.delays = delays or {}
        self.requested: List[str] = []

    async def fetch_profile(self, username: str) -> Optional[ExpertProfile]:
        self.requested.append(username)
        if username in self.delays:
            await asyncio.sleep(self.delays[username])
        if username in self.errors:
            raise self.errors[username]
        return self.profiles.get(username)

    async def fetch_service_details(self, service_id: str) -> Optional[ServiceOffering]:
        self.requested_services.append(service_id)
        return self.service_details.get(service_id)


class FakeBookingPageDriver:
    """
    Booking pages keyed by username.

    ``failures`` maps a username to the step that raises ("open", "list",
    "select" or "submit"); ``delays`` maps (username, step) to seconds.
    """

    def __init__(
        self,
        slots: Optional[Dict[str, List[Any]]] = None,
        failures: Optional[Dict[str, str]] = None,
        delays: Optional[Dict[tuple, float]] = None,
        display_timezone: Optional[str] = "UTC",
    ):
        self.slots = slots or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.display_timezone = display_timezone
        self.current: Optional[str] = None
        self.opened: List[tuple] = []
        self.selected: List[tuple] = []
        self.submitted: List[tuple] = []

    async def _step(self, step: str) -> None:
        delay = self.delays.get((self.current, step))
        if delay:
            await asyncio.sleep(delay)
        if self.failures.get(self.current) == step:
            raise BookingPageError(f"{step} failed for {self.current}")

    async def open_service(self, username: str, service_id: str) -> None:
        self.current = username
        self.opened.append((username, service_id))
        await self._step("open")

    async def list_slots(self) -> List[SlotCandidate]:
        await self._step("list")
        return [
            s if isinstance(s, SlotCandidate) else SlotCandidate(raw_label=s, source_reference=i)
            for i, s in enumerate(self.slots.get(self.current, []))
        ]

    async def select_slot(self, source_reference: Any) -> None:
        await self._step("select")
        self.selected.append((self.current, source_reference))

    async def submit_booking_form(self, caller: CallerDetails) -> BookingConfirmation:
        await self._step("submit")
        self.submitted.append((self.current, caller))
        return BookingConfirmation(confirmation_url=f"https://topmate.io/{self.current}/booked")


@pytest.fixture
def caller():
    return CallerDetails(name="Test Caller", email="caller@example.com")


@pytest.fixture
def make_service():
    def _make(
        service_id: str = "1",
        title: str = "1:1 Call",
        amount: float = 0,
        service_type: ServiceType = ServiceType.VIDEO_MEETING,
        currency: str = "INR",
    ) -> ServiceOffering:
        return ServiceOffering(
            service_id=service_id,
            title=title,
            price=Price(amount, currency),
            service_type=service_type,
        )

    return _make


@pytest.fixture
def make_profile(make_service):
    def _make(
        username: str,
        full_name: str = "",
        headline: str = "Product Manager at Netflix",
        bio: str = "",
        services=None,
        timezone: Optional[str] = None,
    ) -> ExpertProfile:
        return ExpertProfile(
            id=f"id-{username}",
            username=username,
            full_name=full_name or username.title(),
            headline=headline,
            bio=bio,
            timezone=timezone,
            services=tuple(services if services is not None else [make_service()]),
        )

    return _make


@pytest.fixture
def make_candidate():
    def _make(username: str, name: Optional[str] = None) -> CandidateIdentity:
        return CandidateIdentity(
            username=username,
            display_name=name or username.title(),
            profile_url=f"https://topmate.io/{username}",
        )

    return _make


@pytest.fixture
def monday_window():
    return AvailabilityWindow.from_strings(["Mon"], "09:00", "17:00", "UTC")


@pytest.fixture
def make_request(monday_window):
    def _make(
        company: str = "Netflix",
        role: str = "Product Manager",
        num_calls: int = 1,
        max_price: float = 0,
        windows=None,
    ) -> BookingRequest:
        return BookingRequest.create(
            target_company=company,
            target_role=role,
            num_calls=num_calls,
            max_price=max_price,
            availability=windows or [monday_window],
        )

    return _make


@pytest.fixture
def fake_search():
    return FakeSearchProvider


@pytest.fixture
def fake_profiles():
    return FakeProfileProvider


@pytest.fixture
def fake_driver():
    return FakeBookingPageDriver
