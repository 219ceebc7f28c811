"""Collaborator interfaces consumed by the booking orchestrator."""

from typing import Any, List, Optional, Protocol, runtime_checkable

from ...models.booking import BookingConfirmation, CallerDetails, SlotCandidate
from ...models.expert import CandidateIdentity, ExpertProfile


@runtime_checkable
class SearchProvider(Protocol):
    """Finds candidate experts for a free-text query. Failure aborts the run."""

    async def search(self, query: str) -> List[CandidateIdentity]: ...


@runtime_checkable
class ProfileProvider(Protocol):
    """Fetches structured profile data. Returns None when the profile is unavailable."""

    async def fetch_profile(self, username: str) -> Optional[ExpertProfile]: ...


@runtime_checkable
class BookingPageDriver(Protocol):
    """
    Drives one expert's booking flow.

    ``display_timezone`` is the timezone slot labels are rendered in, or None
    when labels follow the expert's own timezone. Every method raises on
    failure.
    """

    display_timezone: Optional[str]

    async def open_service(self, username: str, service_id: str) -> None: ...

    async def list_slots(self) -> List[SlotCandidate]: ...

    async def select_slot(self, source_reference: Any) -> None: ...

    async def submit_booking_form(self, caller: CallerDetails) -> BookingConfirmation: ...
