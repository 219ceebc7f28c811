"""Expert-side domain models: search candidates, profiles and services."""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from ..core.enums import ServiceType


@dataclass(frozen=True)
class CandidateIdentity:
    """Expert discovered by the search provider. Identity key is ``username``."""

    username: str
    display_name: str
    profile_url: str
    short_description: str = ""


@dataclass(frozen=True)
class Price:
    """Service price."""

    amount: float
    currency: str = "INR"

    @property
    def is_free(self) -> bool:
        return self.amount <= 0


@dataclass(frozen=True)
class ServiceOffering:
    """A bookable service listed on an expert profile."""

    service_id: str
    title: str
    price: Price
    service_type: ServiceType
    description: str = ""
    duration_minutes: Optional[int] = None
    raw_type: Any = None

    @property
    def is_live_session(self) -> bool:
        """True for video meetings, calls and chats."""
        return self.service_type.is_live


@dataclass(frozen=True)
class ExpertProfile:
    """Expert profile as returned by the marketplace API."""

    id: str
    username: str
    full_name: str
    headline: str = ""
    bio: str = ""
    timezone: Optional[str] = None
    services: Tuple[ServiceOffering, ...] = field(default_factory=tuple)

    @property
    def searchable_text(self) -> str:
        """Name, headline and bio joined for criteria matching."""
        return " ".join(part for part in (self.full_name, self.headline, self.bio) if part)
