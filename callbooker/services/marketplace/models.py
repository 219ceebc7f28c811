"""Raw payload shapes returned by the marketplace profile API."""

from typing import Any, List, TypedDict, Union


class ServicePayload(TypedDict, total=False):
    """Service entry as embedded in a profile or returned by /service-public."""

    id: Union[int, str]
    title: str
    description: str
    short_description: str
    charge: Any
    currency: str
    type: Union[int, str]
    duration: int


class ProfilePayload(TypedDict, total=False):
    """Profile returned by /fetchByUsername."""

    id: Union[int, str]
    username: str
    name: str
    full_name: str
    display_name: str
    headline: str
    title: str
    bio: str
    description: str
    timezone: str
    services: List[ServicePayload]
