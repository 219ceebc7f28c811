"""Marketplace endpoints and URL builders."""

from typing import Final


class Marketplace:
    """Topmate website paths and profile API paths."""

    SEARCH_PATH: Final[str] = "/search"
    PROFILE_API_PATH: Final[str] = "/fetchByUsername/"
    SERVICE_API_PATH: Final[str] = "/service-public/{service_id}"

    # Usernames that are site pages, not experts
    RESERVED_PATHS: Final[frozenset] = frozenset(
        {"search", "login", "signup", "about", "pricing", "blog", "help", "terms", "privacy"}
    )

    @staticmethod
    def profile_url(site_base: str, username: str) -> str:
        return f"{site_base}/{username}"
