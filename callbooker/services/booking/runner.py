"""Scoped wiring of settings, browser, API client and orchestrator for one run."""

from typing import Any, Dict, List, Optional

from loguru import logger

from ...core.config.settings import BookerSettings, get_settings
from ...models.booking import BookingOutcome, BookingRequest
from ...models.expert import ServiceOffering
from ...utils.masking import mask_email
from ..bot.browser_manager import BrowserManager
from ..bot.search_provider import PlaywrightSearchProvider
from ..marketplace.client import MarketplaceApiClient
from ..qualification.engine import QualificationEngine
from ..qualification.role_synonyms import RoleSynonymTable
from .booking_orchestrator import BookingOrchestrator
from .booking_page_driver import PlaywrightBookingPageDriver


class BookingRunner:
    """
    Runs the pipeline against the live marketplace.

    Each call owns its own browser and HTTP session; both are closed when the
    call returns, raises or is cancelled.
    """

    def __init__(
        self,
        settings: Optional[BookerSettings] = None,
        role_synonyms: Optional[RoleSynonymTable] = None,
    ):
        self.settings = settings or get_settings()
        self._role_synonyms = role_synonyms

    @property
    def role_synonyms(self) -> RoleSynonymTable:
        if self._role_synonyms is None:
            if self.settings.role_synonyms_file:
                self._role_synonyms = RoleSynonymTable.from_yaml(self.settings.role_synonyms_file)
            else:
                self._role_synonyms = RoleSynonymTable()
        return self._role_synonyms

    def _browser(self) -> BrowserManager:
        return BrowserManager(
            headless=self.settings.headless,
            default_timeout=self.settings.navigation_timeout_ms,
            timezone_id=self.settings.browser_timezone,
        )

    def _api_client(self) -> MarketplaceApiClient:
        token = self.settings.topmate_api_token
        return MarketplaceApiClient(
            api_base=self.settings.topmate_api_base,
            api_token=token.get_secret_value() if token else None,
            timeout=self.settings.api_timeout_seconds,
        )

    def _search_provider(self, page: Any) -> PlaywrightSearchProvider:
        return PlaywrightSearchProvider(
            page,
            site_base=self.settings.topmate_site_base,
            navigation_timeout=self.settings.navigation_timeout_ms,
            results_timeout=self.settings.search_results_timeout_ms,
        )

    @property
    def _search_timeout(self) -> float:
        # Navigation + waiting for result cards + settle delay
        return (
            self.settings.navigation_timeout_ms + self.settings.search_results_timeout_ms
        ) / 1000 + 10

    async def run(self, request: BookingRequest) -> BookingOutcome:
        """
        Execute one booking run.

        Raises:
            CallerIdentityMissingError: Before any browser or network activity
            SearchError: If the search step fails
        """
        caller = self.settings.caller_details()
        engine = QualificationEngine(self.role_synonyms)
        logger.info(
            f"Booking run for {mask_email(caller.email)}: {request.search_query!r}, "
            f"{request.num_calls} call(s), max price {request.max_price}"
        )

        async with self._browser() as browser, self._api_client() as api:
            page = await browser.new_page()
            orchestrator = BookingOrchestrator(
                search_provider=self._search_provider(page),
                profile_provider=api,
                page_driver=PlaywrightBookingPageDriver(
                    page,
                    site_base=self.settings.topmate_site_base,
                    navigation_timeout=self.settings.navigation_timeout_ms,
                    display_timezone=browser.timezone_id,
                    max_date_chips=self.settings.max_date_chips,
                ),
                caller=caller,
                qualification_engine=engine,
                navigation_timeout=self.settings.navigation_timeout_ms / 1000,
                api_timeout=self.settings.api_timeout_seconds,
                search_timeout=self._search_timeout,
                slot_listing_timeout=self.settings.slot_listing_timeout_ms / 1000,
                site_base=self.settings.topmate_site_base,
            )
            return await orchestrator.run(request)

    @staticmethod
    async def _describe_service(
        api: MarketplaceApiClient, service: ServiceOffering
    ) -> Dict[str, Any]:
        """Preview entry for a service; the profile payload may omit the duration."""
        duration = service.duration_minutes
        if duration is None:
            details = await api.fetch_service_details(service.service_id)
            duration = details.duration_minutes if details else None
        return {
            "id": service.service_id,
            "title": service.title,
            "price": service.price.amount,
            "currency": service.price.currency,
            "type": service.service_type.value,
            "duration_minutes": duration,
        }

    async def preview(
        self, target_company: str, target_role: str, max_price: float = 0
    ) -> List[Dict[str, Any]]:
        """
        Search and qualify without booking anything.

        Returns:
            One entry per candidate with its qualification verdict and services
        """
        engine = QualificationEngine(self.role_synonyms)
        report: List[Dict[str, Any]] = []

        async with self._browser() as browser, self._api_client() as api:
            page = await browser.new_page()
            candidates = await self._search_provider(page).search(
                f"{target_company} {target_role}"
            )
            for candidate in candidates:
                entry: Dict[str, Any] = {
                    "username": candidate.username,
                    "name": candidate.display_name,
                    "profile_url": candidate.profile_url,
                }
                profile = await api.fetch_profile(candidate.username)
                if profile is None:
                    entry.update(qualified=False, reason="profile fetch failed", services=[])
                    report.append(entry)
                    continue

                result = engine.qualify(profile, target_company, target_role, max_price, candidate)
                entry.update(
                    qualified=result.matched,
                    reason=result.reason.value if result.reason else None,
                    headline=profile.headline,
                    services=[
                        await self._describe_service(api, s) for s in result.qualifying_services
                    ],
                )
                report.append(entry)

        return report

    async def browser_check(self) -> Dict[str, Any]:
        """Launch the browser, open the search page and report its title."""
        async with self._browser() as browser:
            page = await browser.new_page()
            title = await self._search_provider(page).open_search()
        return {"status": "success", "message": "Browser test successful", "page_title": title}
