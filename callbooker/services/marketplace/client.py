"""Marketplace profile API client."""

import asyncio
from typing import Any, Dict, Optional

import aiohttp
from loguru import logger

from ...constants import Marketplace, Timeouts
from ...core.exceptions import MarketplaceApiError, ProfileFetchError, TransientApiError
from ...core.retry import get_api_retry
from ...models.expert import ExpertProfile, ServiceOffering
from .parsing import parse_profile, parse_service

_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


class MarketplaceApiClient:
    """
    Async client for the marketplace's internal profile API.

    Implements the ProfileProvider interface: ``fetch_profile`` returns None
    instead of raising for unknown usernames and failed requests.
    """

    def __init__(
        self,
        api_base: str = "https://galactus.run",
        api_token: Optional[str] = None,
        timeout: float = Timeouts.API_REQUEST_SECONDS,
        retry_attempts: int = 3,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize marketplace API client.

        Args:
            api_base: API base URL
            api_token: Value of the Authorization header (optional)
            timeout: Total timeout per request in seconds
            retry_attempts: Attempts for transient failures
            session: Existing aiohttp session (not closed by this client)
        """
        self.api_base = api_base.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self._http_session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

        if not api_token:
            logger.warning("No marketplace API token configured, profile calls may fail")

    async def __aenter__(self) -> "MarketplaceApiClient":
        """Async context manager entry."""
        await self._init_http_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _headers(self, auth: bool = True) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if auth and self.api_token:
            headers["Authorization"] = self.api_token
        return headers

    async def _init_http_session(self) -> None:
        """Initialize HTTP session with connection pooling."""
        if self._http_session is None:
            connector = aiohttp.TCPConnector(limit=10, limit_per_host=5, ttl_dns_cache=120)
            self._http_session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout, connect=10),
            )
            self._owns_session = True
            logger.debug("Marketplace API session initialized")

    async def close(self) -> None:
        """Close HTTP session if this client created it."""
        if self._http_session and self._owns_session:
            await self._http_session.close()
        self._http_session = None

    @property
    def _session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise RuntimeError("HTTP session not initialized. Use 'async with' first.")
        return self._http_session

    async def _get_json_once(
        self, path: str, params: Optional[Dict[str, str]] = None, auth: bool = True
    ) -> Optional[Any]:
        url = f"{self.api_base}{path}"
        try:
            async with self._session.get(
                url, params=params, headers=self._headers(auth)
            ) as response:
                if response.status == 404:
                    return None
                if response.status in _RETRYABLE_STATUSES:
                    raise TransientApiError(
                        f"GET {path} returned {response.status}", status=response.status
                    )
                if response.status >= 400:
                    raise MarketplaceApiError(
                        f"GET {path} returned {response.status}",
                        status=response.status,
                        recoverable=False,
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise MarketplaceApiError(
                        f"GET {path} returned invalid JSON", status=response.status
                    ) from e
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            raise TransientApiError(f"GET {path} failed: {e!r}") from e

    async def _get_json(
        self, path: str, params: Optional[Dict[str, str]] = None, auth: bool = True
    ) -> Optional[Any]:
        """GET a JSON document, retrying transient failures. None means not found."""
        retrying = get_api_retry(attempts=self.retry_attempts)
        return await retrying(self._get_json_once)(path, params, auth)  # type: ignore[operator]

    async def fetch_raw_profile(self, username: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the raw profile payload.

        Raises:
            MarketplaceApiError: On non-retryable errors or exhausted retries
            ProfileFetchError: If the payload is not a JSON object
        """
        data = await self._get_json(Marketplace.PROFILE_API_PATH, params={"username": username})
        if data is not None and not isinstance(data, dict):
            raise ProfileFetchError(
                username, f"Unexpected profile payload type: {type(data).__name__}"
            )
        return data

    async def fetch_profile(self, username: str) -> Optional[ExpertProfile]:
        """
        Fetch and parse an expert profile.

        Returns:
            ExpertProfile, or None if not found or the request failed
        """
        logger.info(f"Fetching profile for: {username}")
        try:
            data = await self.fetch_raw_profile(username)
        except (MarketplaceApiError, ProfileFetchError) as e:
            logger.error(f"Failed to fetch profile for {username}: {e.message}")
            return None
        except aiohttp.ClientError as e:
            logger.error(f"Error fetching profile for {username}: {e}")
            return None

        if data is None:
            logger.warning(f"Profile not found: {username}")
            return None

        try:
            profile = parse_profile(data, username=username)
        except ValueError as e:
            logger.error(f"Malformed profile for {username}: {e}")
            return None
        logger.debug(f"Profile fetched for {username} ({len(profile.services)} services)")
        return profile

    async def fetch_service_details(self, service_id: str) -> Optional[ServiceOffering]:
        """
        Fetch a single public service. The endpoint needs no authorization.

        Returns:
            ServiceOffering, or None if not found or the request failed
        """
        path = Marketplace.SERVICE_API_PATH.format(service_id=service_id)
        try:
            data = await self._get_json(path, auth=False)
        except (MarketplaceApiError, aiohttp.ClientError) as e:
            logger.error(f"Failed to fetch service {service_id}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return parse_service(data)  # type: ignore[arg-type]
