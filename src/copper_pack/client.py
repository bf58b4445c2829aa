"""Async client for the Copper developer API.

Copper authenticates with two custom headers (API key and user email) rather
than a bearer token, and exposes record listing only through POST search
endpoints. Identical GET requests can be answered from a short-lived
in-memory cache; POST and PUT always go to the network.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Literal, Optional

import httpx

from copper_pack.config import CopperSettings
from copper_pack.constants import RecordType, record_endpoint, record_type_info
from copper_pack.errors import UpstreamApiError
from copper_pack.reference import ReferenceLoader

logger = logging.getLogger(__name__)

Method = Literal["GET", "POST", "PUT"]


@dataclass(frozen=True)
class ApiResponse:
    """Status and decoded JSON body of a Copper API call."""

    status: int
    body: Any


class CopperClient:
    """
    Thin wrapper over httpx.AsyncClient that injects Copper auth headers,
    serializes payloads, caches GETs by TTL, and maps failures to UpstreamApiError.
    """

    DEFAULT_HEADERS = {
        "X-PW-Application": "developer_api",
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": "copper-pack/0.1",
    }

    def __init__(
        self,
        settings: CopperSettings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Credentials, base URL, paging and cache windows
            client: Optional httpx client (tests inject one; headers are still applied per request)
        """
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
        self._cache: dict[str, tuple[float, ApiResponse]] = {}
        self.reference = ReferenceLoader(self)

    async def __aenter__(self) -> "CopperClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        return {
            **self.DEFAULT_HEADERS,
            "X-PW-UserEmail": self.settings.email,
            "X-PW-AccessToken": self.settings.api_key,
        }

    def _url(self, endpoint: str) -> str:
        return self.settings.base_url + endpoint.lstrip("/")

    @staticmethod
    def _cache_key(method: str, endpoint: str, payload: Optional[dict]) -> str:
        return f"{method} {endpoint} {json.dumps(payload or {}, sort_keys=True, default=str)}"

    def _cached(self, key: str) -> Optional[ApiResponse]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        expires_at, response = entry
        if time.monotonic() >= expires_at:
            del self._cache[key]
            return None
        return response

    async def call(
        self,
        endpoint: str,
        method: Method = "POST",
        payload: Optional[dict[str, Any]] = None,
        cache_ttl: int = 0,
    ) -> ApiResponse:
        """
        Issue one request. GET payloads become query parameters; POST/PUT
        payloads become the JSON body. Only GETs honor cache_ttl.
        """
        cacheable = method == "GET" and cache_ttl > 0
        key = self._cache_key(method, endpoint, payload) if cacheable else ""
        if cacheable:
            hit = self._cached(key)
            if hit is not None:
                logger.debug("Cache hit: %s %s", method, endpoint)
                return hit

        logger.debug("Copper request: %s %s", method, endpoint)
        try:
            resp = await self._client.request(
                method,
                self._url(endpoint),
                params=payload if method == "GET" else None,
                json=payload if method != "GET" else None,
                headers=self._auth_headers(),
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamApiError(
                f"Copper API error {status} on {method} {endpoint}: {e.response.text}",
                status_code=status,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamApiError(f"Copper API request failed ({method} {endpoint}): {e}") from e

        try:
            body = resp.json() if resp.content else None
        except ValueError as e:
            raise UpstreamApiError(
                f"Copper API returned non-JSON for {method} {endpoint}",
                status_code=resp.status_code,
            ) from e

        response = ApiResponse(status=resp.status_code, body=body)
        if cacheable:
            self._cache[key] = (time.monotonic() + cache_ttl, response)
        return response

    async def get_record(self, record_type: RecordType | str, record_id: str) -> dict[str, Any]:
        """GET a single record body."""
        response = await self.call(record_endpoint(record_type, record_id), "GET")
        return response.body or {}

    async def update_record(
        self,
        record_type: RecordType | str,
        record_id: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """PUT changes to a record; Copper answers with the full updated record."""
        response = await self.call(record_endpoint(record_type, record_id), "PUT", payload)
        return response.body or {}

    async def search_records(
        self,
        record_type: RecordType | str,
        *,
        page_number: int,
        page_size: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """POST {plural}/search for one page of records."""
        payload = {
            "page_size": page_size or self.settings.page_size,
            "page_number": page_number,
            "sort_by": self.settings.sort_by,
            "sort_direction": self.settings.sort_direction,
        }
        response = await self.call(f"{record_type_info(record_type).plural}/search", "POST", payload)
        return response.body or []
