"""Catalog API client: one round trip per call, decoded into catalog models."""

from __future__ import annotations

import logging
import time
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any

import httpx

from catalog.decoding import decode_search_results, decode_storefront_id
from catalog.models import SearchResultSet
from catalog.request_factory import (
    DEFAULT_API_BASE,
    DEFAULT_SEARCH_LIMIT,
    RequestDescriptor,
    build_search_request,
    build_storefront_lookup_request,
    build_user_storefront_request,
)
from core.exceptions import ConfigurationError, MalformedResponseError, TransportError
from core.sentry import add_catalog_breadcrumb
from core.telemetry import record_api_time, record_catalog_api_call

if TYPE_CHECKING:
    from core.telemetry import RequestTelemetry

logger = logging.getLogger(__name__)

USER_AGENT = "CatalogSearchService/1.0"


class CatalogClient:
    """Client for the catalog search and storefront endpoints.

    Each operation issues exactly one request: there are no retries, no
    caching and no cancellation. Calls share nothing but the underlying
    connection pool, so they may run concurrently; applying results in
    issue order is left to the caller (see `catalog.coordinator`).
    """

    def __init__(
        self,
        developer_token: str | None,
        *,
        base_url: str = DEFAULT_API_BASE,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        timeout: float = 10.0,
        default_region_code: str = "us",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            developer_token: Default bearer token used when a call doesn't supply one
            base_url: Catalog API base URL
            search_limit: Maximum results per bucket in a search
            timeout: HTTP timeout in seconds
            default_region_code: Region probed by `check_api`
            transport: Optional httpx transport (used by tests)
        """
        self.developer_token = developer_token
        self.base_url = base_url
        self.search_limit = search_limit
        self.timeout = timeout
        self.default_region_code = default_region_code
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _bearer(self, bearer_token: str | None) -> str:
        token = bearer_token or self.developer_token
        if not token:
            raise ConfigurationError("Developer token not configured")
        return token

    async def _send(self, request: RequestDescriptor) -> Any:
        """Execute a request and return its decoded JSON body.

        Raises:
            TransportError: On a connection failure or a non-2xx status
            MalformedResponseError: If a 2xx body is not valid JSON
        """
        client = await self._get_client()

        start = time.perf_counter()
        try:
            response = await client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                params=dict(request.params) or None,
            )
        except httpx.RequestError as e:
            logger.error(f"Catalog request failed: {type(e).__name__}: {e}")
            raise TransportError(str(e) or "Encountered unexpected error.", cause=e) from e
        finally:
            record_api_time((time.perf_counter() - start) * 1000)
        record_catalog_api_call()

        status = response.status_code
        if not 200 <= status < 300:
            logger.warning(f"Catalog API returned HTTP {status} for {request.method} request")
            raise TransportError(
                f"Catalog API returned HTTP {status}",
                status_code=status,
                details={"status_code": status},
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError("Response body is not valid JSON") from e

    async def check_api(self) -> bool:
        """Check catalog API connectivity and token validity."""
        try:
            await self.lookup_storefront(self.default_region_code)
            return True
        except Exception as e:
            logger.debug(f"Catalog API check failed: {e}")
            return False

    async def search(
        self,
        term: str,
        country_code: str,
        bearer_token: str | None = None,
        telemetry: RequestTelemetry | None = None,
    ) -> SearchResultSet:
        """Search the catalog for songs and albums.

        An empty term returns an empty result set without a network call.
        Items that fail to decode are reported in `SearchResultSet.failures`
        and don't abort the search.

        Args:
            term: Search term
            country_code: Storefront code
            bearer_token: Developer token; defaults to the client's token
            telemetry: Optional request telemetry for step timings

        Returns:
            SearchResultSet with the songs and albums buckets in source order

        Raises:
            TransportError: On connection failure or non-2xx status
            MalformedResponseError: If the body is not JSON
            MissingFieldError: If the body has no `results` object
        """
        if not term:
            logger.debug("Empty search term, returning empty results")
            return SearchResultSet()

        request = build_search_request(
            term,
            country_code,
            self._bearer(bearer_token),
            limit=self.search_limit,
            base_url=self.base_url,
        )

        logger.info(f"Searching catalog storefront '{country_code}' for '{term}'")
        add_catalog_breadcrumb("search", {"term": term, "storefront": country_code})

        with telemetry.track_step("request") if telemetry else nullcontext():
            payload = await self._send(request)

        with telemetry.track_step("decode") if telemetry else nullcontext():
            result = decode_search_results(payload)

        if result.failures:
            logger.warning(
                f"Search for '{term}' decoded {result.total} items, "
                f"{len(result.failures)} failed"
            )
        else:
            logger.info(f"Search for '{term}' decoded {result.total} items")
        return result

    async def lookup_storefront(self, region_code: str, bearer_token: str | None = None) -> str:
        """Resolve a region code to a storefront identifier.

        Raises:
            TransportError, MalformedResponseError, MissingFieldError
        """
        request = build_storefront_lookup_request(
            region_code, self._bearer(bearer_token), base_url=self.base_url
        )
        add_catalog_breadcrumb("lookup_storefront", {"region_code": region_code})
        payload = await self._send(request)
        storefront = decode_storefront_id(payload)
        logger.info(f"Region '{region_code}' resolved to storefront '{storefront}'")
        return storefront

    async def lookup_user_storefront(
        self, user_token: str, bearer_token: str | None = None
    ) -> str:
        """Get the storefront identifier of the user owning `user_token`.

        Raises:
            TransportError, MalformedResponseError, MissingFieldError
        """
        request = build_user_storefront_request(
            self._bearer(bearer_token), user_token, base_url=self.base_url
        )
        add_catalog_breadcrumb("lookup_user_storefront")
        payload = await self._send(request)
        storefront = decode_storefront_id(payload)
        logger.info(f"User storefront resolved to '{storefront}'")
        return storefront
