"""FastAPI router for catalog search and storefront endpoints."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from posthog import Posthog

from catalog.client import CatalogClient
from catalog.models import (
    CatalogSearchResponse,
    MediaItemResult,
    SearchBucketResult,
    SearchResultSet,
    StorefrontResponse,
)
from core.dependencies import (
    get_catalog_client,
    get_posthog_client,
    get_session_state,
    get_storefront_resolver,
)
from core.exceptions import CatalogServiceError, ConfigurationError, TransportError
from core.sentry import capture_exception
from core.telemetry import RequestTelemetry, get_api_stats, init_api_stats
from session.state import SessionState
from session.storefront import StorefrontResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])

DEFAULT_ARTWORK_SIZE = 100


def _require_client(client: CatalogClient | None) -> CatalogClient:
    """Raise 503 if the catalog client is not available."""
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Catalog client is not configured. Set APPLE_MUSIC_DEVELOPER_TOKEN.",
        )
    return client


def _to_http_exception(error: CatalogServiceError, context: dict) -> HTTPException:
    """Map a catalog error to the HTTP error returned to our caller."""
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=503, detail=error.message)

    if isinstance(error, TransportError) and error.status_code == 404:
        return HTTPException(status_code=404, detail="Not found in catalog")

    logger.error(f"Catalog call failed: {type(error).__name__}: {error.message}")
    capture_exception(error, context)
    return HTTPException(status_code=502, detail=error.message)


def _build_search_response(
    term: str, storefront: str, result: SearchResultSet, artwork_size: int
) -> CatalogSearchResponse:
    buckets = [
        SearchBucketResult(
            name=bucket.name,
            items=[
                MediaItemResult(
                    identifier=item.identifier,
                    name=item.name,
                    artist_name=item.artist_name,
                    type=item.type,
                    artwork_url=item.artwork.image_url(artwork_size, artwork_size),
                    artwork_width=item.artwork.width,
                    artwork_height=item.artwork.height,
                )
                for item in bucket.items
            ],
        )
        for bucket in result.buckets
    ]
    return CatalogSearchResponse(
        term=term,
        storefront=storefront,
        buckets=buckets,
        failures=result.failures,
        total=result.total,
        partial=result.is_partial,
    )


@router.get(
    "/search",
    response_model=CatalogSearchResponse,
    summary="Search the catalog for songs and albums",
    responses={
        200: {"description": "Search results returned (possibly partial)"},
        502: {"description": "Catalog API failed or returned an invalid response"},
        503: {"description": "Catalog client not configured"},
    },
)
async def search_catalog(
    term: str = Query("", max_length=256, description="Search term; empty returns no results"),
    storefront: str | None = Query(
        None, min_length=2, max_length=8, description="Storefront code; resolved if omitted"
    ),
    artwork_size: int = Query(
        DEFAULT_ARTWORK_SIZE, ge=1, le=4096, description="Square artwork size in pixels"
    ),
    client: CatalogClient | None = Depends(get_catalog_client),
    resolver: StorefrontResolver | None = Depends(get_storefront_resolver),
    posthog_client: Posthog | None = Depends(get_posthog_client),
) -> CatalogSearchResponse:
    """Search songs and albums; items that fail to decode are listed in `failures`."""
    svc = _require_client(client)

    init_api_stats()
    telemetry = RequestTelemetry(event_prefix="search")

    try:
        if storefront is None and term and resolver is not None:
            with telemetry.track_step("storefront"):
                storefront = await resolver.current()
        storefront = (storefront or svc.default_region_code).lower()

        result = await svc.search(term, storefront, telemetry=telemetry)
    except CatalogServiceError as e:
        raise _to_http_exception(e, {"term": term, "storefront": storefront}) from e

    if posthog_client:
        telemetry.send_to_posthog(
            posthog_client,
            {
                "results_count": result.total,
                "failures_count": len(result.failures),
                "storefront": storefront,
                "empty_term": not term,
            },
        )

    logger.debug(f"Search API stats: {get_api_stats()}")
    return _build_search_response(term, storefront, result, artwork_size)


@router.get(
    "/storefronts/{region_code}",
    response_model=StorefrontResponse,
    summary="Resolve a region code to a storefront",
    responses={
        200: {"description": "Storefront returned"},
        404: {"description": "Unknown region"},
        503: {"description": "Catalog client not configured"},
    },
)
async def lookup_storefront(
    region_code: str,
    client: CatalogClient | None = Depends(get_catalog_client),
) -> StorefrontResponse:
    """Look up the storefront for a region code."""
    svc = _require_client(client)
    try:
        storefront = await svc.lookup_storefront(region_code.lower())
    except CatalogServiceError as e:
        raise _to_http_exception(e, {"region_code": region_code}) from e
    return StorefrontResponse(storefront=storefront)


@router.get(
    "/me/storefront",
    response_model=StorefrontResponse,
    summary="Get the storefront of the authenticated user",
    responses={
        200: {"description": "Storefront returned"},
        400: {"description": "No user token supplied or configured"},
        503: {"description": "Catalog client not configured"},
    },
)
async def lookup_user_storefront(
    music_user_token: str | None = Header(None, alias="Music-User-Token"),
    client: CatalogClient | None = Depends(get_catalog_client),
    state: SessionState = Depends(get_session_state),
) -> StorefrontResponse:
    """Look up the user's storefront using the Music-User-Token header or the configured token."""
    svc = _require_client(client)

    user_token = music_user_token or state.snapshot().user_token
    if not user_token:
        raise HTTPException(status_code=400, detail="Music-User-Token header is required")

    try:
        storefront = await svc.lookup_user_storefront(user_token)
    except CatalogServiceError as e:
        raise _to_http_exception(e, {"operation": "lookup_user_storefront"}) from e
    return StorefrontResponse(storefront=storefront)


@router.get(
    "/storefront",
    response_model=StorefrontResponse,
    summary="Get the storefront used for this session",
    responses={
        200: {"description": "Storefront returned"},
        503: {"description": "Catalog client not configured"},
    },
)
async def session_storefront(
    region_code: str | None = Query(
        None,
        min_length=2,
        max_length=8,
        description="Region to resolve; replaces a known storefront from another region",
    ),
    refresh: bool = Query(False, description="Resolve again even if a storefront is known"),
    resolver: StorefrontResolver | None = Depends(get_storefront_resolver),
) -> StorefrontResponse:
    """Return the session storefront, resolving it when unknown or on refresh.

    Without a user token, a `region_code` other than the known storefront is
    resolved again. With a user token the user's storefront is returned.
    """
    if resolver is None:
        _require_client(None)

    try:
        if refresh:
            storefront = await resolver.resolve(region_code)
        else:
            storefront = await resolver.current(region_code)
    except CatalogServiceError as e:
        raise _to_http_exception(e, {"region_code": region_code}) from e
    return StorefrontResponse(storefront=storefront)
