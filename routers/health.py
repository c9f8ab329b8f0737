"""Health check router with real dependency connectivity checks."""

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from catalog.client import CatalogClient
from config.settings import Settings, get_settings
from core.dependencies import get_catalog_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

CHECK_TIMEOUT = 3.0
CORE_SERVICES = {"catalog_api"}


async def _check_catalog_api(client: CatalogClient | None) -> str:
    """Ping the catalog API via the client's own HTTP client."""
    if client is None:
        return "unavailable"
    return "ok" if await client.check_api() else "error"


async def _run_check(coro) -> str:
    """Run a single health check with a timeout."""
    try:
        return await asyncio.wait_for(coro, timeout=CHECK_TIMEOUT)
    except TimeoutError:
        return "timeout"


@router.get(
    "/health",
    summary="Health check",
    responses={
        200: {"description": "Service is healthy or degraded"},
        503: {"description": "Service is unhealthy (catalog API unreachable)"},
    },
)
async def health_check(
    settings: Settings = Depends(get_settings),
    client: CatalogClient | None = Depends(get_catalog_client),
):
    """Health check with a real connectivity probe of the catalog API.

    An unconfigured catalog client reports "degraded": the service runs but
    every catalog route answers 503.
    """
    services = {"catalog_api": await _run_check(_check_catalog_api(client))}

    if all(services[s] == "ok" for s in CORE_SERVICES):
        status = "healthy"
    elif all(services[s] == "unavailable" for s in CORE_SERVICES):
        status = "degraded"
    else:
        status = "unhealthy"

    body = {
        "status": status,
        "version": settings.app_version,
        "services": services,
    }

    status_code = 200 if status in ("healthy", "degraded") else 503
    return JSONResponse(content=body, status_code=status_code)
