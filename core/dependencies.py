"""FastAPI dependency injection providers."""

import logging

from fastapi import Depends
from posthog import Posthog

from catalog.client import CatalogClient
from config.settings import Settings, get_settings
from session.state import SessionSnapshot, SessionState
from session.storefront import StorefrontResolver

logger = logging.getLogger(__name__)

# Module-level instances for lifecycle management
_catalog_client: CatalogClient | None = None
_session_state: SessionState | None = None
_posthog_client: Posthog | None = None


async def get_catalog_client(
    settings: Settings = Depends(get_settings),
) -> CatalogClient | None:
    """Get catalog client instance.

    Args:
        settings: Application settings

    Returns:
        Optional[CatalogClient]: Catalog client if a developer token is configured
    """
    global _catalog_client

    if not settings.apple_music_developer_token:
        logger.debug("APPLE_MUSIC_DEVELOPER_TOKEN not set - catalog client disabled")
        return None

    if _catalog_client is None:
        _catalog_client = CatalogClient(
            settings.apple_music_developer_token,
            base_url=settings.apple_music_api_base,
            search_limit=settings.catalog_search_limit,
            timeout=settings.catalog_request_timeout,
            default_region_code=settings.resolved_default_region_code,
        )
        logger.info(f"Catalog client initialized (base: {settings.apple_music_api_base})")

    return _catalog_client


async def close_catalog_client() -> None:
    """Close the catalog client and its HTTP connection pool."""
    global _catalog_client
    if _catalog_client:
        await _catalog_client.close()
        _catalog_client = None


def get_session_state(settings: Settings = Depends(get_settings)) -> SessionState:
    """Get the process-wide session state, seeded from settings."""
    global _session_state

    if _session_state is None:
        _session_state = SessionState(
            SessionSnapshot(
                developer_token=settings.apple_music_developer_token,
                user_token=settings.apple_music_user_token,
            )
        )
    return _session_state


async def get_storefront_resolver(
    settings: Settings = Depends(get_settings),
    client: CatalogClient | None = Depends(get_catalog_client),
    state: SessionState = Depends(get_session_state),
) -> StorefrontResolver | None:
    """Get a storefront resolver bound to the catalog client and session state."""
    if client is None:
        return None
    return StorefrontResolver(client, state, settings.resolved_default_region_code)


def get_posthog_client(settings: Settings = Depends(get_settings)) -> Posthog | None:
    """Get PostHog client instance.

    Args:
        settings: Application settings

    Returns:
        Optional[Posthog]: PostHog client if configured and enabled, None otherwise
    """
    global _posthog_client

    if not settings.enable_telemetry:
        logger.debug("Telemetry disabled")
        return None

    if not settings.posthog_api_key:
        logger.debug("POSTHOG_API_KEY not set - telemetry disabled")
        return None

    if _posthog_client is None:
        _posthog_client = Posthog(
            project_api_key=settings.posthog_api_key,
            host=settings.posthog_host,
        )
        logger.info(f"PostHog client initialized (host: {settings.posthog_host})")

    return _posthog_client


def flush_posthog() -> None:
    """Flush any buffered PostHog events."""
    if _posthog_client:
        _posthog_client.flush()


def shutdown_posthog() -> None:
    """Shutdown PostHog client gracefully."""
    global _posthog_client
    if _posthog_client:
        _posthog_client.shutdown()
        _posthog_client = None
        logger.info("PostHog client shutdown")
