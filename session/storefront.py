"""Storefront resolution for a session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from session.state import SessionState

if TYPE_CHECKING:
    from catalog.client import CatalogClient

logger = logging.getLogger(__name__)

DEFAULT_REGION_CODE = "us"


class StorefrontResolver:
    """Determines the storefront to scope catalog calls to.

    With a user token the user's own storefront is looked up. Without one,
    the region code (or the default region) is resolved through the
    storefronts endpoint as an approximation.
    """

    def __init__(
        self,
        client: CatalogClient,
        state: SessionState,
        default_region_code: str = DEFAULT_REGION_CODE,
    ):
        self.client = client
        self.state = state
        self.default_region_code = default_region_code

    async def resolve(self, region_code: str | None = None) -> str:
        """Resolve the storefront and store it on the session state.

        Args:
            region_code: Region to approximate from when there's no user token

        Returns:
            Storefront identifier

        Raises:
            CatalogServiceError: If the lookup fails; the state is left unchanged
        """
        snapshot = self.state.snapshot()

        if snapshot.has_user_token:
            storefront = await self.client.lookup_user_storefront(
                snapshot.user_token, snapshot.developer_token
            )
        else:
            region = (region_code or self.default_region_code).lower()
            storefront = await self.client.lookup_storefront(region, snapshot.developer_token)

        self.state.update(storefront=storefront)
        return storefront

    async def current(self, region_code: str | None = None) -> str:
        """Return the known storefront, resolving it on first use.

        Without a user token, a `region_code` that differs from the known
        storefront triggers a new lookup. With a user token the user's own
        storefront is kept and `region_code` is ignored.
        """
        snapshot = self.state.snapshot()
        storefront = snapshot.storefront
        if not storefront:
            return await self.resolve(region_code)
        if region_code and not snapshot.has_user_token and region_code.lower() != storefront:
            logger.info(f"Region changed from '{storefront}' to '{region_code.lower()}'")
            return await self.resolve(region_code)
        return storefront
