"""Latest-search-wins coordination for callers issuing overlapping searches.

Keep one SearchCoordinator per result list. Call
`await coordinator.run(client, term, storefront)` whenever the input changes,
then read `coordinator.results` and `coordinator.error`. Results of searches
that were overtaken by a later one are dropped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalog.models import SearchResultSet
from core.exceptions import CatalogServiceError

if TYPE_CHECKING:
    from catalog.client import CatalogClient

logger = logging.getLogger(__name__)


class SearchCoordinator:
    """Applies search results in issue order using a generation counter.

    Every search takes a generation number when it starts. A completed
    search is applied only if no later-issued search has been applied
    already, so a slow early request can never overwrite the results of a
    faster later one.
    """

    def __init__(self):
        self._issued = 0
        self._applied = 0
        self.results = SearchResultSet()
        self.error: CatalogServiceError | None = None

    @property
    def generation(self) -> int:
        """Generation of the most recently issued search."""
        return self._issued

    def begin(self) -> int:
        """Start a new search and return its generation."""
        self._issued += 1
        return self._issued

    def is_current(self, generation: int) -> bool:
        """Whether a result for `generation` may still be applied."""
        return generation > self._applied

    def apply(self, generation: int, results: SearchResultSet) -> bool:
        """Store `results` if they are newer than what was last applied.

        Returns:
            True if the results were applied, False if they were stale
        """
        if not self.is_current(generation):
            logger.debug(f"Discarding stale search results (generation {generation})")
            return False
        self._applied = generation
        self.results = results
        self.error = None
        return True

    def fail(self, generation: int, error: CatalogServiceError) -> bool:
        """Record an error for `generation`; the visible results are cleared.

        Returns:
            True if the error was recorded, False if it was stale
        """
        if not self.is_current(generation):
            logger.debug(f"Discarding stale search error (generation {generation})")
            return False
        self._applied = generation
        self.results = SearchResultSet()
        self.error = error
        return True

    def clear(self) -> None:
        """Empty the results and invalidate every in-flight search."""
        self._applied = self.begin()
        self.results = SearchResultSet()
        self.error = None

    async def run(
        self,
        client: CatalogClient,
        term: str,
        country_code: str,
        bearer_token: str | None = None,
    ) -> bool:
        """Run a search through `client` and apply the outcome if still current.

        An empty term clears the results without a network call. Errors are
        recorded on `error` rather than raised.

        Returns:
            True if this search's outcome became the visible state
        """
        if not term:
            self.clear()
            return True

        generation = self.begin()
        try:
            results = await client.search(term, country_code, bearer_token)
        except CatalogServiceError as e:
            logger.warning(f"Search for '{term}' failed: {e}")
            return self.fail(generation, e)
        return self.apply(generation, results)
