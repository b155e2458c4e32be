"""Latest-query-wins product search.

Every call to :meth:`ProductSearch.begin` returns a :class:`SearchHandle`
and invalidates the previous one.  A lookup whose handle is no longer
current when it resolves is discarded instead of applied.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field

from switchbox.catalog.compatibility import is_box_compatible, normalize_color
from switchbox.catalog.provider import CatalogProvider
from switchbox.models.box import Box
from switchbox.models.product import Product

logger = logging.getLogger(__name__)


@dataclass
class SearchHandle:
    """Token identifying one issued search."""

    generation: int
    query: str
    color: str | None = None
    cancelled: bool = False


@dataclass
class SearchOutcome:
    """Result of running a search handle."""

    handle: SearchHandle
    products: list[Product] = field(default_factory=list)
    stale: bool = False
    """True if a newer search superseded this one; ``products`` is then empty."""

    color_mismatch: bool = False
    """No match in the requested color, but matches exist in other colors."""

    error: str | None = None

    @property
    def applied(self) -> bool:
        return not self.stale


class ProductSearch:
    """Search session bound to one catalog.

    Parameters
    ----------
    catalog:
        Injected catalog provider.
    box_compatible_only:
        If *True* (default), drop products that have no module size.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        *,
        box_compatible_only: bool = True,
    ) -> None:
        self.catalog = catalog
        self.box_compatible_only = box_compatible_only
        self._counter = itertools.count(1)
        self._current: SearchHandle | None = None
        self.results: list[Product] = []
        """Products from the latest applied search."""

    def begin(self, query: str, color: str | None = None) -> SearchHandle:
        """Issue a new search handle, superseding any in-flight one."""
        if self._current is not None:
            self._current.cancelled = True
        handle = SearchHandle(next(self._counter), query, normalize_color(color))
        self._current = handle
        return handle

    def is_current(self, handle: SearchHandle) -> bool:
        return handle is self._current and not handle.cancelled

    def cancel(self) -> None:
        """Invalidate the in-flight search, if any."""
        if self._current is not None:
            self._current.cancelled = True
            self._current = None

    async def run(self, handle: SearchHandle) -> SearchOutcome:
        """Resolve *handle* against the catalog and apply it if still current."""
        outcome = SearchOutcome(handle=handle)
        products = await self._lookup(handle.query, handle.color, outcome)

        if (
            not products
            and handle.color is not None
            and handle.query.strip()
            and outcome.error is None
        ):
            others = await self._lookup(handle.query, None, outcome)
            outcome.color_mismatch = bool(others)

        if not self.is_current(handle):
            logger.debug(
                "Discarding stale results for %r (search #%d)",
                handle.query, handle.generation,
            )
            outcome.stale = True
            outcome.color_mismatch = False
            return outcome

        outcome.products = products
        self.results = products
        return outcome

    async def search(self, query: str, color: str | None = None) -> SearchOutcome:
        return await self.run(self.begin(query, color))

    async def search_for_box(self, box: Box, query: str) -> SearchOutcome:
        """Search restricted to the box's color, if it has one."""
        return await self.search(query, box.color_constraint)

    async def _lookup(
        self,
        query: str,
        color: str | None,
        outcome: SearchOutcome,
    ) -> list[Product]:
        try:
            found = await self.catalog.search(query, color)
        except Exception as exc:
            logger.warning("Catalog search for %r failed", query, exc_info=True)
            outcome.error = str(exc) or exc.__class__.__name__
            return []
        if self.box_compatible_only:
            found = [p for p in found if is_box_compatible(p)]
        return found
