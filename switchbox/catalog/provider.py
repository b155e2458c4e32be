"""CatalogProvider interface and the in-memory catalog.

The catalog is an injected, read-only lookup.  Lookups are coroutines so
that a network- or disk-backed provider can be swapped in without changing
callers.
"""

from __future__ import annotations

import abc
import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from switchbox.catalog.compatibility import color_matches
from switchbox.config import DEFAULT_SEARCH_LIMIT
from switchbox.exceptions import CatalogUnavailable
from switchbox.models.product import Product

logger = logging.getLogger(__name__)


class CatalogProvider(abc.ABC):
    """Abstract product catalog."""

    @abc.abstractmethod
    async def search(self, query: str, color: str | None = None) -> list[Product]:
        """Return products matching *query*, optionally filtered by *color*."""

    @abc.abstractmethod
    async def get_by_sku(self, sku: str) -> Product | None:
        """Return the product with *sku*, or None."""


class InMemoryCatalog(CatalogProvider):
    """Catalog held in a list, built once and passed around by reference.

    Parameters
    ----------
    products:
        Catalog records.  Later duplicates of a SKU are ignored.
    limit:
        Number of products an empty query returns.
    """

    def __init__(
        self,
        products: Iterable[Product],
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self.limit = limit
        self._products: list[Product] = []
        self._by_sku: dict[str, Product] = {}
        for product in products:
            if product.sku in self._by_sku:
                logger.debug("Duplicate SKU %s in catalog, keeping first", product.sku)
                continue
            self._products.append(product)
            self._by_sku[product.sku] = product

    def __len__(self) -> int:
        return len(self._products)

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    async def search(self, query: str, color: str | None = None) -> list[Product]:
        return self.search_sync(query, color)

    async def get_by_sku(self, sku: str) -> Product | None:
        return self._by_sku.get(sku)

    def search_sync(self, query: str, color: str | None = None) -> list[Product]:
        """Case-insensitive substring match over SKU, name and description.

        An empty query returns the first ``limit`` products (after the
        color filter).
        """
        needle = (query or "").strip().lower()
        results: list[Product] = []
        for product in self._products:
            if not color_matches(product, color):
                continue
            if needle and not (
                needle in product.sku.lower()
                or needle in product.name.lower()
                or needle in product.description.lower()
            ):
                continue
            results.append(product)
            if not needle and len(results) >= self.limit:
                break
        return results

    # -- indexing -----------------------------------------------------------

    def brands(self) -> list[str]:
        """Distinct brands in catalog order."""
        return _distinct(p.brand for p in self._products if p.brand)

    def series_for_brand(self, brand: str) -> list[str]:
        return _distinct(
            p.series for p in self._products if p.brand == brand and p.series
        )

    def colors(self) -> list[str]:
        return _distinct(
            p.color for p in self._products if p.color
        )

    def filter_by_brand_and_series(self, brand: str, series: str = "") -> list[Product]:
        """Products of *brand*; an empty *series* matches every series."""
        return [
            p for p in self._products
            if p.brand == brand and (not series or p.series == series)
        ]


def _distinct(values: Iterable[str | None]) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        if v is not None:
            seen.setdefault(v, None)
    return list(seen)


def parse_catalog(records: Any) -> list[Product]:
    """Convert raw catalog records to products, skipping invalid entries."""
    if not isinstance(records, list):
        raise CatalogUnavailable("Catalog must be a JSON list of product records.")

    products: list[Product] = []
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping catalog entry %d: not an object", idx)
            continue
        try:
            products.append(Product.from_catalog(record))
        except ValidationError as exc:
            logger.warning(
                "Skipping catalog entry %d (%s): %s",
                idx, record.get("sku", "?"), exc.errors()[0].get("msg", exc),
            )
    return products


def load_catalog_file(path: str | Path, limit: int = DEFAULT_SEARCH_LIMIT) -> InMemoryCatalog:
    """Load a JSON catalog file into an :class:`InMemoryCatalog`.

    Raises
    ------
    CatalogUnavailable
        If the file is missing, unreadable, or not a JSON list.
    """
    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogUnavailable(f"Cannot load catalog from {p}: {exc}") from exc

    products = parse_catalog(raw)
    logger.info("Loaded %d products from %s", len(products), p)
    return InMemoryCatalog(products, limit=limit)
