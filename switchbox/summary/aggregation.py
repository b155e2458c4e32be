"""Per-SKU rollup of box products, complementary products, and parts.

The first occurrence of a SKU fixes its unit price; later occurrences
only add quantity.  Output is derived and never mutates project state.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from pydantic import BaseModel

from switchbox.catalog.provider import CatalogProvider
from switchbox.models.box import Box, ComplementaryProduct, FrameAdapter

logger = logging.getLogger(__name__)


class SkuSummaryRow(BaseModel):
    """One line of the summary by SKU."""

    sku: str
    product_name: str = ""
    quantity: int = 0
    unit_price: float = 0.0
    total_price: float = 0.0
    is_frame_or_adapter: bool = False


def build_sku_summary(
    boxes: Iterable[Box],
    complementary: Iterable[ComplementaryProduct] = (),
    parts: Iterable[FrameAdapter] = (),
    prices: Mapping[str, float] | None = None,
) -> list[SkuSummaryRow]:
    """Fold all sources into rows sorted by SKU.

    Parameters
    ----------
    boxes:
        Boxes whose product lines are counted first.
    complementary:
        Complementary products, priced from *prices* when their SKU has
        not been seen in a box (0 if absent).
    parts:
        Derived frames and adapters, one unit each.
    prices:
        Unit prices for complementary SKUs, usually from the catalog.
    """
    prices = prices or {}
    summary: dict[str, SkuSummaryRow] = {}

    def _add(sku: str, name: str, quantity: int, unit_price: float, is_part: bool = False) -> None:
        row = summary.get(sku)
        if row is not None:
            row.quantity += quantity
            row.total_price = row.quantity * row.unit_price
            return
        summary[sku] = SkuSummaryRow(
            sku=sku,
            product_name=name,
            quantity=quantity,
            unit_price=unit_price,
            total_price=quantity * unit_price,
            is_frame_or_adapter=is_part,
        )

    for box in boxes:
        for line in box.products:
            _add(line.sku, line.product.name, line.quantity, line.product.regular_price)

    for item in complementary:
        _add(item.sku, item.name, item.quantity, prices.get(item.sku, 0.0))

    for part in parts:
        _add(part.sku, part.name, 1, part.regular_price, is_part=True)

    return sorted(summary.values(), key=lambda r: r.sku)


def grand_total(rows: Iterable[SkuSummaryRow]) -> float:
    return sum(row.total_price for row in rows)


async def resolve_prices(
    catalog: CatalogProvider,
    skus: Iterable[str],
) -> dict[str, float]:
    """Look up unit prices; failed or empty lookups price at 0."""
    prices: dict[str, float] = {}
    for sku in skus:
        if sku in prices:
            continue
        try:
            product = await catalog.get_by_sku(sku)
        except Exception:
            logger.warning("Price lookup for %s failed", sku, exc_info=True)
            product = None
        prices[sku] = product.regular_price if product is not None else 0.0
    return prices


async def generate_sku_summary(
    boxes: Iterable[Box],
    complementary: Iterable[ComplementaryProduct],
    parts: Iterable[FrameAdapter],
    catalog: CatalogProvider,
) -> list[SkuSummaryRow]:
    """Like :func:`build_sku_summary`, resolving complementary prices first."""
    boxes = list(boxes)
    complementary = list(complementary)
    boxed = {line.sku for box in boxes for line in box.products}
    prices = await resolve_prices(
        catalog, (c.sku for c in complementary if c.sku not in boxed),
    )
    return build_sku_summary(boxes, complementary, parts, prices)
