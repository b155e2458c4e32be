"""Configurator — the single entry point for a configuration session.

Usage::

    from switchbox import Configurator

    cfg = Configurator()
    box = cfg.add_box(name="Hall", area="Entrance",
                      box_type="Rectangular Box", module_capacity=4)
    outcome = asyncio.run(cfg.search_products("switch", box_id=box.id))
    cfg.add_product_to_box(box.id, outcome.products[0], 2)
    cfg.get_frames_and_adapters()
    rows = asyncio.run(cfg.generate_sku_summary())
    text = asyncio.run(cfg.export_csv())
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from switchbox.allocation import capacity
from switchbox.allocation.store import BoxStore
from switchbox.catalog.provider import CatalogProvider, InMemoryCatalog, load_catalog_file
from switchbox.catalog.search import ProductSearch, SearchOutcome
from switchbox.catalog.seed_data import seed_products
from switchbox.config import NO_COLOR, ConfigManager, Settings
from switchbox.exceptions import BoxNotFoundError, CapacityExceeded, CatalogUnavailable
from switchbox.logging_setup import configure_logging
from switchbox.models.box import Box, BoxData, ComplementaryProduct, FrameAdapter, Project
from switchbox.models.product import Product
from switchbox.parts.deriver import derive_frames_and_adapters
from switchbox.parts.pricing import FixedPartsPricing, PartsPricingProvider
from switchbox.summary import csv_export
from switchbox.summary.aggregation import SkuSummaryRow, generate_sku_summary
from switchbox.summary.report import SummaryReport

logger = logging.getLogger(__name__)


class Configurator:
    """The public interface to one in-memory project.

    Parameters
    ----------
    catalog:
        Product catalog.  Defaults to the embedded seed catalog.
    parts_pricing:
        Price source for derived frames and adapters.
    strict:
        If *True*, unknown box ids raise :class:`BoxNotFoundError`.
    currency:
        Currency code used when rendering reports.
    """

    def __init__(
        self,
        catalog: CatalogProvider | None = None,
        *,
        parts_pricing: PartsPricingProvider | None = None,
        strict: bool = False,
        currency: str = "ILS",
    ) -> None:
        self.catalog = catalog or InMemoryCatalog(seed_products())
        self.parts_pricing = parts_pricing or FixedPartsPricing()
        self.currency = currency
        self.store = BoxStore(strict=strict)
        self.client_name = ""
        self.complementary_products: list[ComplementaryProduct] = []

        # Wizard defaults
        self.default_brand = ""
        self.default_series = ""
        self.default_color = NO_COLOR

        self.box_search = ProductSearch(self.catalog)
        self.complementary_search = ProductSearch(self.catalog, box_compatible_only=False)

    @classmethod
    def from_settings(
        cls,
        project_path: str | Path | None = None,
        *,
        config: Settings | Mapping[str, Any] | None = None,
    ) -> Configurator:
        """Build a configurator from layered settings.

        *config* may be a validated :class:`Settings` or raw ``SWITCHBOX_*``
        values; when omitted, :class:`ConfigManager` loads them for
        *project_path*.  An unreadable catalog file falls back to the
        embedded catalog.
        """
        if isinstance(config, Settings):
            settings = config
        elif config is not None:
            settings = Settings.from_raw(config)
        else:
            settings = ConfigManager().load_settings(project_path)
        configure_logging(settings.log_level)

        catalog: CatalogProvider | None = None
        catalog_path = settings.resolve_catalog_path(project_path)
        if catalog_path is not None:
            try:
                catalog = load_catalog_file(catalog_path, limit=settings.search_limit)
            except CatalogUnavailable:
                logger.warning("Falling back to embedded catalog", exc_info=True)
        if catalog is None:
            catalog = InMemoryCatalog(seed_products(), limit=settings.search_limit)

        pricing = FixedPartsPricing(
            frame_price=settings.frame_price,
            adapter_price=settings.adapter_price,
        )
        return cls(catalog, parts_pricing=pricing, currency=settings.currency)

    # ------------------------------------------------------------------
    # Project
    # ------------------------------------------------------------------

    @property
    def boxes(self) -> list[Box]:
        return self.store.boxes

    def set_client_name(self, name: str) -> None:
        self.client_name = name

    def set_defaults(
        self,
        *,
        brand: str | None = None,
        series: str | None = None,
        color: str | None = None,
    ) -> None:
        """Remember the defaults picked at the start of a session."""
        if brand is not None:
            self.default_brand = brand
        if series is not None:
            self.default_series = series
        if color is not None:
            self.default_color = color

    def get_current_project(self) -> Project:
        """Deep copy of the current project state."""
        return Project(
            client_name=self.client_name,
            boxes=[box.model_copy(deep=True) for box in self.store.boxes],
            complementary_products=[c.model_copy() for c in self.complementary_products],
        )

    def reset_project(self) -> None:
        """Clear client name, boxes and complementary products."""
        self.client_name = ""
        self.store.clear()
        self.complementary_products = []
        self.box_search.cancel()
        self.complementary_search.cancel()
        logger.info("Project reset")

    # ------------------------------------------------------------------
    # Boxes
    # ------------------------------------------------------------------

    def get_box_by_id(self, box_id: str) -> Box | None:
        return self.store.get_box(box_id)

    def used_modules(self, box_id: str) -> int:
        return self.store.used_modules(box_id)

    def remaining_modules(self, box_id: str) -> int:
        return self.store.remaining_modules(box_id)

    def add_box(self, data: BoxData | dict[str, Any] | None = None, **fields: Any) -> Box:
        """Create a box; the session's default color applies when none is given."""
        if isinstance(data, BoxData):
            payload: dict[str, Any] = data.model_dump()
        else:
            payload = dict(data or {})
        payload.update(fields)
        if payload.get("color") is None:
            payload["color"] = self.default_color
        return self.store.create_box(payload)

    def update_box(self, box_id: str, **changes: Any) -> Box | None:
        return self.store.update_box(box_id, **changes)

    def delete_box(self, box_id: str) -> bool:
        return self.store.delete_box(box_id)

    def add_product_to_box(self, box_id: str, product: Product, quantity: int = 1) -> bool:
        return self.store.add_product(box_id, product, quantity)

    def update_product_quantity(self, box_id: str, sku: str, quantity: int) -> bool:
        return self.store.update_product_quantity(box_id, sku, quantity)

    def remove_product_from_box(self, box_id: str, sku: str) -> bool:
        return self.store.remove_product(box_id, sku)

    def require_product_in_box(self, box_id: str, product: Product, quantity: int = 1) -> Box:
        """Like :meth:`add_product_to_box` but raises on failure.

        Raises
        ------
        BoxNotFoundError
            If the box does not exist.
        CapacityExceeded
            If the product does not fit.
        """
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")
        box = self.store.get_box(box_id)
        if box is None:
            raise BoxNotFoundError(box_id)
        if not self.store.add_product(box_id, product, quantity):
            raise CapacityExceeded(
                box_id,
                requested=capacity.module_size_of(product) * quantity,
                available=capacity.remaining_modules(box),
            )
        return box

    def capacity_message(self, box_id: str) -> str:
        box = self.store.get_box(box_id)
        if box is None:
            return "Box not found."
        return capacity.capacity_message(box)

    # ------------------------------------------------------------------
    # Complementary products
    # ------------------------------------------------------------------

    def add_complementary_product(
        self,
        item: ComplementaryProduct | dict[str, Any] | None = None,
        **fields: Any,
    ) -> ComplementaryProduct:
        """Append a complementary product (no capacity rules apply)."""
        if isinstance(item, ComplementaryProduct):
            product = item
        else:
            product = ComplementaryProduct.model_validate({**(item or {}), **fields})
        self.complementary_products.append(product)
        logger.info("Added complementary %dx %s", product.quantity, product.sku)
        return product

    def remove_complementary_product(self, index: int) -> bool:
        """Remove the complementary product at *index*; out of range is a no-op."""
        if not 0 <= index < len(self.complementary_products):
            return False
        removed = self.complementary_products.pop(index)
        logger.info("Removed complementary %s", removed.sku)
        return True

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_products(self, query: str, box_id: str | None = None) -> SearchOutcome:
        """Search box-compatible products, in the box's color when it has one."""
        box = self.store.get_box(box_id) if box_id is not None else None
        if box is not None:
            return await self.box_search.search_for_box(box, query)
        return await self.box_search.search(query)

    async def search_complementary(self, query: str) -> SearchOutcome:
        return await self.complementary_search.search(query)

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------

    def get_frames_and_adapters(self) -> list[FrameAdapter]:
        return derive_frames_and_adapters(self.store.boxes, self.parts_pricing)

    async def generate_sku_summary(self) -> list[SkuSummaryRow]:
        return await generate_sku_summary(
            self.store.boxes,
            self.complementary_products,
            self.get_frames_and_adapters(),
            self.catalog,
        )

    async def summary_report(self) -> SummaryReport:
        rows = await self.generate_sku_summary()
        return SummaryReport(self.client_name, rows, currency=self.currency)

    async def export_csv(self) -> str:
        rows = await self.generate_sku_summary()
        return csv_export.export_csv(
            self.get_current_project(), rows, self.get_frames_and_adapters(),
        )

    async def write_csv(self, path: str | Path) -> Path:
        rows = await self.generate_sku_summary()
        return csv_export.write_csv(
            self.get_current_project(), rows, self.get_frames_and_adapters(), path,
        )
