"""Switchbox — electrical installation configurator: boxes, capacity, parts, cost summary."""

__version__ = "1.0.0"

from switchbox.allocation.store import BoxStore
from switchbox.api.facade import Configurator
from switchbox.catalog.provider import CatalogProvider, InMemoryCatalog, load_catalog_file
from switchbox.catalog.search import ProductSearch, SearchOutcome
from switchbox.config import ConfigManager, Settings
from switchbox.exceptions import (
    BoxNotFoundError,
    CapacityExceeded,
    CatalogUnavailable,
    IncompatibleProductError,
    SwitchboxError,
)
from switchbox.models.box import (
    Box,
    BoxData,
    BoxProductLine,
    BoxType,
    ComplementaryProduct,
    FrameAdapter,
    Project,
)
from switchbox.models.product import Product, ProductAttributes
from switchbox.parts.pricing import FixedPartsPricing, PartsPricingProvider
from switchbox.summary.aggregation import SkuSummaryRow
from switchbox.summary.report import SummaryReport

__all__ = [
    "__version__",
    # Facade
    "Configurator",
    # Core
    "BoxStore",
    "FixedPartsPricing",
    "PartsPricingProvider",
    # Catalog
    "CatalogProvider",
    "InMemoryCatalog",
    "ProductSearch",
    "SearchOutcome",
    "load_catalog_file",
    # Models
    "Box",
    "BoxData",
    "BoxProductLine",
    "BoxType",
    "ComplementaryProduct",
    "FrameAdapter",
    "Product",
    "ProductAttributes",
    "Project",
    "SkuSummaryRow",
    "SummaryReport",
    # Config / errors
    "BoxNotFoundError",
    "CapacityExceeded",
    "CatalogUnavailable",
    "ConfigManager",
    "Settings",
    "IncompatibleProductError",
    "SwitchboxError",
]
