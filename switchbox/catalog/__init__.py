"""Product catalog boundary: lookup, compatibility, and search sessions."""

from switchbox.catalog.compatibility import color_matches, is_box_compatible
from switchbox.catalog.provider import (
    CatalogProvider,
    InMemoryCatalog,
    load_catalog_file,
)
from switchbox.catalog.search import ProductSearch, SearchHandle, SearchOutcome

__all__ = [
    "CatalogProvider",
    "InMemoryCatalog",
    "ProductSearch",
    "SearchHandle",
    "SearchOutcome",
    "color_matches",
    "is_box_compatible",
    "load_catalog_file",
]
