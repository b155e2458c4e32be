"""Error taxonomy for the configurator core.

Core mutations report failure through return values (``False`` / ``None``).
These exceptions are raised only at the edges: strict stores, the facade's
``require_*`` helpers, and catalog providers.
"""

from __future__ import annotations


class SwitchboxError(Exception):
    """Base class for all switchbox errors."""


class CapacityExceeded(SwitchboxError):
    """Not enough free modules in a box for the requested product line."""

    def __init__(self, box_id: str, requested: int, available: int) -> None:
        self.box_id = box_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough module space. Only {available} modules available."
        )


class BoxNotFoundError(SwitchboxError, KeyError):
    """Unknown box id (raised only by strict stores)."""

    def __init__(self, box_id: str) -> None:
        self.box_id = box_id
        super().__init__(f"Box '{box_id}' not found.")

    def __str__(self) -> str:
        return self.args[0]


class CatalogUnavailable(SwitchboxError):
    """The product catalog could not be loaded or queried."""


class IncompatibleProductError(SwitchboxError, ValueError):
    """A product without a module size was offered to a box."""

    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"Product '{sku}' has no module size and cannot go in a box.")
