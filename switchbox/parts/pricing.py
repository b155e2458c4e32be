"""PartsPricingProvider interface and the fixed placeholder pricing.

Frame and adapter prices are not looked up in the product catalog.
"""

from __future__ import annotations

import abc
import logging
from typing import Literal

from switchbox.config import DEFAULT_ADAPTER_PRICE, DEFAULT_FRAME_PRICE

logger = logging.getLogger(__name__)

PartKind = Literal["frame", "adapter"]


class PartsPricingProvider(abc.ABC):
    """Abstract price source for derived frames and adapters."""

    @abc.abstractmethod
    def get_unit_price(self, kind: PartKind, sku: str) -> float:
        """Return the unit price of the part with synthetic *sku*."""


class FixedPartsPricing(PartsPricingProvider):
    """One constant price per part kind, with optional per-SKU overrides.

    Parameters
    ----------
    frame_price, adapter_price:
        Unit prices applied to every frame / adapter.
    overrides:
        ``{sku: price}`` for individual synthetic SKUs.
    """

    def __init__(
        self,
        frame_price: float = DEFAULT_FRAME_PRICE,
        adapter_price: float = DEFAULT_ADAPTER_PRICE,
        overrides: dict[str, float] | None = None,
    ) -> None:
        if frame_price < 0 or adapter_price < 0:
            raise ValueError("Part prices must not be negative.")
        self.frame_price = frame_price
        self.adapter_price = adapter_price
        self.overrides = dict(overrides or {})

    def get_unit_price(self, kind: PartKind, sku: str) -> float:
        if sku in self.overrides:
            return self.overrides[sku]
        return self.frame_price if kind == "frame" else self.adapter_price
