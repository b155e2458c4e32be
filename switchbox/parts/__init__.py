"""Auxiliary parts (frames and adapters) derived from box configuration."""

from switchbox.parts.deriver import derive_frames_and_adapters, derive_parts
from switchbox.parts.pricing import FixedPartsPricing, PartsPricingProvider

__all__ = [
    "FixedPartsPricing",
    "PartsPricingProvider",
    "derive_frames_and_adapters",
    "derive_parts",
]
