"""Which products may be installed in a box, and color matching.

A product is box-compatible when its attributes carry a module size.
Category is not consulted.
"""

from __future__ import annotations

from switchbox.config import NO_COLOR
from switchbox.models.product import Product


def is_box_compatible(product: Product) -> bool:
    """Return True if *product* declares how many modules it occupies."""
    return product.attributes.module_size is not None


def normalize_color(color: str | None) -> str | None:
    """Map ``None``, ``""`` and ``"none"`` to ``None``."""
    if color is None:
        return None
    color = color.strip()
    if not color or color.lower() == NO_COLOR:
        return None
    return color


def color_matches(product: Product, color: str | None) -> bool:
    """Exact color filter; an absent filter matches everything."""
    wanted = normalize_color(color)
    if wanted is None:
        return True
    return product.color == wanted
