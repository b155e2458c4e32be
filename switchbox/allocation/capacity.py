"""Module accounting for boxes.

Pure functions over box state.  Every product line is assumed to carry a
module size; lines without one are rejected before they reach a box.
"""

from __future__ import annotations

from switchbox.exceptions import IncompatibleProductError
from switchbox.models.box import Box, BoxProductLine
from switchbox.models.product import Product


def module_size_of(product: Product) -> int:
    """Return the product's module size.

    Raises
    ------
    IncompatibleProductError
        If the product has no module size.
    """
    size = product.attributes.module_size
    if size is None:
        raise IncompatibleProductError(product.sku)
    return size


def line_modules(line: BoxProductLine) -> int:
    return module_size_of(line.product) * line.quantity


def used_modules(box: Box) -> int:
    """Sum of module size times quantity over all lines of *box*."""
    return sum(line_modules(line) for line in box.products)


def remaining_modules(box: Box) -> int:
    return box.module_capacity - used_modules(box)


def can_add(box: Box, product: Product, quantity: int) -> bool:
    """Return True if *quantity* more units of *product* fit in *box*.

    Used both for a new line and for increasing an existing one; only the
    added modules are checked against what is free now.
    """
    return module_size_of(product) * quantity <= remaining_modules(box)


def quantity_delta(line: BoxProductLine, new_quantity: int) -> int:
    """Modules gained (positive) or freed (negative) by changing the quantity."""
    return module_size_of(line.product) * (new_quantity - line.quantity)


def can_set_quantity(box: Box, line: BoxProductLine, new_quantity: int) -> bool:
    return quantity_delta(line, new_quantity) <= remaining_modules(box)


def capacity_message(box: Box) -> str:
    """Human-readable reason for a rejected admission."""
    return f"Not enough module space. Only {remaining_modules(box)} modules available."
