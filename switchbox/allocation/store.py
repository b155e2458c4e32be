"""BoxStore — owns the boxes and their product lines.

Every mutation either commits a complete new box state or changes
nothing.  Capacity admission goes through :mod:`switchbox.allocation.capacity`.
Mutations re-read the box while holding its lock, so one that races
:meth:`BoxStore.delete_box` reports failure instead of writing to a
detached box.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from switchbox.allocation import capacity
from switchbox.allocation.locking import BoxLockRegistry
from switchbox.exceptions import BoxNotFoundError
from switchbox.models.box import Box, BoxData, BoxProductLine
from switchbox.models.product import Product

logger = logging.getLogger(__name__)

# Field aliases accepted by update_box -> field names
_FIELD_NAMES: dict[str, str] = {
    **{name: name for name in BoxData.model_fields},
    **{f.alias: name for name, f in BoxData.model_fields.items() if f.alias},
}


class BoxStore:
    """Ordered collection of boxes with capacity-checked mutations.

    Parameters
    ----------
    strict:
        If *True*, operations on an unknown box id raise
        :class:`BoxNotFoundError` instead of being silent no-ops.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._boxes: dict[str, Box] = {}
        self._locks = BoxLockRegistry()

    # -- queries --------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._boxes)

    def __iter__(self) -> Iterator[Box]:
        return iter(list(self._boxes.values()))

    def __contains__(self, box_id: str) -> bool:
        return box_id in self._boxes

    @property
    def boxes(self) -> list[Box]:
        """Boxes in creation order."""
        return list(self._boxes.values())

    def get_box(self, box_id: str) -> Box | None:
        return self._boxes.get(box_id)

    def used_modules(self, box_id: str) -> int:
        """Modules in use; 0 for an unknown box."""
        box = self._find(box_id)
        return capacity.used_modules(box) if box is not None else 0

    def remaining_modules(self, box_id: str) -> int:
        """Free modules; 0 for an unknown box."""
        box = self._find(box_id)
        return capacity.remaining_modules(box) if box is not None else 0

    # -- box lifecycle --------------------------------------------------------

    def create_box(self, data: BoxData | dict[str, Any] | None = None, **fields: Any) -> Box:
        """Create an empty box.

        Accepts a :class:`BoxData`, a dict, or keyword fields.  Raises
        pydantic ``ValidationError`` for blank name/area or a capacity
        that is not legal for the box type.
        """
        if isinstance(data, BoxData):
            payload: dict[str, Any] = data.model_dump()
        else:
            payload = dict(data or {})
        payload.update(fields)
        payload.pop("id", None)
        payload.pop("products", None)

        box = Box.model_validate(payload)
        while box.id in self._boxes:
            box = Box.model_validate(payload)
        self._boxes[box.id] = box
        logger.info(
            "Created box %s '%s' (%s, %d modules)",
            box.id, box.name, box.box_type.value, box.module_capacity,
        )
        return box

    def update_box(self, box_id: str, **changes: Any) -> Box | None:
        """Merge *changes* into the box's editable fields.

        Product lines are untouched.  Returns the updated box, or None if
        the box is unknown or the new capacity is below the modules
        already in use.  Raises pydantic ``ValidationError`` for an
        invalid merged box.
        """
        box = self._find(box_id)
        if box is None:
            return None

        normalized: dict[str, Any] = {}
        for key, value in changes.items():
            name = _FIELD_NAMES.get(key)
            if name is None:
                logger.debug("Ignoring non-editable box field %r", key)
                continue
            normalized[name] = value

        with self._locks.hold(box_id):
            box = self._boxes.get(box_id)
            if box is None:
                return None
            merged = BoxData.model_validate({**box.editable_fields(), **normalized})
            used = capacity.used_modules(box)
            if merged.module_capacity < used:
                logger.debug(
                    "Refusing capacity %d for box %s: %d modules in use",
                    merged.module_capacity, box_id, used,
                )
                return None
            for name in BoxData.model_fields:
                setattr(box, name, getattr(merged, name))

        logger.info("Updated box %s", box_id)
        return box

    def delete_box(self, box_id: str) -> bool:
        """Remove a box and its lines.  Unknown ids are ignored."""
        with self._locks.hold(box_id):
            removed = self._boxes.pop(box_id, None)
        self._locks.discard(box_id)
        if removed is None:
            return False
        logger.info("Deleted box %s '%s'", box_id, removed.name)
        return True

    def clear(self) -> None:
        self._boxes.clear()
        self._locks.clear()

    # -- product lines --------------------------------------------------------

    def add_product(self, box_id: str, product: Product, quantity: int = 1) -> bool:
        """Add *quantity* units of *product*, merging with an existing line.

        Returns False (and changes nothing) if the box is unknown, the
        quantity is not positive, or the added modules do not fit.

        Raises
        ------
        IncompatibleProductError
            If *product* has no module size.
        """
        box = self._find(box_id)
        if box is None:
            return False
        if quantity <= 0:
            return False

        with self._locks.hold(box_id):
            box = self._boxes.get(box_id)
            if box is None:
                return False
            if not capacity.can_add(box, product, quantity):
                logger.debug(
                    "Rejected %dx %s for box %s: %d modules free",
                    quantity, product.sku, box_id, capacity.remaining_modules(box),
                )
                return False

            lines: list[BoxProductLine] = []
            merged = False
            for line in box.products:
                if line.sku == product.sku:
                    line = BoxProductLine(product=line.product, quantity=line.quantity + quantity)
                    merged = True
                lines.append(line)
            if not merged:
                lines.append(BoxProductLine(product=product, quantity=quantity))
            box.products = lines

        logger.info("Added %dx %s to box %s", quantity, product.sku, box_id)
        return True

    def update_product_quantity(self, box_id: str, sku: str, quantity: int) -> bool:
        """Set a line's quantity; 0 removes the line.

        Only the module delta is checked against free capacity, so
        decreases always succeed.  Returns False if the box or line is
        unknown, the quantity is negative, or the increase does not fit.
        """
        box = self._find(box_id)
        if box is None:
            return False
        if quantity < 0:
            return False

        with self._locks.hold(box_id):
            box = self._boxes.get(box_id)
            if box is None:
                return False
            current = box.find_line(sku)
            if current is None:
                return False
            if not capacity.can_set_quantity(box, current, quantity):
                logger.debug(
                    "Rejected quantity %d of %s in box %s: %d modules free",
                    quantity, sku, box_id, capacity.remaining_modules(box),
                )
                return False

            if quantity == 0:
                box.products = [line for line in box.products if line.sku != sku]
            else:
                box.products = [
                    BoxProductLine(product=line.product, quantity=quantity)
                    if line.sku == sku else line
                    for line in box.products
                ]

        logger.info("Set %s in box %s to %d", sku, box_id, quantity)
        return True

    def remove_product(self, box_id: str, sku: str) -> bool:
        """Delete a line unconditionally.  Returns True if a line was removed."""
        box = self._find(box_id)
        if box is None:
            return False

        with self._locks.hold(box_id):
            box = self._boxes.get(box_id)
            if box is None:
                return False
            remaining = [line for line in box.products if line.sku != sku]
            if len(remaining) == len(box.products):
                return False
            box.products = remaining

        logger.info("Removed %s from box %s", sku, box_id)
        return True

    # -- internals ------------------------------------------------------------

    def _find(self, box_id: str) -> Box | None:
        box = self._boxes.get(box_id)
        if box is None:
            if self.strict:
                raise BoxNotFoundError(box_id)
            logger.debug("Unknown box id %s", box_id)
        return box
