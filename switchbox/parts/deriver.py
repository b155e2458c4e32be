"""Derive the frames and adapters implied by the current boxes.

The list is recomputed from scratch on every call.  Synthetic SKUs depend
only on box type, capacity and (for frames) color, so identical boxes
share a SKU and are summed together in the summary.

Adapters are emitted for every non-empty box regardless of its products;
this is a placeholder policy, not a parts-compatibility resolver.
"""

from __future__ import annotations

import logging
from typing import Iterable

from switchbox.catalog.compatibility import normalize_color
from switchbox.config import NO_COLOR
from switchbox.models.box import Box, BoxType, FrameAdapter
from switchbox.parts.pricing import FixedPartsPricing, PartsPricingProvider

logger = logging.getLogger(__name__)


def frame_sku(box_type: BoxType, module_capacity: int, color: str | None) -> str:
    return f"FRAME-{box_type.value}-{module_capacity}-{normalize_color(color) or NO_COLOR}"


def adapter_sku(box_type: BoxType, module_capacity: int) -> str:
    return f"ADAPTER-{box_type.value}-{module_capacity}"


def needs_frame(box: Box) -> bool:
    """A non-empty box needs a frame unless one of its products brings its own."""
    if box.is_empty:
        return False
    return not any(
        line.product.attributes.includes_frame
        or line.product.attributes.is_complete_panel
        for line in box.products
    )


def needs_adapter(box: Box) -> bool:
    return not box.is_empty


def derive_parts(
    box: Box,
    pricing: PartsPricingProvider | None = None,
) -> list[FrameAdapter]:
    """Frame and/or adapter records for a single box."""
    pricing = pricing or FixedPartsPricing()
    color = box.color_constraint
    capacity = box.module_capacity
    parts: list[FrameAdapter] = []

    if needs_frame(box):
        sku = frame_sku(box.box_type, capacity, color)
        label = f"Frame for {box.box_type.value} ({capacity} modules"
        label += f", {color})" if color else ")"
        parts.append(FrameAdapter(
            type="frame",
            sku=sku,
            name=label,
            regular_price=pricing.get_unit_price("frame", sku),
            for_box_type=box.box_type,
            module_capacity=capacity,
            color=color,
        ))

    if needs_adapter(box):
        sku = adapter_sku(box.box_type, capacity)
        parts.append(FrameAdapter(
            type="adapter",
            sku=sku,
            name=f"Adapter for {box.box_type.value} ({capacity} modules)",
            regular_price=pricing.get_unit_price("adapter", sku),
            for_box_type=box.box_type,
            module_capacity=capacity,
        ))

    return parts


def derive_frames_and_adapters(
    boxes: Iterable[Box],
    pricing: PartsPricingProvider | None = None,
) -> list[FrameAdapter]:
    """Concatenate :func:`derive_parts` over *boxes* in order."""
    pricing = pricing or FixedPartsPricing()
    parts: list[FrameAdapter] = []
    for box in boxes:
        parts.extend(derive_parts(box, pricing))
    logger.debug("Derived %d frames/adapters", len(parts))
    return parts
