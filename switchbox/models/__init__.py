"""Domain models for boxes, products, and derived parts."""

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

__all__ = [
    "Box",
    "BoxData",
    "BoxProductLine",
    "BoxType",
    "ComplementaryProduct",
    "FrameAdapter",
    "Product",
    "ProductAttributes",
    "Project",
]
