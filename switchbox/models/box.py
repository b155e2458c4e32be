"""Boxes, their product lines, and the Project aggregate."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from switchbox.config import BOX_MODULE_CAPACITIES, NO_COLOR
from switchbox.models.product import Product


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class BoxType(str, Enum):
    """Physical enclosure types."""

    BOX_55 = "55 Box"
    RECTANGULAR = "Rectangular Box"

    @property
    def capacities(self) -> tuple[int, ...]:
        return BOX_MODULE_CAPACITIES[self.value]


class BoxData(BaseModel):
    """User-editable box fields, validated as a unit."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    area: str = Field(min_length=1)
    description: str = ""
    box_type: BoxType = Field(alias="boxType")
    module_capacity: int = Field(alias="moduleCapacity")
    color: Optional[str] = None
    """``None`` or ``"none"`` means no color constraint."""

    @field_validator("name", "area")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _check_capacity(self) -> BoxData:
        legal = self.box_type.capacities
        if self.module_capacity not in legal:
            raise ValueError(
                f"module capacity {self.module_capacity} is not valid for "
                f"'{self.box_type.value}' (allowed: {', '.join(map(str, legal))})"
            )
        return self

    @property
    def color_constraint(self) -> str | None:
        """The box color, or ``None`` when the box accepts any color."""
        if not self.color or self.color.lower() == NO_COLOR:
            return None
        return self.color


class BoxProductLine(BaseModel):
    """One SKU inside a box with its quantity."""

    product: Product
    quantity: int = Field(ge=1)

    @property
    def sku(self) -> str:
        return self.product.sku


class Box(BoxData):
    """An enclosure holding product lines, at most one line per SKU."""

    id: str = Field(default_factory=_new_id)
    products: list[BoxProductLine] = Field(default_factory=list)

    def find_line(self, sku: str) -> BoxProductLine | None:
        for line in self.products:
            if line.sku == sku:
                return line
        return None

    @property
    def is_empty(self) -> bool:
        return not self.products

    def editable_fields(self) -> dict:
        return self.model_dump(include=set(BoxData.model_fields))


class ComplementaryProduct(BaseModel):
    """A product tracked in the project but not installed in a box."""

    sku: str = Field(min_length=1)
    name: str = ""
    quantity: int = Field(ge=1)
    area: str = ""
    description: Optional[str] = None


class FrameAdapter(BaseModel):
    """A derived auxiliary part; never stored as user data."""

    model_config = ConfigDict(frozen=True)

    type: Literal["frame", "adapter"]
    sku: str
    name: str
    regular_price: float = 0.0
    for_box_type: BoxType
    module_capacity: int
    color: Optional[str] = None


class Project(BaseModel):
    """Root aggregate for a configuration session."""

    client_name: str = ""
    boxes: list[Box] = Field(default_factory=list)
    complementary_products: list[ComplementaryProduct] = Field(default_factory=list)
