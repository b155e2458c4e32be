"""Product — a read-only catalog record.

Only the attributes the core reads are typed fields; every other
manufacturer-specific key is kept untouched in ``extra``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Catalog keys mapped onto typed attribute fields
_ATTRIBUTE_KEYS = {
    "moduleSize": "module_size",
    "module_size": "module_size",
    "color": "color",
    "category": "category",
    "includesFrame": "includes_frame",
    "includes_frame": "includes_frame",
    "isCompletePanel": "is_complete_panel",
    "is_complete_panel": "is_complete_panel",
}


class ProductAttributes(BaseModel):
    """Attributes the allocation core inspects, plus an opaque side-table."""

    model_config = ConfigDict(frozen=True)

    module_size: int | None = Field(default=None, ge=1)
    color: str | None = None
    category: str | None = None
    includes_frame: bool = False
    is_complete_panel: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)
    """Manufacturer metadata the core never reads (e.g. smartHomeCompatible)."""

    @model_validator(mode="before")
    @classmethod
    def _split_extras(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        typed: dict[str, Any] = {}
        extra: dict[str, Any] = dict(data.get("extra") or {})
        for key, value in data.items():
            if key == "extra":
                continue
            field = _ATTRIBUTE_KEYS.get(key)
            if field is None:
                extra[key] = value
            elif value is not None:
                typed[field] = value
        typed["extra"] = extra
        return typed

    def to_catalog_dict(self) -> dict[str, Any]:
        """Return the camelCase attribute map used by catalog files."""
        out: dict[str, Any] = dict(self.extra)
        if self.module_size is not None:
            out["moduleSize"] = self.module_size
        if self.color is not None:
            out["color"] = self.color
        if self.category is not None:
            out["category"] = self.category
        if self.includes_frame:
            out["includesFrame"] = True
        if self.is_complete_panel:
            out["isCompletePanel"] = True
        return out


class Product(BaseModel):
    """A switch, socket, or accessory from the catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sku: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    regular_price: float = Field(default=0.0, ge=0, alias="regularPrice")
    series: str = ""
    brand: str = ""
    attributes: ProductAttributes = Field(default_factory=ProductAttributes)

    @property
    def module_size(self) -> int | None:
        return self.attributes.module_size

    @property
    def color(self) -> str | None:
        return self.attributes.color

    @classmethod
    def from_catalog(cls, record: dict[str, Any]) -> Product:
        """Build a product from a raw catalog record (camelCase keys)."""
        return cls.model_validate(record)

    def to_catalog_dict(self) -> dict[str, Any]:
        return {
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "regularPrice": self.regular_price,
            "series": self.series,
            "brand": self.brand,
            "attributes": self.attributes.to_catalog_dict(),
        }
