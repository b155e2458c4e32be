"""Embedded sample catalog — no external catalog file required.

Records use the camelCase layout of catalog files so they exercise the
same parsing path as :func:`load_catalog_file`.
"""

from __future__ import annotations

from typing import Any

from switchbox.models.product import Product


def _switch(sku: str, name: str, description: str, module_size: int, color: str,
            price: float, series: str = "Axolute", brand: str = "Bticino",
            category: str = "Switches", **extra: Any) -> dict[str, Any]:
    return {
        "sku": sku,
        "name": name,
        "description": description,
        "regularPrice": price,
        "series": series,
        "brand": brand,
        "attributes": {
            "moduleSize": module_size,
            "color": color,
            "category": category,
            **extra,
        },
    }


SEED_CATALOG: list[dict[str, Any]] = [
    # Bticino Axolute
    _switch("HD4001", "1-Way Switch", "1-module one-way switch", 1, "White", 12.50),
    _switch("HD4003", "2-Way Switch", "1-module two-way switch", 1, "White", 14.75),
    _switch("HD4004", "Cross Switch", "1-module cross switch", 1, "White", 19.99),
    _switch("HD4012", "Pushbutton", "1-module pushbutton", 1, "White", 15.25),
    _switch("HD4027", "Socket", "2-module power socket", 2, "White",
            22.40, category="Sockets"),
    _switch("HC4001", "1-Way Switch", "1-module one-way switch", 1, "Anthracite", 13.10),
    _switch("HC4027", "Socket", "2-module power socket", 2, "Anthracite",
            23.90, category="Sockets"),
    _switch("HD4950", "Blank Module", "1-module blank cover", 1, "White",
            4.20, category="Accessories"),
    # Bticino Living Now
    _switch("K4001C", "Switch 1P", "1-module one-way switch", 1, "White", 9.80,
            series="Living Now"),
    _switch("K4027C", "Socket 2P+E", "2-module Schuko socket", 2, "White", 17.60,
            series="Living Now", category="Sockets"),
    _switch("K4652M2", "Dimmer Panel", "2-module dimmer with integrated cover plate",
            2, "Black", 64.00, series="Living Now", includesFrame=True,
            smartHomeCompatible=True),
    # Gewiss Chorus
    _switch("GW10001", "One-way Switch", "1-module one-way switch", 1, "White", 8.40,
            series="Chorus", brand="Gewiss"),
    _switch("GW10243", "USB Charger", "2-module dual USB charger", 2, "White", 38.50,
            series="Chorus", brand="Gewiss", category="Sockets"),
    _switch("GW16903", "Thermostat Panel", "3-module thermostat, complete panel",
            3, "White", 129.00, series="Chorus", brand="Gewiss",
            isCompletePanel=True, smartHomeCompatible=True),
    # Not installable in a box
    {
        "sku": "CBL-NYM-3X15",
        "name": "NYM Cable 3x1.5",
        "description": "Installation cable, per meter",
        "regularPrice": 1.35,
        "series": "",
        "brand": "Generic",
        "attributes": {"category": "Cables"},
    },
    {
        "sku": "MCB-C16",
        "name": "Circuit Breaker C16",
        "description": "Miniature circuit breaker 16A, curve C",
        "regularPrice": 11.90,
        "series": "",
        "brand": "Generic",
        "attributes": {"category": "Protection", "poles": 1},
    },
]


def seed_products() -> list[Product]:
    """Return the embedded catalog as products."""
    return [Product.from_catalog(r) for r in SEED_CATALOG]
