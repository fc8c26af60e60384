"""Exportación JSON del listado de cafés.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Mismo formato de precio que el wire (número + moneda por defecto aparte).
"""

from __future__ import annotations

import json
from pathlib import Path

from adapters.coffee_wire import coffee_to_wire
from core.domain.models import CoffeeListing
from core.domain.money import MoneyCodec


def export_listing_json(*, listing: CoffeeListing, codec: MoneyCodec, output_path: Path) -> Path:
    """Exporta `CoffeeListing` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "base_url": listing.base_url,
        "currency": codec.default_currency,
        "coffees": [coffee_to_wire(coffee, codec) for coffee in listing.coffees],
    }
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
