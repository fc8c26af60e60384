"""Mapeo `Coffee` <-> JSON del wire.

Por qué separado del cliente HTTP:
- Aísla la forma del payload (`price` como número, `createTime`/`updateTime`)
  de la mecánica de requests.
- Todo precio pasa exclusivamente por `MoneyCodec`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from core.domain.models import Coffee
from core.domain.money import MoneyCodec
from core.errors import DecodeError, FormatError


def coffee_to_wire(coffee: Coffee, codec: MoneyCodec) -> dict[str, Any]:
    """Serializa un café; `id` y timestamps se omiten si son None.

    Lanza `FormatError` si el precio pierde precisión como float.
    """

    payload = coffee.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"price"})
    amount = codec.encode(coffee.price)
    price = float(amount)
    # El wire es un número JSON (float); se rechaza lo que no cabe exacto.
    if Decimal(repr(price)) != amount:
        raise FormatError(f"Price {amount} cannot be sent exactly as a JSON number")
    payload["price"] = price
    return payload


def coffee_from_wire(data: object, codec: MoneyCodec) -> Coffee:
    """Decodifica un objeto JSON en `Coffee`.

    Lanza `FormatError` si `price` no es un decimal válido y `DecodeError`
    si el objeto no tiene la forma esperada.
    """

    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
    if "price" not in data:
        raise DecodeError("Missing 'price' field")

    fields = dict(data)
    fields["price"] = codec.decode(fields["price"])
    try:
        return Coffee.model_validate(fields)
    except ValidationError as exc:
        raise DecodeError(f"Invalid coffee payload: {exc}") from exc


def coffees_from_wire(data: object, codec: MoneyCodec) -> list[Coffee]:
    if not isinstance(data, list):
        raise DecodeError(f"Expected a JSON array, got {type(data).__name__}")
    return [coffee_from_wire(item, codec) for item in data]
