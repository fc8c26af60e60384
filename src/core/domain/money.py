"""Valor monetario y codec de wire.

Por qué un codec explícito:
- La API remota representa precios como números desnudos (sin moneda).
- `MoneyCodec` hace el puente con `Money` sin obligar a cada llamada a
  envolver/desenvolver manualmente.

Nota:
- El codec es *lossy*: `encode` descarta la moneda y `decode` la reconstruye
  siempre como `default_currency`. Es una simplificación para un despliegue
  mono-moneda, no un bug.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic.config import ConfigDict

from core.errors import FormatError

DEFAULT_CURRENCY = "TWD"

# Decimales (minor units) por moneda, ISO-4217. Las no listadas usan 2.
_MINOR_UNITS: dict[str, int] = {
    "BHD": 3,
    "CLP": 0,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
    "VND": 0,
}


def minor_units(currency: str) -> int:
    return _MINOR_UNITS.get(currency.upper(), 2)


def to_decimal(value: object) -> Decimal:
    """Convierte un valor numérico del wire a `Decimal` finito.

    Acepta `Decimal`, `int`, `float` y strings numéricos. Rechaza `bool`
    (subclase de `int`), `None` y NaN/Infinity.
    """

    if isinstance(value, bool) or value is None:
        raise FormatError(f"Not a decimal value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() evita arrastrar el error binario del float (125.1 -> 125.1).
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise FormatError(f"Not a decimal value: {value!r}") from exc
    else:
        raise FormatError(f"Not a decimal value: {value!r}")

    if not result.is_finite():
        raise FormatError(f"Not a finite decimal value: {value!r}")
    return result


class Money(BaseModel):
    """Par (moneda, importe decimal) inmutable.

    El importe se normaliza a los decimales de la moneda (p.ej. 125 TWD ->
    125.00). Un importe con más decimales de los permitidos se rechaza en
    lugar de redondearse en silencio.
    """

    model_config = ConfigDict(frozen=True)

    currency: str = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Código ISO-4217 en mayúsculas (p.ej. 'TWD').",
    )
    amount: Decimal = Field(
        ...,
        description="Importe con la precisión de la moneda.",
    )

    @field_validator("currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().upper()
            if not value.isalpha():
                raise ValueError(f"Invalid currency code: {value!r}")
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: object) -> Decimal:
        return to_decimal(value)

    @field_validator("amount")
    @classmethod
    def _quantize_amount(cls, value: Decimal, info: ValidationInfo) -> Decimal:
        currency = info.data.get("currency")
        if currency is None:
            return value
        places = minor_units(currency)
        exponent = Decimal(1).scaleb(-places)
        try:
            quantized = value.quantize(exponent)
        except InvalidOperation as exc:
            raise FormatError(f"{value} exceeds the supported precision for {currency}") from exc
        if quantized != value:
            raise FormatError(
                f"{value} has more than {places} decimal places allowed for {currency}"
            )
        return quantized

    @classmethod
    def of(cls, currency: str, amount: Decimal | int | float | str) -> "Money":
        return cls(currency=currency, amount=amount)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


class MoneyCodec:
    """Codec `Money` <-> número desnudo con una moneda por defecto explícita."""

    def __init__(self, default_currency: str = DEFAULT_CURRENCY) -> None:
        code = default_currency.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"Invalid default currency: {default_currency!r}")
        self._default_currency = code

    @property
    def default_currency(self) -> str:
        return self._default_currency

    def encode(self, money: Money) -> Decimal:
        """Devuelve solo el importe; la moneda se descarta."""

        return money.amount

    def decode(self, value: object) -> Money:
        """Envuelve un número del wire en `Money` con la moneda por defecto.

        Lanza `FormatError` si el valor no es un decimal válido para la moneda.
        """

        amount = to_decimal(value)
        try:
            return Money(currency=self._default_currency, amount=amount)
        except ValidationError as exc:
            raise unwrap_format_error(exc) from exc


def unwrap_format_error(exc: ValidationError) -> FormatError:
    """Recupera el `FormatError` que pydantic envolvió en un `ValidationError`."""

    for item in exc.errors():
        inner = (item.get("ctx") or {}).get("error")
        if isinstance(inner, FormatError):
            return inner
    return FormatError(str(exc))
