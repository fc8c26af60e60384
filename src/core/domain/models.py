"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los registros son snapshots inmutables (`frozen=True`) por request/response.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* viaja por el wire.
  La conversión del precio vive en `adapters.coffee_wire`.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.money import Money


class Coffee(BaseModel):
    """Registro de la API remota: un café con su precio.

    Ciclo de vida:
    - Se construye sin `id` en el cliente para pedir su creación.
    - Se construye decodificando respuestas (get/list/create).
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: int | None = Field(
        default=None,
        description="Identificador asignado por el servidor (None antes de crear).",
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Nombre del café.",
    )
    price: Money = Field(
        ...,
        description="Precio; en el wire es un número sin moneda.",
    )
    create_time: datetime | None = Field(
        default=None,
        alias="createTime",
        description="Timestamp de creación (servidor).",
    )
    update_time: datetime | None = Field(
        default=None,
        alias="updateTime",
        description="Timestamp de última actualización (servidor).",
    )

    def __str__(self) -> str:
        return f"Coffee(id={self.id}, name={self.name}, price={self.price})"


class CoffeeListing(BaseModel):
    """Resultado exportable de un listado (ver `adapters.json_exporter`)."""

    base_url: str = Field(..., description="Origen consultado.")
    coffees: list[Coffee] = Field(default_factory=list)
