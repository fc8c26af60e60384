"""Contrato del gateway de cafés.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El orquestador depende de esta abstracción; el adaptador HTTP
  (`adapters.coffee_api.CoffeeApiClient`) o un doble de test la implementan.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Coffee


@runtime_checkable
class CoffeeGateway(Protocol):
    """Operaciones remotas sobre el recurso `coffee`.

    Reglas de diseño:
    - Todas son asíncronas porque hacen I/O (HTTP).
    - Los fallos se expresan con `core.errors.CoffeeClientError` y subclases.
    """

    async def get_coffee(self, coffee_id: int) -> Coffee:
        """Devuelve el café con `coffee_id`."""

        ...

    async def create_coffee(self, coffee: Coffee) -> Coffee:
        """Crea `coffee` (sin id) y devuelve la versión asignada por el servidor."""

        ...

    async def list_coffees(self) -> list[Coffee]:
        """Devuelve todos los cafés en el orden del servidor."""

        ...
