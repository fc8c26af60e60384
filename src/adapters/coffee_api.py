"""Cliente HTTP de la API de cafés.

Implementa `core.interfaces.coffee_gateway.CoffeeGateway` sobre un
`httpx.AsyncClient` compartido:

- `GET  /coffee/{id}` -> un café
- `POST /coffee/`     -> café creado (con id y timestamps)
- `GET  /coffee/`     -> lista de cafés, en orden del servidor

Los errores de httpx y de decodificación se traducen a `core.errors`.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

import httpx

from adapters.coffee_wire import coffee_from_wire, coffee_to_wire, coffees_from_wire
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import Coffee
from core.domain.money import MoneyCodec
from core.errors import DecodeError, ResponseStatusError, TransportError

logger = logging.getLogger(__name__)

COFFEE_PATH = "/coffee/"


class CoffeeApiClient:
    """Gateway HTTP para el recurso `coffee`.

    El `httpx.AsyncClient` se inyecta (y no se cierra aquí) o se construye a
    partir de `settings` (y entonces se cierra en `aclose`).
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        codec: MoneyCodec | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)
        self._codec = codec or MoneyCodec(self._settings.default_currency)

    @property
    def codec(self) -> MoneyCodec:
        return self._codec

    @property
    def base_url(self) -> str:
        return str(self._client.base_url).rstrip("/")

    async def __aenter__(self) -> "CoffeeApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_coffee(self, coffee_id: int) -> Coffee:
        data = await self._request_json("GET", f"{COFFEE_PATH}{coffee_id}")
        return coffee_from_wire(data, self._codec)

    async def create_coffee(self, coffee: Coffee) -> Coffee:
        payload = coffee_to_wire(coffee, self._codec)
        data = await self._request_json("POST", COFFEE_PATH, json_body=payload)
        return coffee_from_wire(data, self._codec)

    async def list_coffees(self) -> list[Coffee]:
        data = await self._request_json("GET", COFFEE_PATH)
        return coffees_from_wire(data, self._codec)

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json_body)
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise ResponseStatusError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=str(response.url),
            )

        logger.debug("%s %s -> %s", method, path, response.status_code)
        try:
            # Decimal para que el codec reciba el número exacto del wire.
            return response.json(parse_float=Decimal)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"{method} {path} returned a non-JSON body") from exc
