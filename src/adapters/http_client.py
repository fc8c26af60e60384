"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts y headers para las tres llamadas.
- Facilita testeo: se puede sustituir el transport (respx/MockTransport).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

JSON_MEDIA_TYPE = "application/json"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` compartible por todas las operaciones.

    Por qué un builder:
    - El cliente (y su pool de conexiones) se crea una vez y se inyecta;
      ninguna operación abre ni cierra conexiones por su cuenta.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": JSON_MEDIA_TYPE,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=(base_url or settings.base_url).rstrip("/"),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
