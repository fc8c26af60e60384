"""Taxonomía de errores del cliente.

Por qué una jerarquía propia:
- Los adaptadores traducen excepciones de httpx/pydantic a tipos del dominio,
  así el Core y la CLI no dependen de librerías de I/O.
- El orquestador distingue un único tipo base (`CoffeeClientError`) para
  aislar fallos de las operaciones asíncronas.
"""

from __future__ import annotations


class CoffeeClientError(Exception):
    """Base de todos los errores del cliente."""


class TransportError(CoffeeClientError):
    """Fallo de transporte: conexión rechazada, timeout, DNS."""


class ResponseStatusError(TransportError):
    """El servidor respondió con un status fuera de 2xx."""

    def __init__(self, message: str, *, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class DecodeError(CoffeeClientError):
    """El cuerpo de la respuesta no tiene la forma JSON esperada."""


class FormatError(DecodeError, ValueError):
    """Valor numérico de precio mal formado en el wire.

    Hereda de `ValueError` para que pydantic lo trate como error de validación
    cuando el codec se invoca dentro de un validador.
    """
