"""Configuración de logging.

Por qué Rich:
- La CLI ya imprime con Rich; el `RichHandler` mantiene un formato coherente
  entre tablas y logs.
- Los módulos solo usan `logging.getLogger(__name__)`; aquí se decide el sink.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "coffee-webclient-rich"


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> None:
    """Instala un `RichHandler` en el root logger (idempotente)."""

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)

    # httpx loguea cada request en INFO; lo bajamos para no duplicar ruido.
    logging.getLogger("httpx").setLevel(logging.WARNING)
