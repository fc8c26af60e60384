"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Coffee
from core.services.coffee_pipeline import CoffeeFlowResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("coffee-webclient", style="bold cyan")
    subtitle = Text("GET • POST • LIST", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_coffees_table(coffees: Iterable[Coffee], *, title: str = "Coffees") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Name", style="white")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Created", style="dim")
    table.add_column("Updated", style="dim")
    for coffee in coffees:
        table.add_row(
            "" if coffee.id is None else str(coffee.id),
            coffee.name,
            str(coffee.price),
            coffee.create_time.isoformat() if coffee.create_time else "",
            coffee.update_time.isoformat() if coffee.update_time else "",
        )
    return table


def build_flow_panel(result: CoffeeFlowResult) -> Panel:
    """Panel con el resultado de las dos operaciones concurrentes."""

    body = Text()
    body.append("Fetched: ", style="bold")
    body.append(f"{result.fetched}\n" if result.fetched else "-\n")
    body.append("Created: ", style="bold")
    body.append(f"{result.created}\n" if result.created else "-\n")
    for operation, exc in result.errors.items():
        body.append(f"{operation} failed: {exc}\n", style="red")

    return Panel(body, title=Text("Flow", style="bold yellow"), border_style="yellow")
