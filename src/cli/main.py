"""CLI principal (Typer).

Por qué Typer + Rich:
- Comandos tipados con ayuda autogenerada.
- La CLI solo traduce opciones a llamadas del Core y pinta resultados.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.coffee_api import CoffeeApiClient
from adapters.json_exporter import export_listing_json
from cli import doctor
from cli.ui_components import build_coffees_table, build_flow_panel, print_banner
from core.config import AppSettings
from core.domain.models import Coffee, CoffeeListing
from core.domain.money import Money, MoneyCodec
from core.errors import CoffeeClientError, FormatError
from core.logging_setup import configure_logging
from core.services.coffee_pipeline import CoffeeFlowRequest, CoffeeFlowResult, run_coffee_flow

app = typer.Typer(no_args_is_help=True, help="Client for the coffee resource API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _settings(ctx: typer.Context) -> AppSettings:
    return ctx.obj


def _parse_price(value: str, currency: str) -> Money:
    try:
        return Money.of(currency, value)
    except (FormatError, ValueError) as exc:
        raise typer.BadParameter(f"Invalid price {value!r}: {exc}") from exc


def _describe(exc: ValidationError) -> str:
    return "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors())


def _fail(exc: CoffeeClientError) -> NoReturn:
    _console.print(f"[red]Error:[/red] {exc}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: str | None = typer.Option(None, "--base-url", help="API origin (overrides config)."),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR."),
) -> None:
    overrides: dict[str, str] = {}
    if base_url:
        overrides["base_url"] = base_url
    if log_level:
        overrides["log_level"] = log_level
    try:
        settings = AppSettings(**overrides)
    except ValidationError as exc:
        raise typer.BadParameter(_describe(exc)) from exc
    configure_logging(settings.log_level)
    ctx.obj = settings


@app.command(name="run")
def run_flow(
    ctx: typer.Context,
    coffee_id: int = typer.Option(1, "--coffee-id", help="Coffee to fetch concurrently."),
    name: str = typer.Option("americano", "--name", help="Name of the coffee to create."),
    price: str = typer.Option("125.00", "--price", help="Price of the coffee to create."),
    export_json: Path | None = typer.Option(None, "--export-json", help="Write the list to JSON."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the banner."),
) -> None:
    """Fetch and create concurrently, wait for both, then list every coffee."""

    settings = _settings(ctx)
    if not no_banner:
        print_banner(_console)

    new_coffee = Coffee(name=name, price=_parse_price(price, settings.default_currency))
    request = CoffeeFlowRequest(coffee_id=coffee_id, new_coffee=new_coffee)

    async def _run() -> tuple[CoffeeFlowResult, str]:
        async with CoffeeApiClient(settings=settings) as api:
            result = await run_coffee_flow(gateway=api, request=request)
            return result, api.base_url

    try:
        result, origin = asyncio.run(_run())
    except CoffeeClientError as exc:
        _fail(exc)

    _console.print(build_flow_panel(result))
    _console.print(build_coffees_table(result.listed, title="Coffee in List"))

    if export_json:
        listing = CoffeeListing(base_url=origin, coffees=result.listed)
        path = export_listing_json(
            listing=listing,
            codec=MoneyCodec(settings.default_currency),
            output_path=export_json,
        )
        _console.print(f"[green]JSON saved to:[/green] {path}")


@app.command(name="get")
def get_coffee(ctx: typer.Context, coffee_id: int = typer.Argument(..., help="Coffee id.")) -> None:
    """Fetch a single coffee."""

    settings = _settings(ctx)

    async def _run() -> Coffee:
        async with CoffeeApiClient(settings=settings) as api:
            return await api.get_coffee(coffee_id)

    try:
        coffee = asyncio.run(_run())
    except CoffeeClientError as exc:
        _fail(exc)
    _console.print(build_coffees_table([coffee], title=f"Coffee {coffee_id}"))


@app.command(name="list")
def list_coffees(ctx: typer.Context) -> None:
    """List every coffee in server order."""

    settings = _settings(ctx)

    async def _run() -> list[Coffee]:
        async with CoffeeApiClient(settings=settings) as api:
            return await api.list_coffees()

    try:
        coffees = asyncio.run(_run())
    except CoffeeClientError as exc:
        _fail(exc)
    _console.print(build_coffees_table(coffees))


@app.command(name="create")
def create_coffee(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Coffee name."),
    price: str = typer.Argument(..., help="Price in the configured currency."),
) -> None:
    """Create a coffee and show the server-assigned record."""

    settings = _settings(ctx)
    coffee = Coffee(name=name, price=_parse_price(price, settings.default_currency))

    async def _run() -> Coffee:
        async with CoffeeApiClient(settings=settings) as api:
            return await api.create_coffee(coffee)

    try:
        created = asyncio.run(_run())
    except CoffeeClientError as exc:
        _fail(exc)
    _console.print(build_coffees_table([created], title="Coffee Created"))


def run() -> None:
    app()
