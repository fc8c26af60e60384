"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.domain.money import MoneyCodec

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get("/coffee/")
        return response.is_success, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


def _check_codec(settings: AppSettings) -> tuple[bool, str]:
    try:
        codec = MoneyCodec(settings.default_currency)
    except ValueError as exc:
        return False, str(exc)
    return True, f"default currency {codec.default_currency} (lossy for other currencies)"


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = ctx.obj if isinstance(ctx.obj, AppSettings) else AppSettings()

    table = Table(title="coffee-webclient Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")

    ok_codec, detail_codec = _check_codec(settings)
    table.add_row("Price codec", "OK" if ok_codec else "FAIL", detail_codec)

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("API connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Set the API origin with `doctor set-base-url` or COFFEE_CLIENT_BASE_URL."
        )


@app.command(name="set-base-url")
def set_base_url(url: str = typer.Argument(..., help="API origin, e.g. http://localhost:8080")) -> None:
    """Store the API origin in the user config .env."""

    if not url.startswith(("http://", "https://")):
        raise typer.BadParameter("URL must start with http:// or https://")

    env_path = write_user_env_vars({"COFFEE_CLIENT_BASE_URL": url.rstrip("/")})
    _console.print(f"[green]Saved base URL to:[/green] {env_path}")
