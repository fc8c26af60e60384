"""
Pytest Configuration and Shared Fixtures

Fixtures:
    - settings: AppSettings isolated from .env files, pointing at a fake origin
    - codec: MoneyCodec with the default currency (TWD)
    - payload_factory: builds one wire object
    - coffee_payloads: wire objects served by the fake API
    - api_client: CoffeeApiClient over a shared httpx.AsyncClient (mock with respx)
"""

import pytest
import pytest_asyncio

from adapters.coffee_api import CoffeeApiClient
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.money import MoneyCodec

BASE_URL = "http://testserver"


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, base_url=BASE_URL, http_timeout_seconds=5)


@pytest.fixture
def codec() -> MoneyCodec:
    return MoneyCodec("TWD")


def make_payload(coffee_id: int, name: str, price) -> dict:
    return {
        "id": coffee_id,
        "name": name,
        "price": price,
        "createTime": "2024-05-01T10:00:00",
        "updateTime": "2024-05-01T10:00:00",
    }


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def coffee_payloads() -> list[dict]:
    return [
        make_payload(1, "espresso", 100.00),
        make_payload(2, "latte", 125.00),
        make_payload(3, "capuccino", 125.00),
        make_payload(4, "mocha", 150.00),
        make_payload(5, "macchiato", 150.00),
    ]


@pytest_asyncio.fixture
async def api_client(settings, codec):
    client = build_async_client(settings)
    api = CoffeeApiClient(client=client, codec=codec, settings=settings)
    try:
        yield api
    finally:
        await client.aclose()

