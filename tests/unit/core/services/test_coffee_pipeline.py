"""
Tests for run_coffee_flow.

Covers:
- Example scenario end to end over respx (fetch, create, barrier, list)
- Failure isolation between fetch and create
- Barrier release strictly precedes the list request
- List failures propagate
- list_item hook runs in server order
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx
from httpx import Response

from core.domain.models import Coffee
from core.domain.money import Money
from core.errors import DecodeError, FormatError, ResponseStatusError, TransportError
from core.services.coffee_pipeline import CoffeeFlowRequest, FlowHooks, run_coffee_flow


def _americano() -> Coffee:
    return Coffee(name="americano", price=Money.of("TWD", 125.00))


class FakeGateway:
    """In-memory gateway that records call order."""

    def __init__(self, *, fetch_error=None, create_error=None, list_error=None, delay=0.0):
        self.events: list[str] = []
        self.fetch_error = fetch_error
        self.create_error = create_error
        self.list_error = list_error
        self.delay = delay
        self.store = [Coffee(id=1, name="espresso", price=Money.of("TWD", 100))]

    async def get_coffee(self, coffee_id: int) -> Coffee:
        self.events.append("fetch:start")
        await asyncio.sleep(self.delay)
        self.events.append("fetch:end")
        if self.fetch_error:
            raise self.fetch_error
        return next(c for c in self.store if c.id == coffee_id)

    async def create_coffee(self, coffee: Coffee) -> Coffee:
        self.events.append("create:start")
        await asyncio.sleep(self.delay)
        self.events.append("create:end")
        if self.create_error:
            raise self.create_error
        created = coffee.model_copy(update={"id": len(self.store) + 1})
        self.store.append(created)
        return created

    async def list_coffees(self) -> list[Coffee]:
        self.events.append("list")
        if self.list_error:
            raise self.list_error
        return list(self.store)


@pytest.mark.asyncio()
@respx.mock
async def test_example_scenario(api_client, coffee_payloads, payload_factory):
    respx.get("http://testserver/coffee/1").mock(return_value=Response(200, json=coffee_payloads[0]))
    respx.post("http://testserver/coffee/").mock(
        return_value=Response(200, json=payload_factory(6, "americano", 125.00))
    )
    respx.get("http://testserver/coffee/").mock(
        return_value=Response(200, json=[*coffee_payloads, payload_factory(6, "americano", 125.00)])
    )

    result = await run_coffee_flow(
        gateway=api_client,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
    )

    assert result.fetched is not None and result.fetched.name == "espresso"
    assert result.fetched.price == Money.of("TWD", "100.00")
    assert result.created is not None and result.created.id == 6
    assert len(result.listed) == 6
    assert any(c.name == "americano" and c.price.amount == 125 for c in result.listed)
    assert result.errors == {}


@pytest.mark.asyncio()
@respx.mock
async def test_fetch_404_does_not_stop_create(api_client, coffee_payloads, payload_factory):
    respx.get("http://testserver/coffee/1").mock(return_value=Response(404))
    respx.post("http://testserver/coffee/").mock(
        return_value=Response(200, json=payload_factory(6, "americano", 125.00))
    )
    respx.get("http://testserver/coffee/").mock(return_value=Response(200, json=coffee_payloads))
    created = []
    failures = []

    result = await run_coffee_flow(
        gateway=api_client,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
        hooks=FlowHooks(created=created.append, failed=lambda op, exc: failures.append(op)),
    )

    assert result.fetched is None
    assert isinstance(result.errors["fetch"], ResponseStatusError)
    assert failures == ["fetch"]
    assert [c.id for c in created] == [6]
    assert len(result.listed) == 5


@pytest.mark.asyncio()
async def test_both_operations_fail_and_flow_continues():
    gateway = FakeGateway(fetch_error=TransportError("refused"), create_error=DecodeError("bad body"))

    result = await run_coffee_flow(
        gateway=gateway,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
    )

    assert set(result.errors) == {"fetch", "create"}
    assert [c.name for c in result.listed] == ["espresso"]


@pytest.mark.asyncio()
async def test_list_starts_after_both_operations_finish():
    gateway = FakeGateway(delay=0.05)

    await run_coffee_flow(
        gateway=gateway,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
    )

    assert gateway.events[-1] == "list"
    assert gateway.events.count("list") == 1
    assert {"fetch:end", "create:end"} <= set(gateway.events[:-1])


@pytest.mark.asyncio()
async def test_operations_run_concurrently():
    gateway = FakeGateway(delay=0.05)

    await run_coffee_flow(
        gateway=gateway,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
    )

    # Both started before either finished.
    first_end = min(gateway.events.index("fetch:end"), gateway.events.index("create:end"))
    assert {"fetch:start", "create:start"} <= set(gateway.events[:first_end])


@pytest.mark.asyncio()
async def test_list_failure_propagates():
    gateway = FakeGateway(list_error=TransportError("refused"))

    with pytest.raises(TransportError):
        await run_coffee_flow(
            gateway=gateway,
            request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
        )


@pytest.mark.asyncio()
async def test_list_items_processed_in_order():
    gateway = FakeGateway()
    seen = []

    result = await run_coffee_flow(
        gateway=gateway,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
        hooks=FlowHooks(list_item=lambda c: seen.append(c.id)),
    )

    assert seen == [c.id for c in result.listed] == [1, 2]


@pytest.mark.asyncio()
async def test_operation_hooks_run_inside_operation_tasks():
    gateway = FakeGateway(create_error=DecodeError("bad body"))
    orchestrator = asyncio.current_task()
    contexts: dict[str, asyncio.Task] = {}

    def record(key):
        return lambda *_args: contexts.setdefault(key, asyncio.current_task())

    await run_coffee_flow(
        gateway=gateway,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
        hooks=FlowHooks(fetched=record("fetched"), failed=record("failed"), list_item=record("list_item")),
    )

    assert contexts["fetched"].get_name() == "fetch"
    assert contexts["failed"].get_name() == "create"
    assert contexts["fetched"] is not orchestrator
    assert contexts["list_item"] is orchestrator


@pytest.mark.asyncio()
@pytest.mark.parametrize("error", [DecodeError("not an array"), FormatError("price 'free'")])
async def test_list_decode_failures_propagate(error):
    gateway = FakeGateway(list_error=error)

    with pytest.raises(type(error)):
        await run_coffee_flow(
            gateway=gateway,
            request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
        )


@pytest.mark.asyncio()
@respx.mock
async def test_httpx_request_errors_reach_error_hooks(api_client, coffee_payloads):
    respx.get("http://testserver/coffee/1").mock(
        side_effect=httpx.TooManyRedirects("loop", request=httpx.Request("GET", "http://testserver/coffee/1"))
    )
    respx.post("http://testserver/coffee/").mock(
        side_effect=httpx.DecodingError("bad gzip", request=httpx.Request("POST", "http://testserver/coffee/"))
    )
    respx.get("http://testserver/coffee/").mock(return_value=Response(200, json=coffee_payloads))
    failures = []

    result = await run_coffee_flow(
        gateway=api_client,
        request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
        hooks=FlowHooks(failed=lambda op, exc: failures.append(op)),
    )

    assert isinstance(result.errors["fetch"], TransportError)
    assert isinstance(result.errors["create"], TransportError)
    assert sorted(failures) == ["create", "fetch"]
    assert len(result.listed) == 5


@pytest.mark.asyncio()
@respx.mock
async def test_list_request_error_propagates_as_transport_error(api_client, coffee_payloads, payload_factory):
    respx.get("http://testserver/coffee/1").mock(return_value=Response(200, json=coffee_payloads[0]))
    respx.post("http://testserver/coffee/").mock(
        return_value=Response(200, json=payload_factory(6, "americano", 125.00))
    )
    respx.get("http://testserver/coffee/").mock(
        side_effect=httpx.DecodingError("bad gzip", request=httpx.Request("GET", "http://testserver/coffee/"))
    )

    with pytest.raises(TransportError):
        await run_coffee_flow(
            gateway=api_client,
            request=CoffeeFlowRequest(coffee_id=1, new_coffee=_americano()),
        )
