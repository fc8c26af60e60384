"""Coffee flow orchestration.

Fetch one coffee and create another concurrently, wait on a join barrier
until both have reached a terminal state, then list every coffee and process
the list in order on the orchestrating coroutine.

Fetch/create failures are isolated: they are reported through hooks and
collected in the result. A list failure propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from core.domain.models import Coffee
from core.errors import CoffeeClientError
from core.interfaces.coffee_gateway import CoffeeGateway
from core.services.join_barrier import JoinBarrier
from core.services.tracked_operation import launch_tracked

logger = logging.getLogger(__name__)

TRACKED_OPERATIONS = 2


@dataclass(frozen=True)
class CoffeeFlowRequest:
    """Parameters that control the flow."""

    coffee_id: int
    new_coffee: Coffee


@dataclass
class FlowHooks:
    """Optional callbacks for UI layers.

    `fetched`, `created` and `failed` run inside the operation tasks;
    `list_item` runs on the orchestrating coroutine, once per element, in order.
    """

    fetched: Callable[[Coffee], None] | None = None
    created: Callable[[Coffee], None] | None = None
    failed: Callable[[str, CoffeeClientError], None] | None = None
    list_item: Callable[[Coffee], None] | None = None


@dataclass
class CoffeeFlowResult:
    """Output of a flow invocation."""

    fetched: Coffee | None = None
    created: Coffee | None = None
    listed: list[Coffee] = field(default_factory=list)
    errors: dict[str, CoffeeClientError] = field(default_factory=dict)


async def run_coffee_flow(
    *,
    gateway: CoffeeGateway,
    request: CoffeeFlowRequest,
    hooks: FlowHooks | None = None,
) -> CoffeeFlowResult:
    hooks = hooks or FlowHooks()
    result = CoffeeFlowResult()
    barrier = JoinBarrier(TRACKED_OPERATIONS)

    def on_fetched(coffee: Coffee) -> None:
        result.fetched = coffee
        logger.info("Coffee %s: %s", request.coffee_id, coffee)
        if hooks.fetched:
            hooks.fetched(coffee)

    def on_created(coffee: Coffee) -> None:
        result.created = coffee
        logger.info("Coffee Created: %s", coffee)
        if hooks.created:
            hooks.created(coffee)

    def error_handler(operation: str) -> Callable[[CoffeeClientError], None]:
        def on_error(exc: CoffeeClientError) -> None:
            result.errors[operation] = exc
            logger.error("Error in %s: %s", operation, exc)
            if hooks.failed:
                hooks.failed(operation, exc)

        return on_error

    # References keep the tasks alive until the barrier releases.
    tasks = [
        launch_tracked(
            gateway.get_coffee(request.coffee_id),
            barrier=barrier,
            on_success=on_fetched,
            on_error=error_handler("fetch"),
            name="fetch",
        ),
        launch_tracked(
            gateway.create_coffee(request.new_coffee),
            barrier=barrier,
            on_success=on_created,
            on_error=error_handler("create"),
            name="create",
        ),
    ]

    await barrier.wait()
    logger.debug("Barrier released after %d operations", len(tasks))

    coffees = await gateway.list_coffees()
    for coffee in coffees:
        logger.info("Coffee in List: %s", coffee)
        if hooks.list_item:
            hooks.list_item(coffee)
    result.listed = coffees
    return result
