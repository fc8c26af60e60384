"""Launch an async operation whose outcome is reported through callbacks.

The launched task never raises into the orchestrator: client errors go to the
error callback (or the log), and the join barrier is released exactly once,
from the task's done-callback, whatever the terminal state was (including a
cancellation that lands before the task ever ran).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from core.errors import CoffeeClientError
from core.services.join_barrier import JoinBarrier

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorCallback = Callable[[CoffeeClientError], None]


def launch_tracked(
    operation: Awaitable[T],
    *,
    barrier: JoinBarrier,
    on_success: Callable[[T], None],
    on_error: ErrorCallback | None = None,
    name: str | None = None,
) -> asyncio.Task[None]:
    """Schedule `operation` as a task and return without waiting for it.

    Must be called from a running event loop.
    """

    label = name or "operation"

    async def runner() -> None:
        try:
            result = await operation
        except CoffeeClientError as exc:
            if on_error is None:
                logger.warning("%s failed: %s", label, exc)
                return
            _invoke(on_error, exc, label=label)
            return
        _invoke(on_success, result, label=label)

    def finished(task: asyncio.Task[None]) -> None:
        try:
            if not task.cancelled() and task.exception() is not None:
                logger.error("%s crashed", label, exc_info=task.exception())
        finally:
            barrier.arrive()

    task = asyncio.create_task(runner(), name=name)
    task.add_done_callback(finished)
    return task


def _invoke(callback: Callable[[T], None], value: T, *, label: str) -> None:
    try:
        callback(value)
    except Exception:
        logger.exception("%s callback raised", label)
