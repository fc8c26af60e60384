"""Join barrier: suspend until N operations have reached a terminal state.

Each tracked operation calls `arrive()` exactly once (success, failure or
cancellation). The orchestrator awaits `wait()` once, after launching every
tracked operation and before starting dependent work.

`arrive()` is a plain method so it can run from `finally` blocks, task
done-callbacks or foreign threads. The counter is guarded by a lock and the
release is handed to the waiter's event loop with `call_soon_threadsafe`.

There is no timeout: an operation that never terminates keeps `wait()`
suspended forever.
"""

from __future__ import annotations

import asyncio
import threading


class BarrierError(RuntimeError):
    """`arrive()` was called more times than the barrier was sized for."""


class JoinBarrier:
    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        self._count = count
        self._lock = threading.Lock()
        self._waiters: list[tuple[asyncio.AbstractEventLoop, asyncio.Future[None]]] = []

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._count

    @property
    def released(self) -> bool:
        return self.remaining == 0

    def arrive(self) -> None:
        """Decrement the counter; release waiters when it reaches zero."""

        with self._lock:
            if self._count == 0:
                raise BarrierError("arrive() called on a released barrier")
            self._count -= 1
            if self._count:
                return
            waiters, self._waiters = self._waiters, []

        for loop, future in waiters:
            if loop.is_closed():
                continue
            loop.call_soon_threadsafe(_resolve, future)

    async def wait(self) -> None:
        """Suspend until every tracked operation has arrived."""

        loop = asyncio.get_running_loop()
        with self._lock:
            if self._count == 0:
                return
            future: asyncio.Future[None] = loop.create_future()
            self._waiters.append((loop, future))
        await future


def _resolve(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)
