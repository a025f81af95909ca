"""Deduplication of concurrent identical async calls.

Concurrent callers of ``SingleFlight.do`` with the same key share one
underlying task. Each caller waits through ``asyncio.shield`` so cancelling
one caller does not cancel the shared work for the others; when the last
waiter goes away the shared task is cancelled too.

A group is bound to the event loop its tasks run on.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from typing import Generic
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Call(Generic[T]):
    task: asyncio.Task[T] | None = None
    waiters: int = 0


def _consume_result(task: asyncio.Task[Any]) -> None:
    # Mark the exception as retrieved when every waiter has already left
    if not task.cancelled():
        task.exception()


class SingleFlight(Generic[T]):
    """Keyed group of in-flight calls."""

    def __init__(self) -> None:
        self._calls: dict[str, _Call[T]] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` once per key among concurrent callers and share its result.

        Args:
            key: Deduplication key
            fn: Zero-argument coroutine factory, only called by the first caller

        Returns:
            The shared result; every concurrent caller sees the same object

        Raises:
            Whatever ``fn`` raises, to every waiter
        """
        call = self._calls.get(key)
        if call is None:
            call = _Call()
            self._calls[key] = call
            call.task = asyncio.ensure_future(self._run(key, call, fn))
            call.task.add_done_callback(_consume_result)
        else:
            logger.debug(f"Joining in-flight call: {key}")

        assert call.task is not None
        call.waiters += 1
        try:
            return await asyncio.shield(call.task)
        except asyncio.CancelledError:
            if call.waiters == 1 and not call.task.done():
                logger.debug(f"Last waiter cancelled, aborting call: {key}")
                call.task.cancel()
                # New callers must not join a task that is already cancelled
                if self._calls.get(key) is call:
                    del self._calls[key]
            raise
        finally:
            call.waiters -= 1

    async def _run(self, key: str, call: _Call[T], fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fn()
        finally:
            # Forget the call before the task completes so later callers start fresh
            if self._calls.get(key) is call:
                del self._calls[key]
