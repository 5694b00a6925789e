"""Cancellation Token - advisory stop signal passed from transport to handler.

Invariants:
    - Once cancelled, a token stays cancelled
    - run() never leaves the handler task running after it returns or raises

Design Decisions:
    - asyncio.Event over a bare flag: handlers can await it, and run() can race
      the handler coroutine against it without polling
"""

import asyncio
from typing import Any, Awaitable

from app.core.errors import RequestCancelledError


class CancellationToken:
    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelledError()

    async def run(self, awaitable: Awaitable[Any]) -> Any:
        """Await awaitable unless the token fires first.

        On cancellation the handler task is cancelled at its next await and
        RequestCancelledError is raised.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelledError()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter}, return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if task in done:
            return task.result()
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise RequestCancelledError()
