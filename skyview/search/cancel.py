"""Cancellation token for cooperative asyncio operations."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from skyview.errors import RequestCancelled

T = TypeVar("T")


class CancelToken:
    """Signals that an in-flight operation has been superseded.

    Waits started through the token (``sleep``/``run``) abort with
    RequestCancelled as soon as ``cancel()`` is called.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelled()

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless cancelled first."""
        self.raise_if_cancelled()
        if seconds <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except TimeoutError:
            return
        raise RequestCancelled()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable``, cancelling it if the token fires first."""
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()
        if task.done():
            return task.result()
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise RequestCancelled()
