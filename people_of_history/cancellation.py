"""Cancellation tokens scoped to a single tree node or search request."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from people_of_history.errors import Cancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """A one-shot flag that aborts the awaits guarded by it.

    Once fired a token stays fired; owners create a fresh token for every new
    request instead of resetting an old one.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Fire the token. Firing twice is harmless."""
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled("Operation cancelled")

    async def run(self, awaitable: Awaitable[T], cancel_inner: bool = True) -> T:
        """Await ``awaitable`` unless the token fires first.

        Args:
            awaitable: Coroutine or future to wait for
            cancel_inner: Cancel the awaitable when the token fires. Pass False
                for futures shared with other waiters.

        Returns:
            The awaitable's result

        Raises:
            Cancelled: If the token fired before the awaitable completed
        """
        if self.cancelled:
            if cancel_inner and asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise Cancelled("Operation cancelled")

        task = asyncio.ensure_future(awaitable if cancel_inner else asyncio.shield(awaitable))
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if self.cancelled:
            if task.done() and not task.cancelled():
                # Mark any exception as retrieved; the result is discarded.
                task.exception()
            task.cancel()
            logger.debug("Token fired before the awaited operation completed")
            raise Cancelled("Operation cancelled")

        return task.result()

    async def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, waking early with Cancelled if fired."""
        await self.run(asyncio.sleep(delay))
