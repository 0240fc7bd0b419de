"""Write-once rendezvous between the OAuth callback and the waiting request."""

import asyncio
import concurrent.futures
import logging
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OneShotHandoff(Generic[T]):
    """Single-producer/single-consumer slot that is filled at most once.

    Hey future me - the producer (callback handler) runs on the listener's own
    thread and event loop, the consumer awaits on the request loop. That's why
    this wraps a concurrent.futures.Future and not an asyncio one: set_result is
    thread-safe there, and asyncio.wrap_future bridges it into our loop.
    """

    def __init__(self) -> None:
        self._future: concurrent.futures.Future[T] = concurrent.futures.Future()

    @property
    def done(self) -> bool:
        """True once a value was delivered or the wait was abandoned."""
        return self._future.done()

    def deliver(self, value: T) -> bool:
        """Fill the slot. Returns False if it was already filled or abandoned."""
        try:
            self._future.set_result(value)
        except concurrent.futures.InvalidStateError:
            logger.warning("Handoff already completed, dropping late value")
            return False
        return True

    def fail(self, error: BaseException) -> bool:
        """Resolve the slot with an error the waiter re-raises.

        Returns False if the slot was already filled or abandoned.
        """
        try:
            self._future.set_exception(error)
        except concurrent.futures.InvalidStateError:
            return False
        return True

    def cancel(self) -> None:
        """Abandon the slot so later deliveries are dropped."""
        self._future.cancel()

    async def wait(self, timeout: float | None = None) -> T:
        """Suspend until the value arrives.

        Args:
            timeout: Seconds to wait, None waits forever

        Raises:
            TimeoutError: If nothing was delivered in time (the slot is abandoned)
            Exception: Whatever fail() resolved the slot with
        """
        try:
            return await asyncio.wait_for(asyncio.wrap_future(self._future), timeout)
        except TimeoutError:
            self.cancel()
            raise
