"""
Queue-based rate limiter for outgoing BGG requests.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Optional, Tuple, TypeVar

from ..config import MIN_REQUEST_INTERVAL

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RateLimiter:
    """
    Runs queued operations one at a time, in FIFO order, with at least
    ``min_interval`` seconds between the start of consecutive operations.

    All state is private; ``throttle`` is the only entry point. The limiter
    must be used from a single event loop.
    """

    def __init__(self, min_interval: float = MIN_REQUEST_INTERVAL,
                 clock: Optional[Callable[[], float]] = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        """
        Initialize the rate limiter.

        Args:
            min_interval: Minimum seconds between dispatches
            clock: Monotonic clock in seconds (defaults to the event loop clock)
            sleep: Coroutine used to wait between dispatches
        """
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._queue: Deque[Tuple[Callable[[], Awaitable[Any]], asyncio.Future]] = deque()
        self._draining = False
        self._last_dispatch: Optional[float] = None
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        """Number of operations waiting to be dispatched."""
        return len(self._queue)

    async def throttle(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Queue an operation and wait for its result.

        Args:
            operation: Zero-argument coroutine function performing one request

        Returns:
            Whatever the operation returns

        Raises:
            Whatever the operation raises; other queued operations are unaffected
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._queue.append((operation, future))
        if not self._draining:
            self._draining = True
            self._drain_task = loop.create_task(self._drain())
        return await future

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    async def _drain(self) -> None:
        try:
            while self._queue:
                operation, future = self._queue.popleft()
                await self._wait_for_slot()
                self._last_dispatch = self._now()
                try:
                    result = await operation()
                except Exception as e:
                    # A cancelled caller's future is already done
                    if not future.done():
                        future.set_exception(e)
                else:
                    if not future.done():
                        future.set_result(result)
        finally:
            self._draining = False

    async def _wait_for_slot(self) -> None:
        if self._last_dispatch is None:
            return
        wait = self.min_interval - (self._now() - self._last_dispatch)
        if wait > 0:
            logger.debug(f"Rate limiting: waiting {wait:.2f}s before next request")
            await self._sleep(wait)
