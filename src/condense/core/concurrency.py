"""
Bounded, order-preserving fan-out for chunk summarization.

Each compression pass sends every chunk to the LLM at once, up to a
concurrency cap. Results are returned by chunk index rather than completion
order. The first failure cancels the siblings that are still running and is
re-raised to the caller once they have unwound.

Example:
    limiter = ConcurrencyLimiter(max_concurrent=16, name="chunks")
    outcome = await limiter.gather([summarize(c) for c in chunks])
    outcome.results  # aligned with chunks
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Coroutine, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FanOutStats:
    """Counters for one gather call."""

    submitted: int = 0
    completed: int = 0
    cancelled: int = 0
    peak_in_flight: int = 0
    elapsed_seconds: float = 0.0


@dataclass
class GatherResult(Generic[T]):
    """Ordered results of a successful gather."""

    results: list[T] = field(default_factory=list)
    stats: FanOutStats = field(default_factory=FanOutStats)


class ConcurrencyLimiter:
    """Semaphore-bounded gather with fail-fast cancellation.

    Attributes:
        max_concurrent: Upper bound on operations in flight
        name: Label used in log lines
        timeout: Optional per-operation timeout in seconds
    """

    def __init__(
        self,
        max_concurrent: int = 10,
        *,
        name: str = "",
        timeout: Optional[float] = None,
    ):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent
        self.name = name or "<unnamed>"
        self.timeout = timeout
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    async def run(self, coro: Coroutine[Any, Any, T], *, stats: Optional[FanOutStats] = None) -> T:
        """Run one coroutine inside a concurrency slot.

        Raises:
            asyncio.TimeoutError: If the limiter has a timeout and it elapses
        """
        try:
            await self._semaphore.acquire()
        except asyncio.CancelledError:
            coro.close()
            raise
        try:
            self._in_flight += 1
            if stats is not None:
                stats.peak_in_flight = max(stats.peak_in_flight, self._in_flight)
            if self.timeout is not None:
                return await asyncio.wait_for(coro, timeout=self.timeout)
            return await coro
        finally:
            self._in_flight -= 1
            self._semaphore.release()

    async def gather(self, coros: list[Coroutine[Any, Any, T]]) -> GatherResult[T]:
        """Run all coroutines, at most ``max_concurrent`` at a time.

        An operation that cancels itself counts as a failure; only
        cancellation of the caller is re-raised as ``CancelledError``.

        Returns:
            GatherResult whose ``results`` line up with ``coros``

        Raises:
            Exception: The first failure, after every sibling is cancelled
        """
        start = time.monotonic()
        stats = FanOutStats(submitted=len(coros))
        if not coros:
            return GatherResult(results=[], stats=stats)

        tasks = [asyncio.create_task(self.run(coro, stats=stats)) for coro in coros]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            # Caller was cancelled; take the whole batch down with it.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        error = _first_failure(tasks)
        if error is not None:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.wait(pending)
            stats.cancelled = len(pending)
            stats.elapsed_seconds = time.monotonic() - start
            logger.debug(
                "Limiter %s cancelled %d operations after a failure: %s",
                self.name,
                len(pending),
                error,
            )
            raise error

        stats.completed = len(tasks)
        stats.elapsed_seconds = time.monotonic() - start
        return GatherResult(results=[task.result() for task in tasks], stats=stats)


def _first_failure(tasks: list[asyncio.Task]) -> Optional[BaseException]:
    """First raised exception by submission order, else a self-cancelled operation."""
    for task in tasks:
        if task.done() and not task.cancelled() and task.exception() is not None:
            return task.exception()
    for index, task in enumerate(tasks):
        if task.cancelled():
            return RuntimeError(f"Operation {index} was cancelled before completing")
    return None
