"""Backoff for transient provider failures.

This tier sits below the quality-gate retry ladder: a request retried here
never spends a quality retry. Only ``LLMError`` instances flagged
``retryable`` are retried; a rate limit's Retry-After acts as a floor on the
computed delay.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from condense.core.errors.llm import LLMError, RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SleepFunc(Protocol):
    def __call__(self, seconds: float) -> Awaitable[None]: ...


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings.

    Attributes:
        max_retries: Retries after the first attempt
        base_delay: Delay before the first retry, in seconds
        max_delay: Cap on any single delay
        exponential_base: Growth factor per retry
        jitter: Scale each delay by a random factor in [0.5, 1.5)
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    def delay_for(self, attempt: int, rng: random.Random, floor: Optional[float] = None) -> float:
        """Delay before retry number ``attempt + 1`` (``attempt`` is 0-based)."""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
        if self.jitter:
            delay *= 0.5 + rng.random()
        if floor is not None:
            delay = max(delay, min(floor, self.max_delay))
        return delay


async def retry_transient(
    func: Callable[[], Awaitable[T]],
    *,
    policy: Optional[RetryPolicy] = None,
    rng: Optional[random.Random] = None,
    sleep_func: Optional[SleepFunc] = None,
) -> T:
    """Call ``func`` until it succeeds or fails with a non-transient error.

    Args:
        func: Zero-argument coroutine factory, called once per attempt
        policy: Backoff settings (default: RetryPolicy())
        rng: Random source for jitter, injectable for determinism
        sleep_func: Async sleep, injectable for tests

    Raises:
        LLMError: The first non-retryable error, or the last transient one
            once retries run out
    """
    policy = policy or RetryPolicy()
    rng = rng or random.Random()
    sleep = sleep_func or asyncio.sleep

    attempt = 0
    while True:
        try:
            return await func()
        except LLMError as e:
            if not e.retryable or attempt >= policy.max_retries:
                raise
            floor = e.retry_after if isinstance(e, RateLimitError) else None
            delay = policy.delay_for(attempt, rng, floor)
            logger.warning(
                "Transient %s error (attempt %d/%d), retrying in %.2fs: %s",
                e.provider or "provider",
                attempt + 1,
                policy.max_retries + 1,
                delay,
                e,
            )
            await sleep(delay)
            attempt += 1
