"""
Pacing primitives for sequential and concurrent requests.

A :data:`DelayPolicy` is awaited between the pages of one multi-page fetch.
:class:`TokenBucketRateLimiter` caps the request rate of a whole fetcher.
"""

import asyncio
import random
import time
from collections.abc import Awaitable, Callable

DelayPolicy = Callable[[int], Awaitable[None]]
"""Coroutine function called with the index of the page about to be fetched."""


class FixedDelay:
    """Waits a constant number of seconds before every follow-up page."""

    __slots__ = ("seconds",)

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds

    async def __call__(self, page_idx: int) -> None:
        if self.seconds > 0:
            await asyncio.sleep(self.seconds)

    def __repr__(self) -> str:
        return f"FixedDelay({self.seconds!r})"


async def no_delay(page_idx: int) -> None:
    """Delay policy that never waits."""
    return None


class TokenBucketRateLimiter:
    """An asyncio-compatible token bucket.

    Tokens refill at ``rate`` per second up to ``burst``. :meth:`wait`
    consumes one token, sleeping when the bucket is empty.

    Attributes:
        rate: Tokens added per second.
        capacity: Maximum number of tokens the bucket can hold.
        tokens: Current number of available tokens.
        timestamp: Last refill time.
        jitter_strength: Maximum absolute jitter added to a wait (± seconds).
    """

    __slots__ = (
        "rate",
        "capacity",
        "tokens",
        "timestamp",
        "lock",
        "jitter_strength",
    )

    def __init__(
        self,
        rate: float,
        burst: int = 10,
        jitter_strength: float = 0.3,
    ) -> None:
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate!r}")
        self.rate = rate
        self.capacity = burst
        self.tokens = float(burst)
        self.timestamp = time.monotonic()
        self.lock = asyncio.Lock()
        self.jitter_strength = jitter_strength

    def _refill(self) -> None:
        now = time.monotonic()
        self.tokens = min(self.capacity, self.tokens + (now - self.timestamp) * self.rate)
        self.timestamp = now

    async def wait(self) -> None:
        """Acquires a token, sleeping until one is available."""
        async with self.lock:
            self._refill()
            if self.tokens >= 1.0:
                self.tokens -= 1.0
                return

            shortfall = (1.0 - self.tokens) / self.rate
            jitter = random.uniform(-self.jitter_strength, self.jitter_strength)
            total_wait = max(0.0, shortfall + jitter)

        await asyncio.sleep(total_wait)

        async with self.lock:
            self._refill()
            self.tokens = max(0.0, self.tokens - 1.0)
