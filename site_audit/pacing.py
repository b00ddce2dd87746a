# site_audit/pacing.py
"""
Pacing policies applied by the scheduler before each page after the first.
"""
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Protocol

from site_audit.config import AuditConfig

SleepFn = Callable[[float], Awaitable[None]]
ClockFn = Callable[[], float]


class Pacer(Protocol):
    def reset(self) -> None:
        ...

    async def wait(self) -> None:
        ...


class FixedDelayPacer:
    """Fixed pause between consecutive pages; the first call never waits."""

    def __init__(self, delay: float, sleep: SleepFn = asyncio.sleep) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self._sleep = sleep
        self._started = False

    def reset(self) -> None:
        """Start a new run: the next call does not wait."""
        self._started = False

    async def wait(self) -> None:
        if not self._started:
            self._started = True
            return
        if self.delay > 0:
            await self._sleep(self.delay)


class TokenBucketPacer:
    """Token bucket: bursts of ``capacity`` calls, refilled at ``rate`` per second."""

    def __init__(
        self,
        rate: float,
        capacity: float = 1.0,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be > 0")
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.rate = rate
        self.capacity = capacity
        self._sleep = sleep
        self._clock = clock
        self._tokens = capacity
        self._last = clock()

    def reset(self) -> None:
        """The bucket carries over between runs."""

    def _refill(self) -> None:
        now = self._clock()
        self._tokens = min(self.capacity, self._tokens + (now - self._last) * self.rate)
        self._last = now

    async def wait(self) -> None:
        self._refill()
        if self._tokens < 1:
            await self._sleep((1 - self._tokens) / self.rate)
            self._refill()
            # at least one token after the sleep
            self._tokens = max(self._tokens, 1.0)
        self._tokens -= 1


def build_pacer(config: AuditConfig) -> Pacer:
    if config.pacing == "token_bucket" and config.page_delay > 0:
        return TokenBucketPacer(rate=1.0 / config.page_delay)
    return FixedDelayPacer(config.page_delay)
