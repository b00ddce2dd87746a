# File: tests/test_pacing.py
import pytest

from site_audit.config import AuditConfig
from site_audit.pacing import FixedDelayPacer, TokenBucketPacer, build_pacer


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class ClockSleep:
    """Sleep that advances the fake clock instead of waiting."""

    def __init__(self, clock):
        self.clock = clock
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)
        self.clock.now += delay


@pytest.mark.asyncio()
async def test_fixed_delay_skips_first_wait():
    delays = []

    async def sleep(delay):
        delays.append(delay)

    pacer = FixedDelayPacer(1.0, sleep=sleep)
    for _ in range(3):
        await pacer.wait()
    assert delays == [1.0, 1.0]


@pytest.mark.asyncio()
async def test_fixed_delay_zero_never_sleeps():
    delays = []

    async def sleep(delay):
        delays.append(delay)

    pacer = FixedDelayPacer(0, sleep=sleep)
    for _ in range(3):
        await pacer.wait()
    assert delays == []


@pytest.mark.asyncio()
async def test_fixed_delay_reset_skips_next_wait():
    delays = []

    async def sleep(delay):
        delays.append(delay)

    pacer = FixedDelayPacer(1.0, sleep=sleep)
    await pacer.wait()
    await pacer.wait()
    pacer.reset()
    await pacer.wait()
    assert delays == [1.0]


def test_fixed_delay_rejects_negative():
    with pytest.raises(ValueError):
        FixedDelayPacer(-1)


@pytest.mark.asyncio()
async def test_token_bucket_rate():
    clock = FakeClock()
    sleep = ClockSleep(clock)
    pacer = TokenBucketPacer(rate=2.0, capacity=1, sleep=sleep, clock=clock)

    await pacer.wait()
    await pacer.wait()
    await pacer.wait()
    assert sleep.delays == [pytest.approx(0.5), pytest.approx(0.5)]


@pytest.mark.asyncio()
async def test_token_bucket_refills_while_idle():
    clock = FakeClock()
    sleep = ClockSleep(clock)
    pacer = TokenBucketPacer(rate=1.0, capacity=2, sleep=sleep, clock=clock)

    await pacer.wait()
    await pacer.wait()
    clock.now += 5
    await pacer.wait()
    await pacer.wait()
    assert sleep.delays == []


def test_build_pacer():
    assert isinstance(build_pacer(AuditConfig()), FixedDelayPacer)
    assert isinstance(build_pacer(AuditConfig(pacing="token_bucket", page_delay=0.5)), TokenBucketPacer)
    assert isinstance(build_pacer(AuditConfig(pacing="token_bucket", page_delay=0)), FixedDelayPacer)
