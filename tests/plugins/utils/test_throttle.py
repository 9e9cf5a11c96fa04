import asyncio

import pytest

from novelsource.plugins.utils.throttle import (
    FixedDelay,
    TokenBucketRateLimiter,
    no_delay,
)


@pytest.fixture
def sleeps(monkeypatch):
    """Record asyncio.sleep calls instead of sleeping."""
    calls: list[float] = []

    async def fake_sleep(seconds):
        calls.append(seconds)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return calls


@pytest.mark.asyncio
async def test_fixed_delay_sleeps(sleeps):
    await FixedDelay(0.75)(2)
    assert sleeps == [0.75]


@pytest.mark.asyncio
@pytest.mark.parametrize("seconds", [0, 0.0, -1])
async def test_fixed_delay_zero_does_not_sleep(sleeps, seconds):
    await FixedDelay(seconds)(2)
    assert sleeps == []


@pytest.mark.asyncio
async def test_no_delay(sleeps):
    assert await no_delay(5) is None
    assert sleeps == []


def test_fixed_delay_repr():
    assert repr(FixedDelay(1.5)) == "FixedDelay(1.5)"


def test_rate_limiter_rejects_non_positive_rate():
    with pytest.raises(ValueError):
        TokenBucketRateLimiter(0)


@pytest.mark.asyncio
async def test_rate_limiter_burst_without_sleep(sleeps):
    limiter = TokenBucketRateLimiter(rate=1, burst=3)
    for _ in range(3):
        await limiter.wait()
    assert sleeps == []


@pytest.mark.asyncio
async def test_rate_limiter_sleeps_when_empty(sleeps):
    limiter = TokenBucketRateLimiter(rate=1, burst=1, jitter_strength=0)
    await limiter.wait()
    await limiter.wait()

    assert len(sleeps) == 1
    assert 0 < sleeps[0] <= 1.0
