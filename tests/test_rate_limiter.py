"""Tests for request pacing."""

import asyncio
import time

import pytest

from litmos_client.application.domain import RequestState
from litmos_client.infrastructure import rate_limiter
from litmos_client.infrastructure.rate_limiter import AsyncRateLimiter, wait_for_slot


class FakeClock:
    """A manually advanced clock whose sleeps move time forward."""

    def __init__(self, now: float = 100.0):
        self.now = now
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float):
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(rate_limiter.asyncio, "sleep", fake.sleep)
    return fake


class TestWaitForSlot:

    @pytest.mark.asyncio
    async def test_no_rate_returns_now_without_waiting(self, clock):
        assert await wait_for_slot(clock.now, None, clock=clock) == clock.now
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_first_request_does_not_wait(self, clock):
        assert await wait_for_slot(None, 60, clock=clock) == 100.0
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_waits_one_full_period(self, clock):
        result = await wait_for_slot(clock.now, 60, clock=clock)
        assert clock.sleeps == [pytest.approx(1.0)]
        assert result == pytest.approx(101.0)

    @pytest.mark.asyncio
    async def test_waits_remaining_half_period(self, clock):
        await wait_for_slot(clock.now - 0.5, 60, clock=clock)
        assert clock.sleeps == [pytest.approx(0.5)]

    @pytest.mark.asyncio
    async def test_no_wait_once_period_elapsed(self, clock):
        result = await wait_for_slot(clock.now - 1.0, 60, clock=clock)
        assert clock.sleeps == []
        assert result == clock.now

    @pytest.mark.asyncio
    async def test_returns_scheduled_slot_not_wake_time(self, clock, monkeypatch):
        async def oversleep(delay):
            clock.sleeps.append(delay)
            clock.now += delay + 0.2

        monkeypatch.setattr(rate_limiter.asyncio, "sleep", oversleep)
        result = await wait_for_slot(100.0, 60, clock=clock)
        assert result == pytest.approx(101.0)
        assert clock.now == pytest.approx(101.2)


class TestAsyncRateLimiter:

    @pytest.mark.asyncio
    async def test_back_to_back_calls_are_spaced(self, clock):
        state = RequestState()
        limiter = AsyncRateLimiter(state, rate_per_minute=60, clock=clock)

        await limiter.acquire()
        first = clock.now
        await limiter.acquire()
        second = clock.now

        assert second - first >= 1.0 - 0.01
        assert state.last_request_time == pytest.approx(101.0)

    @pytest.mark.asyncio
    async def test_cadence_does_not_drift(self, clock):
        limiter = AsyncRateLimiter(RequestState(), rate_per_minute=120, clock=clock)

        for _ in range(5):
            await limiter.acquire()

        assert clock.sleeps == [pytest.approx(0.5)] * 4
        assert clock.now == pytest.approx(102.0)

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_the_budget(self, clock):
        limiter = AsyncRateLimiter(RequestState(), rate_per_minute=60, clock=clock)
        dispatched = []

        async def call():
            await limiter.acquire()
            dispatched.append(clock.now)

        await asyncio.gather(call(), call(), call())

        assert dispatched == [pytest.approx(100.0), pytest.approx(101.0), pytest.approx(102.0)]

    @pytest.mark.asyncio
    async def test_unlimited_never_waits(self, clock):
        limiter = AsyncRateLimiter(RequestState(), rate_per_minute=None, clock=clock)
        for _ in range(3):
            await limiter.acquire()
        assert clock.sleeps == []


@pytest.mark.asyncio
async def test_real_clock_spacing():
    """Two back-to-back requests at 600/min are at least 100ms apart."""
    limiter = AsyncRateLimiter(RequestState(), rate_per_minute=600)

    await limiter.acquire()
    started = time.monotonic()
    await limiter.acquire()
    elapsed = time.monotonic() - started

    assert elapsed >= 0.1 - 0.01
    assert elapsed < 0.1 + 0.1
