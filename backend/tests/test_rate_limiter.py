"""호출 한도 limiter 테스트."""
import asyncio

from integrations import base_client
from integrations.base_client import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestRateLimiter:
    def test_calls_within_limit_do_not_wait(self, monkeypatch):
        clock = FakeClock()
        limiter = RateLimiter(3, period=60, clock=clock)
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        monkeypatch.setattr(base_client.asyncio, "sleep", fake_sleep)

        async def burst():
            await asyncio.gather(limiter.acquire(), limiter.acquire(), limiter.acquire())

        asyncio.run(burst())

        assert sleeps == []
        assert limiter.remaining == 0

    def test_waits_until_oldest_call_expires(self, monkeypatch):
        clock = FakeClock()
        limiter = RateLimiter(2, period=60, clock=clock)
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)
            clock.now += seconds

        monkeypatch.setattr(base_client.asyncio, "sleep", fake_sleep)

        async def scenario():
            await limiter.acquire()
            clock.now += 10
            await limiter.acquire()
            await limiter.acquire()

        asyncio.run(scenario())

        assert sleeps == [50]
        assert limiter.remaining == 0

    def test_window_slides(self):
        clock = FakeClock()
        limiter = RateLimiter(2, period=60, clock=clock)

        asyncio.run(limiter.acquire())
        assert limiter.remaining == 1

        clock.now += 60
        assert limiter.remaining == 2
