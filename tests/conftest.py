import asyncio
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

from bgg_aggregator.api import BGGApiClient, RateLimiter

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeClock:
    """Monotonic clock whose sleep advances time instead of waiting."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_client(clock: FakeClock):
    """Build a BGGApiClient backed by an httpx MockTransport handler."""
    clients = []

    def factory(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> BGGApiClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http_client)
        limiter = RateLimiter(clock=clock, sleep=clock.sleep)
        return BGGApiClient(
            base_url="https://bgg.test/xmlapi2",
            rate_limiter=limiter,
            http_client=http_client,
            sleep=clock.sleep,
            **kwargs,
        )

    return factory
