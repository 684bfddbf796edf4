import typing as tp
from unittest.mock import AsyncMock, MagicMock

import pytest

from fetch_cache import FetchCache

PROXY_BASE = "https://proxy.example/fetch?url="


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> FetchCache:
    fetch_cache = FetchCache(MagicMock(), proxy_base=PROXY_BASE, clock=clock)
    fetch_cache._request = AsyncMock()  # type: ignore[method-assign]
    return fetch_cache


@pytest.fixture
def fake_cache() -> MagicMock:
    """Stands in for FetchCache in reply and handler tests."""
    stub = MagicMock(spec=FetchCache)
    stub.fetch = AsyncMock()
    return stub


def search_payload(*rows: tp.Dict[str, tp.Any]) -> tp.Dict[str, tp.Any]:
    return {"page": 1, "results": list(rows), "total_results": len(rows)}
