"""
Pytest configuration and shared fixtures for CineSearch tests.

Provides an in-memory key-value store, a controllable clock, a scriptable
catalog source and factories for the core components.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from cinesearch.config.models import SearchSettings, SuggestionSettings
from cinesearch.core.search import CancellationToken, SearchOrchestrator
from cinesearch.core.suggestions import SuggestionEngine, TrendingKeywordProvider
from cinesearch.services import DailyQuotaRateLimiter, HistoryStore, ResultCache
from cinesearch.shared.models import RemotePage
from cinesearch.storage import InMemoryKeyValueStore


class FakeClock:
    """Manually advanced clock returning Unix seconds."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCatalog:
    """Scriptable CatalogSource.

    ``pages`` maps a query to the RemotePage returned for it, or to a list
    of pages indexed by page number. ``errors`` maps a query to an exception
    raised instead and ``gates`` holds events a search waits on before
    answering.
    """

    def __init__(self) -> None:
        self.pages: dict[str, RemotePage | list[RemotePage]] = {}
        self.errors: dict[str, BaseException] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, str, int]] = []
        self.trending: list[str] = []
        self.trending_error: BaseException | None = None
        self.trending_calls = 0

    async def search(
        self,
        query: str,
        filter_type: str,
        page: int,
        token: CancellationToken,
    ) -> RemotePage:
        self.calls.append((query, filter_type, page))
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if query in self.errors:
            raise self.errors[query]
        response = self.pages.get(query, RemotePage())
        if isinstance(response, list):
            return response[page - 1] if page <= len(response) else RemotePage()
        return response

    async def fetch_trending(self) -> list[str]:
        self.trending_calls += 1
        if self.trending_error is not None:
            raise self.trending_error
        return list(self.trending)


def record(
    item_id: str,
    title: str,
    year: str = "2010",
    type_: str = "movie",
    genre: str = "",
    poster: str = "N/A",
) -> dict[str, Any]:
    return {
        "imdbID": item_id,
        "Title": title,
        "Year": year,
        "Type": type_,
        "Genre": genre,
        "Poster": poster,
    }


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    return record


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def cache(store: InMemoryKeyValueStore) -> ResultCache:
    return ResultCache(store, max_size=50)


@pytest.fixture
def rate_limiter(store: InMemoryKeyValueStore, clock: FakeClock) -> DailyQuotaRateLimiter:
    return DailyQuotaRateLimiter(store, max_calls=5, window_seconds=100, clock=clock)


@pytest.fixture
def history(store: InMemoryKeyValueStore) -> HistoryStore:
    return HistoryStore(store, max_size=5)


@pytest.fixture
def orchestrator(
    fake_catalog: FakeCatalog,
    cache: ResultCache,
    rate_limiter: DailyQuotaRateLimiter,
) -> SearchOrchestrator:
    return SearchOrchestrator(
        fake_catalog,
        cache,
        rate_limiter,
        settings=SearchSettings(),
    )


@pytest.fixture
def trending_provider(
    fake_catalog: FakeCatalog,
    store: InMemoryKeyValueStore,
    clock: FakeClock,
) -> TrendingKeywordProvider:
    return TrendingKeywordProvider(fake_catalog, store, freshness_seconds=60, clock=clock)


@pytest.fixture
def suggestion_engine(
    cache: ResultCache,
    trending_provider: TrendingKeywordProvider,
) -> SuggestionEngine:
    return SuggestionEngine(
        cache,
        trending_provider,
        settings=SuggestionSettings(debounce_seconds=0.01),
    )
