"""Tests for autosuggestions, the debouncer and trending keywords."""

import asyncio

import pytest

from cinesearch.core.suggestions import Debouncer, SuggestionState
from cinesearch.shared.constants import StorageKeys, SuggestionConfig
from cinesearch.shared.errors import CatalogNetworkError, ErrorCode

HISTORY = ["batman begins", "the batman", "robin hood"]


@pytest.fixture
def stocked_engine(suggestion_engine, cache, fake_catalog, make_record):
    cache.upsert_all(
        [make_record("tt1", "Batman Returns", year="1992"), make_record("tt2", "Battleship")]
    )
    fake_catalog.trending = ["Bat Out of Hell", "Dune"]
    return suggestion_engine


class TestCompute:
    """Staged suggestion ranking."""

    @pytest.mark.asyncio
    async def test_stages_in_priority_order(self, stocked_engine):
        """Test history prefix, history partial, titles, then trending."""
        await stocked_engine.initialize()

        suggestions = stocked_engine.compute("bat", HISTORY)

        assert suggestions == [
            "batman begins",
            "the batman",
            "Batman Returns",
            "Battleship",
            "Bat Out of Hell",
        ]

    @pytest.mark.asyncio
    async def test_matching_ignores_case(self, stocked_engine):
        """Test upper-case input matches lower-case history."""
        await stocked_engine.initialize()

        suggestions = stocked_engine.compute("  BAT ", HISTORY)

        assert suggestions[:2] == ["batman begins", "the batman"]

    @pytest.mark.asyncio
    async def test_empty_input_offers_recent_and_trending(self, stocked_engine):
        """Test recent searches come first, followed by trending keywords."""
        await stocked_engine.initialize()
        history = ["dune", "alien", "heat", "ronin"]

        suggestions = stocked_engine.compute("", history)

        assert suggestions == ["dune", "alien", "heat", "Bat Out of Hell", "Dune"]

    @pytest.mark.asyncio
    async def test_empty_input_is_capped(self, suggestion_engine, fake_catalog):
        """Test the combined list never exceeds the suggestion cap."""
        fake_catalog.trending = [f"trend {n}" for n in range(10)]
        await suggestion_engine.initialize()

        suggestions = suggestion_engine.compute("", [f"query {n}" for n in range(10)])

        assert len(suggestions) == SuggestionConfig.MAX_RECENT_SEARCHES + 5
        assert len(suggestions) <= SuggestionConfig.MAX_SUGGESTIONS
        assert suggestions[:3] == ["query 0", "query 1", "query 2"]

    def test_no_duplicates_across_stages(self, suggestion_engine, cache, make_record):
        """Test a cached title equal to a history entry appears once."""
        cache.upsert_all([make_record("tt1", "heat")])

        suggestions = suggestion_engine.compute("heat", ["heat"])

        assert suggestions == ["heat"]

    def test_title_index_follows_cache(self, suggestion_engine, cache, make_record):
        """Test titles cached after the first computation are suggested."""
        assert suggestion_engine.compute("dune", []) == []

        cache.upsert_all([make_record("tt1", "Dune")])

        assert suggestion_engine.compute("dune", []) == ["Dune"]


class TestDebounce:
    """Debounced publishing."""

    @pytest.mark.asyncio
    async def test_only_last_input_is_published(self, stocked_engine):
        """Test rapid inputs publish a single result for the last one."""
        published: list[SuggestionState] = []
        stocked_engine.add_listener(published.append)

        t1 = stocked_engine.generate("b", HISTORY)
        t2 = stocked_engine.generate("ba", HISTORY)
        t3 = stocked_engine.generate("robin", HISTORY)
        await asyncio.gather(t1, t2, t3, return_exceptions=True)

        assert t1.cancelled()
        assert t2.cancelled()
        assert len(published) == 1
        assert published[0].suggestions[0] == "robin hood"
        assert stocked_engine.suggestions == published[0].suggestions

    @pytest.mark.asyncio
    async def test_close_cancels_pending(self, stocked_engine):
        """Test closing drops a pending computation."""
        published: list[SuggestionState] = []
        stocked_engine.add_listener(published.append)

        task = stocked_engine.generate("bat", HISTORY)
        stocked_engine.close()
        await asyncio.sleep(0.05)

        assert task.cancelled()
        assert published == []

    @pytest.mark.asyncio
    async def test_debouncer_awaits_coroutine_callbacks(self):
        """Test async callbacks run to completion."""
        debouncer = Debouncer(0.0)
        calls: list[str] = []

        async def callback():
            calls.append("ran")

        task = debouncer.trigger(callback)
        assert debouncer.pending
        await task

        assert calls == ["ran"]
        assert not debouncer.pending


class TestTrendingKeywords:
    """TrendingKeywordProvider caching and fallback."""

    @pytest.mark.asyncio
    async def test_fetch_is_cached(self, trending_provider, fake_catalog, store):
        """Test a successful fetch is stored and reused while fresh."""
        fake_catalog.trending = ["Dune", "Oppenheimer"]

        first = await trending_provider.get_keywords()
        second = await trending_provider.get_keywords()

        assert first == second == ["Dune", "Oppenheimer"]
        assert fake_catalog.trending_calls == 1
        assert store.get(StorageKeys.TRENDING_KEYWORDS) is not None
        assert store.get(StorageKeys.TRENDING_KEYWORDS_TIME) is not None

    @pytest.mark.asyncio
    async def test_stale_cache_is_refetched(self, trending_provider, fake_catalog, clock):
        """Test keywords older than the freshness window are fetched again."""
        fake_catalog.trending = ["Dune"]
        await trending_provider.get_keywords()

        clock.advance(61)
        fake_catalog.trending = ["Alien"]

        assert await trending_provider.get_keywords() == ["Alien"]
        assert fake_catalog.trending_calls == 2

    @pytest.mark.parametrize(
        "error",
        [CatalogNetworkError(ErrorCode.NETWORK_ERROR, "offline"), RuntimeError("boom")],
    )
    @pytest.mark.asyncio
    async def test_failure_returns_fallback(self, trending_provider, fake_catalog, store, error):
        """Test a failing fetch yields the fallback list and caches nothing."""
        fake_catalog.trending_error = error

        keywords = await trending_provider.get_keywords()

        assert keywords == list(SuggestionConfig.FALLBACK_TRENDING_KEYWORDS)
        assert store.get(StorageKeys.TRENDING_KEYWORDS) is None

    @pytest.mark.asyncio
    async def test_empty_result_returns_fallback(self, trending_provider, fake_catalog):
        """Test an empty remote list yields the fallback list."""
        fake_catalog.trending = []

        keywords = await trending_provider.get_keywords()

        assert keywords == list(SuggestionConfig.FALLBACK_TRENDING_KEYWORDS)

    @pytest.mark.asyncio
    async def test_engine_initialize_publishes_keywords(self, suggestion_engine, fake_catalog):
        """Test the engine exposes trending keywords after initialize."""
        fake_catalog.trending = ["Dune"]

        await suggestion_engine.initialize()

        assert suggestion_engine.trending_keywords == ("Dune",)
