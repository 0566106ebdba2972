"""Dependency Injection container for CineSearch.

The container manages:
- Settings (Singleton)
- The key-value store backing every persisted component
- Rate limiter, result cache and history store
- The TMDB catalog source and the analytics sink
- The search orchestrator and the suggestion engine
"""

from __future__ import annotations

from dependency_injector import containers, providers

from cinesearch.config.loader import load_settings
from cinesearch.core.matching import FuzzyIndex
from cinesearch.core.search import SearchOrchestrator
from cinesearch.core.suggestions import SuggestionEngine, TrendingKeywordProvider
from cinesearch.services import (
    DailyQuotaRateLimiter,
    HistoryStore,
    LoggingAnalyticsSink,
    ResultCache,
)
from cinesearch.services.tmdb import TMDBCatalogSource
from cinesearch.storage import JsonFileKeyValueStore


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for CineSearch services.

    Persisted components are singletons so that the orchestrator, the
    suggestion engine and the CLI share one cache and one quota.

    Example:
        >>> container = Container()
        >>> orchestrator = container.search_orchestrator()
        >>> await orchestrator.initialize()
        >>> state = await orchestrator.search("inception")
    """

    config = providers.Singleton(load_settings)

    kv_store = providers.Singleton(
        JsonFileKeyValueStore,
        directory=providers.Callable(lambda config: config.storage.data_dir, config=config),
    )

    rate_limiter = providers.Singleton(
        DailyQuotaRateLimiter,
        store=kv_store,
        max_calls=providers.Callable(
            lambda config: config.rate_limit.max_calls_per_window,
            config=config,
        ),
        window_seconds=providers.Callable(
            lambda config: config.rate_limit.window_seconds,
            config=config,
        ),
    )

    result_cache = providers.Singleton(
        ResultCache,
        store=kv_store,
        max_size=providers.Callable(lambda config: config.cache.max_size, config=config),
    )

    history_store = providers.Singleton(
        HistoryStore,
        store=kv_store,
        max_size=providers.Callable(lambda config: config.history.max_size, config=config),
        min_query_length=providers.Callable(
            lambda config: config.search.min_query_length,
            config=config,
        ),
    )

    catalog_source = providers.Singleton(
        TMDBCatalogSource,
        settings=providers.Callable(lambda config: config.api.tmdb, config=config),
    )

    analytics_sink = providers.Singleton(LoggingAnalyticsSink)

    search_index = providers.Factory(
        FuzzyIndex,
        field_weights=providers.Callable(
            lambda config: config.index.field_weights(),
            config=config,
        ),
        threshold=providers.Callable(lambda config: config.index.threshold, config=config),
        min_match_char_length=providers.Callable(
            lambda config: config.index.min_match_char_length,
            config=config,
        ),
    )

    search_orchestrator = providers.Singleton(
        SearchOrchestrator,
        catalog=catalog_source,
        cache=result_cache,
        rate_limiter=rate_limiter,
        index=search_index,
        analytics=analytics_sink,
        settings=providers.Callable(lambda config: config.search, config=config),
    )

    trending_provider = providers.Singleton(
        TrendingKeywordProvider,
        catalog=catalog_source,
        store=kv_store,
        freshness_seconds=providers.Callable(
            lambda config: config.suggestions.trending_freshness_seconds,
            config=config,
        ),
    )

    suggestion_engine = providers.Singleton(
        SuggestionEngine,
        cache=result_cache,
        trending=trending_provider,
        settings=providers.Callable(lambda config: config.suggestions, config=config),
    )


# Global container instance
container = Container()
