"""Trending keyword lookup with a local freshness cache."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Callable

from cinesearch.services.catalog import CatalogSource
from cinesearch.shared.constants import StorageKeys, SuggestionConfig
from cinesearch.shared.errors import CineSearchError
from cinesearch.shared.logging import log_operation_error
from cinesearch.storage import KeyValueStore
from cinesearch.storage.codec import read_json, write_json

logger = logging.getLogger(__name__)


class TrendingKeywordProvider:
    """Serves trending keywords, fetching at most once per freshness window.

    The lookup never raises. A failed or empty fetch yields the fallback
    keyword list.

    Args:
        catalog: Remote source of trending keywords
        store: Key-value store used as the local cache
        freshness_seconds: Age after which cached keywords are refetched
        fallback: Keywords used when nothing can be fetched
        clock: Callable returning the current Unix time
    """

    def __init__(
        self,
        catalog: CatalogSource,
        store: KeyValueStore,
        freshness_seconds: float = SuggestionConfig.TRENDING_FRESHNESS_SECONDS,
        fallback: Sequence[str] = SuggestionConfig.FALLBACK_TRENDING_KEYWORDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self.freshness_seconds = freshness_seconds
        self.fallback = list(fallback)
        self._clock = clock

    def cached(self) -> list[str] | None:
        """Cached keywords if they are still fresh."""
        keywords = read_json(self._store, StorageKeys.TRENDING_KEYWORDS)
        fetched_at = read_json(self._store, StorageKeys.TRENDING_KEYWORDS_TIME)
        if not isinstance(keywords, list) or not isinstance(fetched_at, (int, float)):
            return None
        if self._clock() - fetched_at >= self.freshness_seconds:
            return None
        return [k for k in keywords if isinstance(k, str)]

    async def get_keywords(self) -> list[str]:
        cached = self.cached()
        if cached:
            logger.debug("Using %d cached trending keywords", len(cached))
            return cached

        try:
            keywords = await self._catalog.fetch_trending()
        except CineSearchError as e:
            log_operation_error(logger, e, "fetch_trending", level=logging.WARNING)
            return list(self.fallback)
        except Exception:  # noqa: BLE001
            logger.warning("Trending keyword fetch failed, using fallback", exc_info=True)
            return list(self.fallback)

        keywords = [k for k in keywords if isinstance(k, str) and k.strip()]
        if not keywords:
            logger.info("Remote returned no trending keywords, using fallback")
            return list(self.fallback)

        write_json(self._store, StorageKeys.TRENDING_KEYWORDS, keywords)
        write_json(self._store, StorageKeys.TRENDING_KEYWORDS_TIME, self._clock())
        return keywords
