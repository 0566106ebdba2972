"""Hybrid local/remote search orchestration.

The orchestrator answers a query from the local fuzzy index first and
decides whether a remote lookup is worth a call from the daily quota.
Remote results are merged ahead of local ones, fed back into the result
cache and published as immutable SearchState snapshots.

Only one search is current at a time. Starting a new one cancels the
previous session's token, and a cancelled session never writes state.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError

from cinesearch.config.models import SearchSettings
from cinesearch.core.matching import FuzzyIndex, is_genre_query
from cinesearch.core.search.session import SearchSession, normalize_query
from cinesearch.core.search.state import SearchState
from cinesearch.services.analytics import (
    AnalyticsSink,
    NullAnalyticsSink,
    safe_record_search,
)
from cinesearch.services.catalog import CatalogSource
from cinesearch.services.rate_limiter import DailyQuotaRateLimiter
from cinesearch.services.result_cache import ResultCache
from cinesearch.shared.constants import FilterType, SearchConfig
from cinesearch.shared.errors import (
    CineSearchError,
    EmptyQueryError,
    OperationCancelledError,
    SearchErrorKind,
    SearchFailure,
    classify_error,
    create_validation_error,
)
from cinesearch.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from cinesearch.shared.models import CatalogItem, RemotePage

logger = logging.getLogger(__name__)

StateListener = Callable[[SearchState], None]


@dataclass(frozen=True)
class LocalPage:
    """One page of local index results after type filtering."""

    results: tuple[CatalogItem, ...] = ()
    has_more: bool = False
    total: int = 0
    bypassed: bool = False


def merge_unique(*sources: Iterable[CatalogItem]) -> list[CatalogItem]:
    """Concatenate item sequences keeping the first occurrence of each id."""
    merged: list[CatalogItem] = []
    seen: set[str] = set()
    for source in sources:
        for item in source:
            if item.id not in seen:
                seen.add(item.id)
                merged.append(item)
    return merged


class SearchOrchestrator:
    """Coordinates the local index, the quota and the remote catalog.

    Args:
        catalog: Remote catalog source
        cache: Result cache backing the local index
        rate_limiter: Daily quota tracker
        index: Fuzzy index over the cache, subscribed to cache changes
        analytics: Sink notified after searches that settle with results
        settings: Search tuning (page size, sufficiency threshold...)
    """

    def __init__(
        self,
        catalog: CatalogSource,
        cache: ResultCache,
        rate_limiter: DailyQuotaRateLimiter,
        index: FuzzyIndex | None = None,
        analytics: AnalyticsSink | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self.settings = settings or SearchSettings()
        self._catalog = catalog
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._index = index or FuzzyIndex()
        self._analytics = analytics or NullAnalyticsSink()
        self._cache.add_listener(self._index.mark_stale)

        self._session: SearchSession | None = None
        self._state = SearchState(api_call_count=rate_limiter.calls)
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def session(self) -> SearchSession | None:
        return self._session

    @property
    def index(self) -> FuzzyIndex:
        return self._index

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback receiving every new SearchState."""
        self._listeners.append(listener)

    async def initialize(self) -> None:
        """Load the result cache and the quota state from storage."""
        loaded = self._cache.load()
        quota = self._rate_limiter.load()
        self._publish(self._state.evolve(api_call_count=quota.calls))
        logger.info(
            "Search initialized with %d cached items, %d remote calls used",
            loaded,
            quota.calls,
        )

    async def search(
        self,
        term: str,
        filter_type: str = FilterType.ALL,
        page: int = 1,
        append: bool = False,
    ) -> SearchState:
        """Run one search and return the settled state.

        Args:
            term: Raw query text
            filter_type: "all", "movie" or "series"
            page: Page to load, 1-based
            append: For page > 1, append to the displayed results instead
                of replacing them

        Returns:
            The state after the search settled. A superseded search returns
            the state as it was when it noticed the cancellation.

        Raises:
            EmptyQueryError: If the normalized term is too short. The state
                is left untouched.
        """
        query = normalize_query(term)
        if len(query) < self.settings.min_query_length:
            raise EmptyQueryError(term, self.settings.min_query_length)
        if filter_type not in FilterType.VALUES:
            raise create_validation_error(
                f"Unknown filter type: {filter_type}",
                field="filter_type",
                operation="search",
            )
        if page < 1:
            raise create_validation_error(
                f"Page must be 1 or greater, got: {page}",
                field="page",
                operation="search",
            )

        if self._session is not None:
            self._session.token.cancel()
        session = SearchSession(query=query, filter_type=filter_type, page=page)
        self._session = session

        start = time.perf_counter()
        log_operation_start(
            logger,
            "search",
            {"query": query, "filter_type": filter_type, "page": page},
        )

        if page == 1:
            self._publish(
                self._state.evolve(
                    results=(),
                    is_loading=True,
                    is_loading_more=False,
                    error=None,
                    query=query,
                    filter_type=filter_type,
                )
            )
        else:
            self._publish(self._state.evolve(is_loading_more=True))

        local = self._search_local(query, filter_type, page)

        if not self._should_dispatch(local, page):
            self._settle_local(session, local, append=append)
            self._finish(session, start, source="local")
            return self._state

        if not self._rate_limiter.can_call():
            logger.info("Remote quota exhausted, answering %r from the cache", query)
            if page == 1 and not local.results:
                self._settle_failure(session, SearchFailure.of(SearchErrorKind.RATE_LIMITED))
            else:
                self._settle_local(session, local, append=append)
            self._finish(session, start, source="local")
            return self._state

        if page == 1 and local.results:
            # Show local hits while the remote call is pending
            self._publish(self._state.evolve(results=local.results))

        self._rate_limiter.record_call()
        self._publish(self._state.evolve(api_call_count=self._rate_limiter.calls))

        try:
            session.token.raise_if_cancelled()
            remote = await self._catalog.search(query, filter_type, page, session.token)
        except OperationCancelledError:
            logger.debug("Search for %r was superseded", query)
            return self._state
        except CineSearchError as e:
            if self._is_stale(session):
                logger.debug("Ignoring failure of superseded search for %r", query)
                return self._state
            log_operation_error(logger, e, "search", level=logging.WARNING)
            self._fall_back(session, classify_error(e), append=append)
            self._finish(session, start, source="fallback")
            return self._state
        except Exception as e:  # noqa: BLE001
            if self._is_stale(session):
                return self._state
            logger.warning("Remote search for %r failed: %s", query, e, exc_info=True)
            self._fall_back(session, classify_error(e), append=append)
            self._finish(session, start, source="fallback")
            return self._state

        if self._is_stale(session):
            logger.debug("Discarding remote response for superseded search %r", query)
            return self._state

        items = self._normalize_remote(remote.items)
        if items:
            self._settle_remote(session, local, remote, items, append=append)
            self._cache.upsert_all(items)
        elif page == 1 and not local.results:
            self._publish(
                self._state.evolve(
                    results=(),
                    is_loading=False,
                    error=None,
                    has_more_pages=False,
                    total_results=0,
                    total_pages=0,
                    current_page=1,
                )
            )
        else:
            self._settle_local(session, local, append=append)

        self._finish(session, start, source="remote")
        return self._state

    async def load_more_results(self) -> SearchState:
        """Load the next page of the current query, appending it."""
        state = self._state
        if (
            self._session is None
            or state.is_loading
            or state.is_loading_more
            or not state.has_more_pages
        ):
            return state
        return await self.search(
            self._session.query,
            self._session.filter_type,
            state.current_page + 1,
            append=True,
        )

    async def change_filter(self, filter_type: str) -> SearchState:
        """Re-run the current query from page 1 with another filter."""
        if self._session is None:
            return self._state
        return await self.search(self._session.query, filter_type, 1, append=False)

    def cancel_search(self) -> None:
        """Cancel the in-flight remote call, keeping the displayed results."""
        if self._session is not None:
            self._session.token.cancel()
        if self._state.is_loading or self._state.is_loading_more:
            self._publish(self._state.evolve(is_loading=False, is_loading_more=False))

    def clear_search(self) -> None:
        """Cancel any in-flight call and reset the session and results."""
        if self._session is not None:
            self._session.token.cancel()
        self._session = None
        self._publish(SearchState(api_call_count=self._rate_limiter.calls))

    def _search_local(self, query: str, filter_type: str, page: int) -> LocalPage:
        if is_genre_query(query):
            logger.debug("Genre query %r bypasses the local index", query)
            return LocalPage(bypassed=True)

        if self._index.needs_build():
            self._index.build(self._cache.snapshot())

        hits = self._index.search(query, limit=self.settings.max_local_results)
        items = [hit.item for hit in hits]
        if filter_type != FilterType.ALL:
            items = [item for item in items if item.type == filter_type]

        page_size = self.settings.page_size
        offset = (page - 1) * page_size
        return LocalPage(
            results=tuple(items[offset : offset + page_size]),
            has_more=offset + page_size < len(items),
            total=len(items),
        )

    def _should_dispatch(self, local: LocalPage, page: int) -> bool:
        if page > 1 or not local.results:
            return True
        return local.total < self.settings.sufficiency_threshold

    def _normalize_remote(self, records: Sequence[dict[str, Any]]) -> list[CatalogItem]:
        items: list[CatalogItem] = []
        for record in records:
            data = dict(record)
            poster = data.get("Poster")
            if not poster or poster == SearchConfig.NO_IMAGE_MARKER:
                data["Poster"] = self.settings.placeholder_poster_url
            try:
                items.append(CatalogItem.from_record(data))
            except ValidationError:
                logger.debug("Dropping remote record without an id: %r", record)
        return merge_unique(items)

    def _pages_for(self, total: int) -> int:
        return math.ceil(total / self.settings.page_size) if total > 0 else 0

    def _combine(
        self,
        items: Iterable[CatalogItem],
        *,
        page: int,
        append: bool,
    ) -> list[CatalogItem]:
        if page > 1 and append:
            return merge_unique(self._state.results, items)
        return list(items)

    def _settle_local(self, session: SearchSession, local: LocalPage, *, append: bool) -> None:
        if session.page > 1 and not local.results:
            logger.debug(
                "No local results for page %d of %r, stopping pagination",
                session.page,
                session.query,
            )
            self._publish(
                self._state.evolve(is_loading_more=False, has_more_pages=local.has_more)
            )
            return

        self._publish(
            self._state.evolve(
                results=self._combine(local.results, page=session.page, append=append),
                is_loading=False,
                is_loading_more=False,
                error=None,
                has_more_pages=local.has_more,
                total_results=local.total,
                total_pages=self._pages_for(local.total),
                current_page=session.page,
            )
        )

    def _settle_remote(
        self,
        session: SearchSession,
        local: LocalPage,
        remote: RemotePage,
        items: list[CatalogItem],
        *,
        append: bool,
    ) -> None:
        remote_total = max(remote.total_count, len(items))
        remote_pages = (
            remote.total_pages
            if remote.total_pages is not None
            else self._pages_for(remote_total)
        )
        remote_has_more = session.page < remote_pages

        if session.page == 1:
            results = merge_unique(items, local.results)
            has_more = remote_has_more or local.has_more
            total_results = max(remote_total, local.total)
            total_pages = max(remote_pages, self._pages_for(local.total))
        else:
            results = self._combine(items, page=session.page, append=append)
            has_more = remote_has_more
            total_results = remote_total
            total_pages = remote_pages

        self._publish(
            self._state.evolve(
                results=results,
                is_loading=False,
                is_loading_more=False,
                error=None,
                has_more_pages=has_more,
                total_results=total_results,
                total_pages=total_pages,
                current_page=session.page,
            )
        )

    def _settle_failure(self, session: SearchSession, failure: SearchFailure) -> None:
        changes: dict[str, Any] = {
            "is_loading": False,
            "is_loading_more": False,
            "error": failure,
        }
        if session.page == 1:
            changes.update(
                results=(),
                has_more_pages=False,
                total_results=0,
                total_pages=0,
                current_page=1,
            )
        self._publish(self._state.evolve(**changes))

    def _fall_back(
        self,
        session: SearchSession,
        kind: SearchErrorKind,
        *,
        append: bool,
    ) -> None:
        local = self._search_local(session.query, session.filter_type, session.page)
        if local.results:
            logger.info(
                "Remote search failed (%s), showing %d cached results",
                kind.value,
                len(local.results),
            )
            self._settle_local(session, local, append=append)
        else:
            self._settle_failure(session, SearchFailure.of(kind))

    def _finish(self, session: SearchSession, start: float, *, source: str) -> None:
        state = self._state
        log_operation_success(
            logger,
            "search",
            (time.perf_counter() - start) * 1000,
            {
                "source": source,
                "results": len(state.results),
                "page": session.page,
                "error": state.error.kind.value if state.error else None,
            },
        )
        if state.results and state.error is None:
            safe_record_search(self._analytics, session.query, len(state.results))

    def _is_stale(self, session: SearchSession) -> bool:
        return session.token.is_cancelled or self._session is not session

    def _publish(self, state: SearchState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
