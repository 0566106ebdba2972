"""TMDB-backed remote catalog.

This module adapts tmdbv3api to the CatalogSource boundary. TMDB results
are converted to the record shape the rest of the application stores
(``imdbID``, ``Title``, ``Year``, ``Type``, ``Genre``, ``Poster``). The
blocking tmdbv3api calls run in a worker thread so the event loop stays
responsive while a request is in flight.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Mapping
from typing import Any, Callable

import requests
from tmdbv3api import Search, TMDb, Trending
from tmdbv3api.exceptions import TMDbException

from cinesearch.config.models import TMDBSettings
from cinesearch.core.search.session import CancellationToken
from cinesearch.shared.constants import FilterType, SearchConfig, TMDBConfig, TMDBGenres
from cinesearch.shared.errors import (
    CatalogApiError,
    CatalogNetworkError,
    CatalogTimeoutError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
)
from cinesearch.shared.logging import log_api_call, log_operation_error
from cinesearch.shared.models import RemotePage

logger = logging.getLogger(__name__)

# tmdbv3api publishes search totals through os.environ, shared by every thread
_SEARCH_TOTALS_LOCK = threading.Lock()

_MEDIA_TO_TYPE = {
    TMDBConfig.MEDIA_TYPE_MOVIE: FilterType.MOVIE,
    TMDBConfig.MEDIA_TYPE_TV: FilterType.SERIES,
}


def _get(obj: Any, key: str) -> Any:
    """Read a field from a dict or a tmdbv3api AsObj."""
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_catalog_record(
    result: Any,
    media_type: str,
    image_base_url: str = TMDBConfig.IMAGE_BASE_URL,
) -> dict[str, Any] | None:
    """Convert one TMDB search result into a catalog record.

    Args:
        result: TMDB movie or TV result
        media_type: "movie" or "tv"
        image_base_url: Base URL prepended to ``poster_path``

    Returns:
        The record, or None for results without an id or of another media type
    """
    item_type = _MEDIA_TO_TYPE.get(media_type)
    tmdb_id = _get(result, "id")
    if item_type is None or tmdb_id is None:
        return None

    if media_type == TMDBConfig.MEDIA_TYPE_MOVIE:
        title = _get(result, "title") or _get(result, "original_title") or ""
        date = _get(result, "release_date") or ""
    else:
        title = _get(result, "name") or _get(result, "original_name") or ""
        date = _get(result, "first_air_date") or ""

    genre_ids = _get(result, "genre_ids") or []
    genres = [TMDBGenres.NAMES[gid] for gid in genre_ids if gid in TMDBGenres.NAMES]
    poster_path = _get(result, "poster_path")

    return {
        "imdbID": f"{media_type}-{tmdb_id}",
        "Title": str(title),
        "Year": str(date)[:4],
        "Type": item_type,
        "Genre": ", ".join(dict.fromkeys(genres)),
        "Poster": (
            f"{image_base_url.rstrip('/')}/{str(poster_path).lstrip('/')}"
            if poster_path
            else SearchConfig.NO_IMAGE_MARKER
        ),
        "Plot": str(_get(result, "overview") or ""),
    }


class TMDBCatalogSource:
    """CatalogSource implementation on top of tmdbv3api.

    Args:
        settings: TMDB credentials and locale
        search_api: tmdbv3api ``Search`` instance, created when omitted
        trending_api: tmdbv3api ``Trending`` instance, created when omitted
    """

    def __init__(
        self,
        settings: TMDBSettings | None = None,
        search_api: Any | None = None,
        trending_api: Any | None = None,
    ) -> None:
        self.settings = settings or TMDBSettings()

        # TMDb keeps its configuration process-wide, set it before creating API objects
        self._tmdb = TMDb()
        self._tmdb.api_key = self.settings.api_key
        self._tmdb.language = self.settings.language

        self._search = search_api if search_api is not None else Search()
        self._trending = trending_api if trending_api is not None else Trending()

        logger.info(
            "TMDB catalog initialized with language: %s, region: %s",
            self.settings.language,
            self.settings.region,
        )

    async def search(
        self,
        query: str,
        filter_type: str,
        page: int,
        token: CancellationToken,
    ) -> RemotePage:
        """Search TMDB for one page of results.

        Raises:
            OperationCancelledError: If the token is cancelled before the
                call or before its result is returned
            CatalogTimeoutError: If the request timed out
            CatalogNetworkError: If TMDB could not be reached
            CatalogApiError: If TMDB answered with an error
        """
        token.raise_if_cancelled()

        if filter_type == FilterType.MOVIE:
            endpoint = "search/movie"
            fetch: Callable[[], Any] = lambda: self._search.movies(query, page=page)
        elif filter_type == FilterType.SERIES:
            endpoint = "search/tv"
            fetch = lambda: self._search.tv_shows(query, page=page)
        else:
            endpoint = "search/multi"
            fetch = lambda: self._search.multi(query, page=page)

        context = ErrorContext(
            operation="catalog_search",
            key=query,
            additional_data={"endpoint": endpoint, "page": page},
        )
        start = time.perf_counter()
        raw = await self._call(lambda: self._fetch_with_totals(fetch), context)
        log_api_call(
            logger,
            endpoint,
            (time.perf_counter() - start) * 1000,
            {"page": page},
        )

        token.raise_if_cancelled()
        return self._to_page(raw, filter_type)

    async def fetch_trending(self) -> list[str]:
        """Titles of this week's trending movies and shows.

        Raises:
            CatalogTimeoutError, CatalogNetworkError, CatalogApiError
        """
        context = ErrorContext(operation="fetch_trending")
        raw = await self._call(self._trending.all_week, context)
        log_api_call(logger, "trending/all/week")

        keywords: list[str] = []
        seen: set[str] = set()
        for result in self._results_of(raw):
            title = _get(result, "title") or _get(result, "name")
            if not title or str(title).lower() in seen:
                continue
            seen.add(str(title).lower())
            keywords.append(str(title))
            if len(keywords) >= TMDBConfig.MAX_TRENDING_KEYWORDS:
                break
        return keywords

    async def _call(self, call: Callable[[], Any], context: ErrorContext) -> Any:
        if not self.settings.api_key:
            raise CatalogApiError(
                ErrorCode.MISSING_CONFIG,
                "TMDB API key is not configured",
                context,
            )
        try:
            return await asyncio.to_thread(call)
        except requests.exceptions.Timeout as e:
            error: InfrastructureError = CatalogTimeoutError(
                ErrorCode.API_TIMEOUT,
                "TMDB request timed out",
                context,
                original_error=e,
            )
        except requests.exceptions.ConnectionError as e:
            error = CatalogNetworkError(
                ErrorCode.NETWORK_ERROR,
                "Could not connect to TMDB",
                context,
                original_error=e,
            )
        except (TMDbException, requests.exceptions.RequestException) as e:
            error = CatalogApiError(
                ErrorCode.API_REQUEST_FAILED,
                f"TMDB request failed: {e}",
                context,
                original_error=e,
            )
        except (KeyError, TypeError, ValueError) as e:
            error = CatalogApiError(
                ErrorCode.API_INVALID_RESPONSE,
                f"Unexpected TMDB response: {e}",
                context,
                original_error=e,
            )
        log_operation_error(logger, error, level=logging.WARNING)
        raise error

    def _fetch_with_totals(self, fetch: Callable[[], Any]) -> dict[str, Any]:
        """Run a search call and read its totals in the same worker thread.

        tmdbv3api answers with a bare result list and leaves the totals on
        the Search object, which reads them back from ``os.environ``. The
        lock keeps another search from overwriting them in between.
        """
        with _SEARCH_TOTALS_LOCK:
            raw = fetch()
            total = _get(raw, "total_results")
            if total is None:
                total = getattr(self._search, "total_results", None)
            pages = _get(raw, "total_pages")
            if pages is None:
                pages = getattr(self._search, "total_pages", None)
        return {
            "results": self._results_of(raw),
            "total_results": _to_int(total),
            "total_pages": _to_int(pages),
        }

    def _to_page(self, raw: Any, filter_type: str) -> RemotePage:
        items: list[dict[str, Any]] = []
        for result in self._results_of(raw):
            if filter_type == FilterType.MOVIE:
                media_type = TMDBConfig.MEDIA_TYPE_MOVIE
            elif filter_type == FilterType.SERIES:
                media_type = TMDBConfig.MEDIA_TYPE_TV
            else:
                media_type = _get(result, "media_type") or ""
            record = to_catalog_record(result, media_type, self.settings.image_base_url)
            if record is not None:
                items.append(record)

        total = _to_int(_get(raw, "total_results"))
        pages = _to_int(_get(raw, "total_pages"))

        return RemotePage(
            items=items,
            total_count=total if total is not None else len(items),
            total_pages=pages,
        )

    @staticmethod
    def _results_of(raw: Any) -> list[Any]:
        if raw is None:
            return []
        results = _get(raw, "results")
        if results is None and not isinstance(raw, Mapping):
            results = raw
        return list(results or [])
