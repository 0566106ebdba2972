"""
Search Configuration Constants

Defaults for the local index, the result cache, the quota tracker,
search history and autosuggestions. Settings models read their defaults
from here.
"""

from typing import ClassVar

from .system import BASE_DAY, BASE_HOUR


class FilterType:
    """Result type filters."""

    ALL = "all"
    MOVIE = "movie"
    SERIES = "series"

    VALUES: ClassVar[tuple[str, ...]] = (ALL, MOVIE, SERIES)


class SearchConfig:
    """Search orchestration defaults."""

    MIN_QUERY_LENGTH = 2
    PAGE_SIZE = 10
    SUFFICIENCY_THRESHOLD = 20  # local page-1 total that skips the remote call
    MAX_LOCAL_RESULTS = 100
    PLACEHOLDER_POSTER_URL = "https://via.placeholder.com/300x450?text=No+Image"
    NO_IMAGE_MARKER = "N/A"


class CacheConfig:
    """Result cache defaults."""

    MAX_SIZE = 1500


class RateLimitConfig:
    """Remote quota defaults."""

    MAX_CALLS_PER_WINDOW = 900
    WINDOW_SECONDS = BASE_DAY


class HistoryConfig:
    """Search history defaults."""

    MAX_SIZE = 20


class FuzzyIndexConfig:
    """Approximate matching defaults for the main search index."""

    THRESHOLD = 0.4
    MIN_MATCH_CHAR_LENGTH = 2
    TITLE_WEIGHT = 0.7
    YEAR_WEIGHT = 0.15
    GENRE_WEIGHT = 0.15


class SuggestionConfig:
    """Autosuggestion defaults."""

    DEBOUNCE_SECONDS = 0.2
    MAX_SUGGESTIONS = 8
    MAX_RECENT_SEARCHES = 3
    MAX_TRENDING_KEYWORDS = 5
    MAX_PREFIX_MATCHES = 2
    MAX_PARTIAL_MATCHES = 2
    MAX_TITLE_MATCHES = 4
    MAX_TRENDING_MATCHES = 3

    # Looser, title-dominant tuning for the suggestion index
    THRESHOLD = 0.5
    MIN_MATCH_CHAR_LENGTH = 1
    TITLE_WEIGHT = 0.85
    YEAR_WEIGHT = 0.15

    TRENDING_FRESHNESS_SECONDS = 6 * BASE_HOUR
    FALLBACK_TRENDING_KEYWORDS: ClassVar[tuple[str, ...]] = (
        "action movies",
        "comedy series",
        "drama films",
        "thriller movies",
        "horror films",
        "sci-fi movies",
        "adventure movies",
        "fantasy films",
    )


class StorageKeys:
    """Keys used in the persistent key-value store."""

    RESULT_CACHE = "movieCache"
    RATE_LIMIT = "apiLimit"
    SEARCH_HISTORY = "searchHistory"
    TRENDING_KEYWORDS = "trendingKeywords"
    TRENDING_KEYWORDS_TIME = "trendingKeywordsTime"
