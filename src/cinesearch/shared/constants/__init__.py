"""
CineSearch Constants Module

Centralized constants for CineSearch. All magic values and default
configuration live here so that settings models, services and tests
share a single source of truth.
"""

from .api import TMDBConfig
from .genres import GenreVocabulary, TMDBGenres
from .search import (
    CacheConfig,
    FilterType,
    FuzzyIndexConfig,
    HistoryConfig,
    RateLimitConfig,
    SearchConfig,
    StorageKeys,
    SuggestionConfig,
)
from .system import BASE_DAY, BASE_HOUR, BASE_MINUTE, BASE_SECOND, FileSystem

__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "CacheConfig",
    "FileSystem",
    "FilterType",
    "FuzzyIndexConfig",
    "GenreVocabulary",
    "HistoryConfig",
    "RateLimitConfig",
    "SearchConfig",
    "StorageKeys",
    "SuggestionConfig",
    "TMDBConfig",
    "TMDBGenres",
]
