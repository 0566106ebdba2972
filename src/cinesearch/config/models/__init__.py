"""Configuration models package."""

from .api_settings import APISettings, TMDBSettings
from .app_settings import LoggingSettings, StorageSettings
from .search_settings import (
    CacheSettings,
    HistorySettings,
    IndexSettings,
    RateLimitSettings,
    SearchSettings,
    SuggestionSettings,
)
from .settings import Settings

__all__ = [
    "APISettings",
    "CacheSettings",
    "HistorySettings",
    "IndexSettings",
    "LoggingSettings",
    "RateLimitSettings",
    "SearchSettings",
    "Settings",
    "StorageSettings",
    "SuggestionSettings",
    "TMDBSettings",
]
