"""CineSearch Configuration Module

Unified access to configuration models and settings management.
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import (
    APISettings,
    CacheSettings,
    HistorySettings,
    IndexSettings,
    LoggingSettings,
    RateLimitSettings,
    SearchSettings,
    Settings,
    StorageSettings,
    SuggestionSettings,
    TMDBSettings,
)

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
    "get_config",
    "load_settings",
    "reload_config",
]
