"""Services: quota tracking, result cache, history and external boundaries.

The TMDB adapter lives in ``cinesearch.services.tmdb`` and is imported
from there explicitly.
"""

from .analytics import AnalyticsSink, LoggingAnalyticsSink, NullAnalyticsSink
from .catalog import CatalogSource
from .history_store import HistoryStore
from .rate_limiter import DailyQuotaRateLimiter, RateLimiterState
from .result_cache import ResultCache

__all__ = [
    "AnalyticsSink",
    "CatalogSource",
    "DailyQuotaRateLimiter",
    "HistoryStore",
    "LoggingAnalyticsSink",
    "NullAnalyticsSink",
    "RateLimiterState",
    "ResultCache",
]
