"""Search orchestration."""

from .orchestrator import LocalPage, SearchOrchestrator, merge_unique
from .session import CancellationToken, SearchSession, normalize_query
from .state import SearchState

__all__ = [
    "CancellationToken",
    "LocalPage",
    "SearchOrchestrator",
    "SearchSession",
    "SearchState",
    "merge_unique",
    "normalize_query",
]
