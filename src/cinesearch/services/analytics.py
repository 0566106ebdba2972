"""Search analytics sinks.

Analytics is fire-and-forget: a failing sink is logged and never affects
search state.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class AnalyticsSink(Protocol):
    def record_search(self, query: str, result_count: int) -> None: ...


class LoggingAnalyticsSink:
    """Writes search events to the application log."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def record_search(self, query: str, result_count: int) -> None:
        self._logger.info(
            "search event: %r returned %d results",
            query,
            result_count,
            extra={
                "operation": "analytics_search",
                "context": {"query": query, "result_count": result_count},
            },
        )


class NullAnalyticsSink:
    """Discards every event."""

    def record_search(self, query: str, result_count: int) -> None:
        return None


def safe_record_search(sink: AnalyticsSink, query: str, result_count: int) -> None:
    """Forward an event to the sink, logging and swallowing its failures."""
    try:
        sink.record_search(query, result_count)
    except Exception:  # noqa: BLE001
        logger.warning("Analytics sink failed for query %r", query, exc_info=True)
