"""Observable search state."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from cinesearch.shared.constants import FilterType
from cinesearch.shared.errors import SearchFailure
from cinesearch.shared.models import CatalogItem


@dataclass(frozen=True)
class SearchState:
    """Immutable snapshot published to listeners after every change.

    Attributes:
        results: Items currently displayed, in display order
        is_loading: A page-1 search is running
        is_loading_more: A follow-up page is loading
        error: Failure to show, None when there is nothing to report
        has_more_pages: Another page can be requested
        total_results: Best known total across local and remote results
        total_pages: Best known page count
        current_page: Last settled page
        api_call_count: Remote calls used in the current quota window
        query: Query the results belong to
        filter_type: Filter the results belong to
    """

    results: tuple[CatalogItem, ...] = ()
    is_loading: bool = False
    is_loading_more: bool = False
    error: SearchFailure | None = None
    has_more_pages: bool = False
    total_results: int = 0
    total_pages: int = 0
    current_page: int = 1
    api_call_count: int = 0
    query: str = ""
    filter_type: str = FilterType.ALL

    def evolve(self, **changes: Any) -> SearchState:
        """Return a copy with the given fields replaced."""
        if "results" in changes:
            changes["results"] = tuple(changes["results"])
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "filter_type": self.filter_type,
            "results": [item.to_record() for item in self.results],
            "is_loading": self.is_loading,
            "is_loading_more": self.is_loading_more,
            "error": (
                {"kind": self.error.kind.value, "message": self.error.message}
                if self.error
                else None
            ),
            "has_more_pages": self.has_more_pages,
            "total_results": self.total_results,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
            "api_call_count": self.api_call_count,
        }
