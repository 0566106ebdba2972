"""Search session primitives: query normalization and cancellation."""

from __future__ import annotations

from dataclasses import dataclass, field

from cinesearch.shared.constants import FilterType
from cinesearch.shared.errors import OperationCancelledError


def normalize_query(term: str) -> str:
    """Trim a query and collapse internal whitespace runs to one space."""
    return " ".join(term.split())


class CancellationToken:
    """Flag shared between a search session and its remote call.

    The orchestrator cancels the token when a newer search supersedes the
    session. The remote source and the orchestrator both check it before
    touching shared state.
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self, operation: str = "remote_search") -> None:
        """Raise OperationCancelledError if the token was cancelled."""
        if self._cancelled:
            raise OperationCancelledError(operation)


@dataclass
class SearchSession:
    """The in-flight or most recent search.

    Attributes:
        query: Normalized query
        filter_type: "all", "movie" or "series"
        page: Requested page, 1-based
        token: Cancellation token of the session's remote call
    """

    query: str
    filter_type: str = FilterType.ALL
    page: int = 1
    token: CancellationToken = field(default_factory=CancellationToken)
