"""Remote catalog boundary consumed by the search core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from cinesearch.shared.models import RemotePage

if TYPE_CHECKING:
    from cinesearch.core.search.session import CancellationToken


@runtime_checkable
class CatalogSource(Protocol):
    """Remote search and trending keyword lookups.

    ``search`` raises ``CatalogNetworkError``, ``CatalogTimeoutError`` or
    ``CatalogApiError`` on failure and ``OperationCancelledError`` when the
    token was cancelled before the result could be returned.
    """

    async def search(
        self,
        query: str,
        filter_type: str,
        page: int,
        token: CancellationToken,
    ) -> RemotePage: ...

    async def fetch_trending(self) -> list[str]: ...
