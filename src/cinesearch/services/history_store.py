"""Most-recent-first search history."""

from __future__ import annotations

import logging
from typing import Callable

from cinesearch.shared.constants import HistoryConfig, SearchConfig, StorageKeys
from cinesearch.storage import KeyValueStore
from cinesearch.storage.codec import read_json, remove_key, write_json

logger = logging.getLogger(__name__)

HistoryListener = Callable[[tuple[str, ...]], None]


class HistoryStore:
    """Bounded, deduplicated list of submitted queries.

    Args:
        store: Key-value store the history is persisted to
        max_size: Capacity (default: 20)
        min_query_length: Shorter terms are never recorded
        storage_key: Key the history is persisted under
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_size: int = HistoryConfig.MAX_SIZE,
        min_query_length: int = SearchConfig.MIN_QUERY_LENGTH,
        storage_key: str = StorageKeys.SEARCH_HISTORY,
    ) -> None:
        self.max_size = max_size
        self.min_query_length = min_query_length
        self._store = store
        self._storage_key = storage_key
        self._entries: list[str] = []
        self._listeners: list[HistoryListener] = []

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def add_listener(self, listener: HistoryListener) -> None:
        self._listeners.append(listener)

    def load(self) -> tuple[str, ...]:
        raw = read_json(self._store, self._storage_key)
        entries: list[str] = []
        if isinstance(raw, list):
            for value in raw:
                if isinstance(value, str) and value not in entries:
                    entries.append(value)
        self._entries = entries[: self.max_size]
        self._notify()
        return self.entries

    def record(self, term: str) -> bool:
        """Move or prepend a term to the front of the history.

        Terms shorter than ``min_query_length`` and terms equal to the
        current most recent entry are ignored.

        Returns:
            True if the history changed
        """
        term = term.strip()
        if len(term) < self.min_query_length:
            return False
        if self._entries and self._entries[0] == term:
            return False

        self._entries = [term, *(e for e in self._entries if e != term)][: self.max_size]
        self._persist()
        return True

    def delete(self, term: str) -> bool:
        if term not in self._entries:
            return False
        self._entries = [e for e in self._entries if e != term]
        self._persist()
        return True

    def clear_all(self) -> None:
        self._entries = []
        remove_key(self._store, self._storage_key)
        self._notify()

    def _persist(self) -> None:
        write_json(self._store, self._storage_key, self._entries)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.entries
        for listener in list(self._listeners):
            listener(snapshot)
