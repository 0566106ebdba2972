"""Bounded, deduplicated cache of catalog items seen in remote results.

The cache is the source of truth for the local search index. Entries are
kept in order of first observation and evicted oldest-first once the
capacity is exceeded. Every mutation is written through to the key-value
store; a failed write is logged and the in-memory state stays authoritative.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from pydantic import ValidationError

from cinesearch.shared.constants import CacheConfig, StorageKeys
from cinesearch.shared.logging import log_operation_success
from cinesearch.shared.models import CatalogItem
from cinesearch.storage import KeyValueStore
from cinesearch.storage.codec import read_json, remove_key, write_json

logger = logging.getLogger(__name__)

CacheListener = Callable[[], None]


class ResultCache:
    """FIFO-evicting cache keyed by item id.

    Args:
        store: Key-value store the cache is persisted to
        max_size: Capacity (default: 1500)
        storage_key: Key the cache is persisted under
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_size: int = CacheConfig.MAX_SIZE,
        storage_key: str = StorageKeys.RESULT_CACHE,
    ) -> None:
        if max_size <= 0:
            msg = f"max_size must be positive, got: {max_size}"
            raise ValueError(msg)
        self.max_size = max_size
        self._store = store
        self._storage_key = storage_key
        self._items: OrderedDict[str, CatalogItem] = OrderedDict()
        self._listeners: list[CacheListener] = []

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def add_listener(self, listener: CacheListener) -> None:
        """Register a callback invoked whenever the cache content changes."""
        self._listeners.append(listener)

    def load(self) -> int:
        """Load the persisted cache, replacing the in-memory content.

        Records that fail validation are skipped. Duplicate ids keep their
        first occurrence and the result is trimmed to capacity.

        Returns:
            Number of items loaded
        """
        raw = read_json(self._store, self._storage_key)
        self._items.clear()
        if isinstance(raw, list):
            for record in raw:
                item = self._coerce(record)
                if item is not None and item.id not in self._items:
                    self._items[item.id] = item
            self._evict_overflow()
        elif raw is not None:
            logger.warning("Ignoring cache payload that is not a list")

        logger.info("Loaded %d cached items", len(self._items))
        if self._items:
            self._notify()
        return len(self._items)

    def upsert_all(self, items: Iterable[CatalogItem | Mapping[str, Any]]) -> int:
        """Append items whose id is not cached yet, then evict overflow.

        Existing entries are never updated in place.

        Args:
            items: Items or raw records to add

        Returns:
            Number of newly inserted items
        """
        start = time.perf_counter()
        inserted = 0
        for candidate in items:
            item = self._coerce(candidate)
            if item is None or item.id in self._items:
                continue
            self._items[item.id] = item
            inserted += 1

        if inserted == 0:
            return 0

        evicted = self._evict_overflow()
        self._persist()
        self._notify()
        log_operation_success(
            logger,
            "cache_upsert",
            (time.perf_counter() - start) * 1000,
            {"inserted": inserted, "evicted": evicted, "size": len(self._items)},
        )
        return inserted

    def snapshot(self) -> list[CatalogItem]:
        """Items in insertion order, oldest first."""
        return list(self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        """Drop every entry and remove the persisted cache."""
        self._items.clear()
        remove_key(self._store, self._storage_key)
        self._notify()
        logger.info("Result cache cleared")

    def _evict_overflow(self) -> int:
        evicted = 0
        while len(self._items) > self.max_size:
            self._items.popitem(last=False)
            evicted += 1
        return evicted

    def _persist(self) -> None:
        payload = [item.to_record() for item in self._items.values()]
        if not write_json(self._store, self._storage_key, payload):
            logger.warning(
                "Result cache kept in memory only, %d items not persisted",
                len(payload),
            )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @staticmethod
    def _coerce(candidate: CatalogItem | Mapping[str, Any]) -> CatalogItem | None:
        if isinstance(candidate, CatalogItem):
            return candidate
        if not isinstance(candidate, Mapping):
            return None
        try:
            return CatalogItem.from_record(dict(candidate))
        except ValidationError:
            logger.debug("Skipping catalog record without a usable id")
            return None
