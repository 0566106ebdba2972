"""Unit tests for ResultCache."""

import orjson

from cinesearch.services.result_cache import ResultCache
from cinesearch.shared.constants import StorageKeys
from cinesearch.shared.models import CatalogItem


class TestResultCacheUpsert:
    """Dedup, ordering and eviction."""

    def test_upsert_appends_new_items_in_order(self, cache, make_record):
        """Test new items are appended in first-observation order."""
        inserted = cache.upsert_all([make_record("tt1", "One"), make_record("tt2", "Two")])

        assert inserted == 2
        assert [item.id for item in cache.snapshot()] == ["tt1", "tt2"]
        assert not cache.is_empty()

    def test_upsert_is_first_write_wins(self, cache, make_record):
        """Test an existing id is neither duplicated nor updated."""
        cache.upsert_all([make_record("tt1", "Original")])

        inserted = cache.upsert_all([make_record("tt1", "Changed"), make_record("tt1", "Again")])

        assert inserted == 0
        assert len(cache) == 1
        assert cache.snapshot()[0].title == "Original"

    def test_duplicates_within_one_batch(self, cache, make_record):
        """Test ids repeated inside one call are inserted once."""
        inserted = cache.upsert_all(
            [make_record("tt1", "A"), make_record("tt2", "B"), make_record("tt1", "C")]
        )

        assert inserted == 2
        assert [item.title for item in cache.snapshot()] == ["A", "B"]

    def test_never_exceeds_capacity_without_duplicates(self, store, make_record):
        """Test size and uniqueness hold across many overlapping batches."""
        cache = ResultCache(store, max_size=7)

        for start in range(0, 30, 3):
            cache.upsert_all([make_record(f"tt{n}", f"T{n}") for n in range(start, start + 5)])
            ids = [item.id for item in cache.snapshot()]
            assert len(ids) <= 7
            assert len(ids) == len(set(ids))

    def test_eviction_removes_oldest_first(self, store, make_record):
        """Test inserting capacity + k items evicts exactly the k oldest."""
        capacity, k = 10, 3
        cache = ResultCache(store, max_size=capacity)

        cache.upsert_all([make_record(f"tt{n}", f"T{n}") for n in range(capacity)])
        cache.upsert_all([make_record(f"tt{n}", f"T{n}") for n in range(capacity, capacity + k)])

        ids = [item.id for item in cache.snapshot()]
        assert len(ids) == capacity
        for n in range(k):
            assert f"tt{n}" not in cache
        for n in range(capacity, capacity + k):
            assert f"tt{n}" in cache
        assert ids[-k:] == [f"tt{n}" for n in range(capacity, capacity + k)]

    def test_records_without_id_are_skipped(self, cache):
        """Test invalid records are ignored."""
        inserted = cache.upsert_all([{"Title": "No id"}, {"imdbID": "", "Title": "Empty"}])

        assert inserted == 0
        assert cache.is_empty()

    def test_accepts_catalog_items(self, cache):
        """Test CatalogItem instances are stored as-is."""
        item = CatalogItem(id="tt9", title="Nine")

        cache.upsert_all([item])

        assert cache.snapshot()[0] is item


class TestResultCachePersistence:
    """Write-through persistence and loading."""

    def test_upsert_persists_record_shape(self, store, cache, make_record):
        """Test the persisted cache keeps the upstream record keys."""
        cache.upsert_all([make_record("tt1", "One", genre="Drama")])

        payload = orjson.loads(store.get(StorageKeys.RESULT_CACHE))
        assert payload == [
            {
                "imdbID": "tt1",
                "Title": "One",
                "Year": "2010",
                "Type": "movie",
                "Genre": "Drama",
                "Poster": "N/A",
            }
        ]

    def test_load_round_trip(self, store, cache, make_record):
        """Test a new cache instance sees persisted items in order."""
        cache.upsert_all([make_record("tt1", "One"), make_record("tt2", "Two")])

        reloaded = ResultCache(store, max_size=50)
        assert reloaded.load() == 2
        assert [item.id for item in reloaded.snapshot()] == ["tt1", "tt2"]

    def test_load_trims_to_capacity(self, store, make_record):
        """Test loading more items than capacity keeps the newest."""
        records = [make_record(f"tt{n}", f"T{n}") for n in range(6)]
        store.set(StorageKeys.RESULT_CACHE, orjson.dumps(records).decode())

        cache = ResultCache(store, max_size=4)
        cache.load()

        assert [item.id for item in cache.snapshot()] == ["tt2", "tt3", "tt4", "tt5"]

    def test_load_corrupted_payload_is_empty(self, store):
        """Test corrupted JSON is treated as an empty cache."""
        store.set(StorageKeys.RESULT_CACHE, "{broken")

        cache = ResultCache(store)

        assert cache.load() == 0
        assert cache.is_empty()

    def test_persist_failure_keeps_memory_state(self, store, cache, make_record, mocker):
        """Test a failed write is non-fatal and in-memory state stays."""
        mocker.patch.object(store, "set", side_effect=OSError("disk full"))

        inserted = cache.upsert_all([make_record("tt1", "One")])

        assert inserted == 1
        assert "tt1" in cache

    def test_clear_removes_items_and_key(self, store, cache, make_record):
        """Test clear empties memory and storage."""
        cache.upsert_all([make_record("tt1", "One")])

        cache.clear()

        assert cache.is_empty()
        assert store.get(StorageKeys.RESULT_CACHE) is None


class TestResultCacheListeners:
    """Change notification."""

    def test_listener_called_only_for_new_items(self, cache, make_record, mocker):
        """Test listeners fire when something new was inserted."""
        listener = mocker.Mock()
        cache.add_listener(listener)

        cache.upsert_all([make_record("tt1", "One")])
        cache.upsert_all([make_record("tt1", "One again")])

        listener.assert_called_once_with()

    def test_load_notifies_when_not_empty(self, store, cache, make_record, mocker):
        """Test loading a non-empty cache notifies listeners."""
        cache.upsert_all([make_record("tt1", "One")])
        reloaded = ResultCache(store)
        listener = mocker.Mock()
        reloaded.add_listener(listener)

        reloaded.load()

        listener.assert_called_once_with()
