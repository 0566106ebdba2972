"""Unit tests for HistoryStore."""

import orjson

from cinesearch.services.history_store import HistoryStore
from cinesearch.shared.constants import StorageKeys


class TestHistoryStore:
    """Test cases for HistoryStore."""

    def test_repeated_term_is_not_duplicated(self, history):
        """Test submitting the same term twice keeps one entry."""
        history.record("batman")
        history.record("batman")

        assert history.entries == ("batman",)

    def test_resubmitted_term_moves_to_front(self, history):
        """Test an older term moves to the front instead of duplicating."""
        history.record("batman")
        history.record("robin")
        history.record("batman")

        assert history.entries == ("batman", "robin")

    def test_short_terms_are_ignored(self, history):
        """Test terms below the minimum query length are not recorded."""
        assert history.record("a") is False
        assert history.record("   ") is False
        assert history.entries == ()

    def test_capacity_drops_oldest(self, history):
        """Test the history keeps the most recent max_size entries."""
        for term in ["one", "two", "three", "four", "five", "six"]:
            history.record(term)

        assert history.entries == ("six", "five", "four", "three", "two")

    def test_record_persists(self, store, history):
        """Test every change is written through."""
        history.record("batman")
        history.record("robin")

        assert orjson.loads(store.get(StorageKeys.SEARCH_HISTORY)) == ["robin", "batman"]

    def test_load_restores_entries(self, store, history):
        """Test a new store instance loads persisted history."""
        history.record("batman")
        history.record("robin")

        reloaded = HistoryStore(store, max_size=5)

        assert reloaded.load() == ("robin", "batman")

    def test_load_ignores_invalid_payload(self, store):
        """Test a corrupted history payload loads as empty."""
        store.set(StorageKeys.SEARCH_HISTORY, '{"not": "a list"}')

        assert HistoryStore(store).load() == ()

    def test_delete_entry(self, store, history):
        """Test delete removes one entry and persists."""
        history.record("batman")
        history.record("robin")

        assert history.delete("batman") is True
        assert history.delete("joker") is False
        assert history.entries == ("robin",)
        assert orjson.loads(store.get(StorageKeys.SEARCH_HISTORY)) == ["robin"]

    def test_clear_all(self, store, history):
        """Test clear_all empties the history and removes the key."""
        history.record("batman")

        history.clear_all()

        assert history.entries == ()
        assert store.get(StorageKeys.SEARCH_HISTORY) is None

    def test_listeners_receive_snapshots(self, history, mocker):
        """Test listeners get the new entries after each change."""
        listener = mocker.Mock()
        history.add_listener(listener)

        history.record("batman")
        history.record("batman")
        history.record("robin")

        assert listener.call_args_list == [
            mocker.call(("batman",)),
            mocker.call(("robin", "batman")),
        ]
