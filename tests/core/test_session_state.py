"""Tests for search session primitives and SearchState."""

import pytest

from cinesearch.core.search import CancellationToken, SearchState, normalize_query
from cinesearch.shared.errors import OperationCancelledError, SearchErrorKind, SearchFailure
from cinesearch.shared.models import CatalogItem


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("inception", "inception"),
        ("  star   wars ", "star wars"),
        ("\tthe\n matrix ", "the matrix"),
        ("   ", ""),
    ],
)
def test_normalize_query(raw, expected):
    assert normalize_query(raw) == expected


class TestCancellationToken:
    def test_raise_if_cancelled(self):
        token = CancellationToken()
        token.raise_if_cancelled()

        token.cancel()

        assert token.is_cancelled
        with pytest.raises(OperationCancelledError):
            token.raise_if_cancelled()


class TestSearchState:
    def test_evolve_returns_new_snapshot(self):
        """Test evolve leaves the original untouched and tuples results."""
        state = SearchState()
        item = CatalogItem(id="tt1", title="Inception")

        changed = state.evolve(results=[item], is_loading=True)

        assert state.results == ()
        assert changed.results == (item,)
        assert changed.is_loading is True

    def test_to_dict_uses_record_shape(self):
        state = SearchState(
            results=(CatalogItem(id="tt1", title="Inception"),),
            error=SearchFailure.of(SearchErrorKind.TIMEOUT),
            query="inception",
        )

        data = state.to_dict()

        assert data["results"][0]["imdbID"] == "tt1"
        assert data["error"]["kind"] == "timeout"
        assert data["query"] == "inception"
