"""Tests for the catalog data models."""

import dataclasses

import pytest

from cinesearch.shared.models import CatalogItem, RemotePage


class TestCatalogItem:
    """CatalogItem aliases and type normalization."""

    def test_reads_upstream_record_shape(self):
        item = CatalogItem.model_validate(
            {"imdbID": "tt1375666", "Title": "Inception", "Year": "2010", "Type": "movie"}
        )

        assert item.id == "tt1375666"
        assert item.title == "Inception"
        assert item.type == "movie"


class TestRemotePage:
    """RemotePage value semantics."""

    def test_defaults(self):
        page = RemotePage()

        assert page.items == []
        assert page.total_count == 0
        assert page.total_pages is None

    def test_is_immutable(self):
        """Test a returned page cannot be altered by its consumers."""
        page = RemotePage(items=[{"imdbID": "tt1"}], total_count=1, total_pages=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            page.total_count = 5
        with pytest.raises(dataclasses.FrozenInstanceError):
            page.items = []
