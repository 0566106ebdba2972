"""Unit tests for FuzzyIndex and genre bypass detection."""

import pytest

from cinesearch.core.matching import FuzzyIndex, IndexStatus, field_distance, is_genre_query
from cinesearch.shared.constants import FuzzyIndexConfig
from cinesearch.shared.errors import DomainError
from cinesearch.shared.models import CatalogItem


def _item(item_id, title, year="2000", genre=""):
    return CatalogItem(id=item_id, title=title, year=year, type="movie", genre=genre)


@pytest.fixture
def catalog_items():
    return [
        _item("tt1", "Zodiac", "2007", "Crime, Drama"),
        _item("tt2", "Batman Begins", "2005", "Action"),
        _item("tt3", "Inception", "2010", "Action, Science Fiction"),
        _item("tt4", "The Dark Knight", "2008", "Action, Crime"),
    ]


class TestFieldDistance:
    """Test cases for field_distance."""

    def test_exact_substring_is_zero(self):
        """Test a substring anywhere in the field is a perfect match."""
        assert field_distance("dark knight", "The Dark Knight") == 0.0

    def test_empty_values_do_not_match(self):
        """Test empty query or field is maximal distance."""
        assert field_distance("", "Inception") == 1.0
        assert field_distance("inception", "") == 1.0

    def test_short_field_inside_query_is_not_a_match(self):
        """Test a short value contained in a longer query stays above the threshold."""
        assert field_distance("superman", "Up") > FuzzyIndexConfig.THRESHOLD
        assert field_distance("heroes", "Her") > FuzzyIndexConfig.THRESHOLD
        assert field_distance("star wars", "War") > FuzzyIndexConfig.THRESHOLD

    def test_short_field_with_typo_still_matches(self):
        """Test a field one edit shorter than the query is within the threshold."""
        assert field_distance("upp", "Up") <= FuzzyIndexConfig.THRESHOLD


class TestFuzzyIndex:
    """Test cases for FuzzyIndex."""

    def test_lifecycle(self, catalog_items):
        """Test absent, current and stale transitions."""
        index = FuzzyIndex()
        assert index.status is IndexStatus.ABSENT
        assert index.needs_build()

        index.mark_stale()
        assert index.status is IndexStatus.ABSENT

        index.build(catalog_items)
        assert index.status is IndexStatus.CURRENT
        assert not index.is_stale()
        assert len(index) == 4

        index.mark_stale()
        assert index.is_stale()
        assert index.needs_build()

    def test_case_insensitive_location_independent(self, catalog_items):
        """Test a lowercase query matches in the middle of a title."""
        index = FuzzyIndex()
        index.build(catalog_items)

        hits = index.search("DARK KNIGHT")

        assert hits[0].item.id == "tt4"

    def test_tolerates_typos(self, catalog_items):
        """Test minor edits still match."""
        index = FuzzyIndex()
        index.build(catalog_items)

        hits = index.search("incepton")

        assert [hit.item.id for hit in hits][:1] == ["tt3"]

    def test_results_sorted_by_ascending_score(self, catalog_items):
        """Test better matches come first and scores are non-decreasing."""
        index = FuzzyIndex()
        index.build(catalog_items)

        hits = index.search("batman")

        assert hits[0].item.id == "tt2"
        scores = [hit.score for hit in hits]
        assert scores == sorted(scores)

    def test_unrelated_query_matches_nothing(self, catalog_items):
        """Test candidates beyond the threshold are excluded."""
        index = FuzzyIndex()
        index.build(catalog_items)

        assert index.search("xqxqxq") == []

    def test_query_shorter_than_min_match_length(self, catalog_items):
        """Test too-short queries return nothing."""
        index = FuzzyIndex(min_match_char_length=2)
        index.build(catalog_items)

        assert index.search("z") == []

    def test_limit(self, catalog_items):
        """Test the limit truncates the hit list."""
        index = FuzzyIndex()
        index.build(catalog_items)

        assert len(index.search("action", limit=2)) == 2

    def test_year_field_matches(self, catalog_items):
        """Test the year is searchable."""
        index = FuzzyIndex()
        index.build(catalog_items)

        assert index.search("2007")[0].item.id == "tt1"

    def test_build_replaces_content(self, catalog_items):
        """Test a rebuild reflects the new snapshot only."""
        index = FuzzyIndex()
        index.build(catalog_items)
        index.build([_item("tt9", "Memento")])

        assert index.search("inception") == []
        assert index.search("memento")[0].item.id == "tt9"

    def test_longer_query_does_not_match_contained_short_title(self):
        """Test short titles and genres inside a longer query are not hits."""
        index = FuzzyIndex()
        index.build(
            [
                _item("tt10", "Up", "2009", "Animation"),
                _item("tt11", "Her", "2013", "Romance"),
                _item("tt12", "Fury", "2014", "War"),
            ]
        )

        assert index.search("superman") == []
        assert index.search("heroes") == []
        assert index.search("star wars") == []
        assert index.search("up")[0].item.id == "tt10"

    def test_invalid_configuration(self):
        """Test weights and threshold are validated."""
        with pytest.raises(DomainError):
            FuzzyIndex(field_weights={"title": 0.0})
        with pytest.raises(DomainError):
            FuzzyIndex(threshold=1.5)


class TestGenreQuery:
    """Test cases for is_genre_query."""

    @pytest.mark.parametrize(
        "term",
        ["comedy", "Comedy", "  horror ", "horrors", "thrillers", "Sci-Fi", "science fiction"],
    )
    def test_genre_keywords(self, term):
        """Test keywords and naive plurals are detected."""
        assert is_genre_query(term) is True

    @pytest.mark.parametrize("term", ["", "inception", "comedy central", "horrorshow", "drama queen"])
    def test_non_genre_queries(self, term):
        """Test titles and partial keyword matches are not genre queries."""
        assert is_genre_query(term) is False
