"""Local approximate matching."""

from .fuzzy_index import FuzzyIndex, IndexStatus, field_distance
from .genre_filter import is_genre_query

__all__ = ["FuzzyIndex", "IndexStatus", "field_distance", "is_genre_query"]
