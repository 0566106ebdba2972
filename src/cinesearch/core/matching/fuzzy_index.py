"""Approximate-match index over cached catalog items.

Each searchable field is compared with rapidfuzz's ``partial_ratio`` so a
query matches anywhere inside the field and tolerates small edits. A field
shorter than the query is compared whole, with the edit count normalized
by the query length, so a short title is never slid along a longer query.
Field distances are combined into a single score where lower is better:

    distance = 1 - partial_ratio / 100          (field at least as long)
    distance = edits(query, field) / len(query)  (field shorter)
    score    = prod(max(distance, EPSILON) ** normalized_weight)

A field only contributes when its distance is within ``threshold`` and an
item is returned when at least one field does.

The index is rebuilt from a snapshot, never updated incrementally. The
owner marks it stale when the cache changes and callers rebuild it before
the next query.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from enum import Enum

from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein

from cinesearch.shared.constants import FuzzyIndexConfig
from cinesearch.shared.errors import create_validation_error
from cinesearch.shared.logging import log_operation_success
from cinesearch.shared.models import CatalogItem, ScoredItem

logger = logging.getLogger(__name__)

EPSILON = 0.001

DEFAULT_FIELD_WEIGHTS: dict[str, float] = {
    "title": FuzzyIndexConfig.TITLE_WEIGHT,
    "year": FuzzyIndexConfig.YEAR_WEIGHT,
    "genre": FuzzyIndexConfig.GENRE_WEIGHT,
}


class IndexStatus(str, Enum):
    """Lifecycle of the index relative to the cache it was built from."""

    ABSENT = "absent"
    STALE = "stale"
    CURRENT = "current"


def field_distance(query: str, value: str) -> float:
    """Distance between a lowercased query and a field value.

    Returns:
        0.0 for a perfect match up to 1.0 for no similarity
    """
    if not query or not value:
        return 1.0
    value = value.lower()
    if len(value) < len(query):
        return Levenshtein.normalized_distance(query, value)
    return 1.0 - fuzz.partial_ratio(query, value) / 100.0


class FuzzyIndex:
    """Weighted multi-field approximate matcher.

    Args:
        field_weights: Weight per CatalogItem attribute, normalized to sum to 1
        threshold: Maximum field distance still counted as a match (0..1)
        min_match_char_length: Queries shorter than this match nothing
    """

    def __init__(
        self,
        field_weights: Mapping[str, float] | None = None,
        threshold: float = FuzzyIndexConfig.THRESHOLD,
        min_match_char_length: int = FuzzyIndexConfig.MIN_MATCH_CHAR_LENGTH,
    ) -> None:
        weights = dict(field_weights or DEFAULT_FIELD_WEIGHTS)
        total = sum(w for w in weights.values() if w > 0)
        if total <= 0:
            raise create_validation_error(
                "At least one field weight must be positive",
                field="field_weights",
                operation="fuzzy_index_init",
            )
        if not 0.0 <= threshold <= 1.0:
            raise create_validation_error(
                f"threshold must be between 0 and 1, got: {threshold}",
                field="threshold",
                operation="fuzzy_index_init",
            )

        self.field_weights = {name: w / total for name, w in weights.items() if w > 0}
        self.threshold = threshold
        self.min_match_char_length = min_match_char_length
        self._entries: list[tuple[CatalogItem, dict[str, str]]] = []
        self._status = IndexStatus.ABSENT

    @property
    def status(self) -> IndexStatus:
        return self._status

    def __len__(self) -> int:
        return len(self._entries)

    def build(self, items: Iterable[CatalogItem]) -> None:
        """Replace the index content with a snapshot of items."""
        start = time.perf_counter()
        self._entries = [
            (
                item,
                {
                    name: str(getattr(item, name, "") or "").lower()
                    for name in self.field_weights
                },
            )
            for item in items
        ]
        self._status = IndexStatus.CURRENT
        log_operation_success(
            logger,
            "fuzzy_index_build",
            (time.perf_counter() - start) * 1000,
            {"items": len(self._entries)},
        )

    def mark_stale(self) -> None:
        """Flag the index for a rebuild before its next query."""
        if self._status is IndexStatus.CURRENT:
            self._status = IndexStatus.STALE

    def is_stale(self) -> bool:
        return self._status is IndexStatus.STALE

    def needs_build(self) -> bool:
        return self._status is not IndexStatus.CURRENT

    def search(self, query: str, limit: int | None = None) -> list[ScoredItem]:
        """Score every indexed item against the query.

        Args:
            query: Free text, compared case-insensitively
            limit: Maximum number of hits, None for all

        Returns:
            Hits sorted by ascending score. Ties keep index order.
        """
        if self._status is IndexStatus.STALE:
            logger.warning("Querying a stale index, results may miss recent items")

        needle = query.strip().lower()
        if len(needle) < self.min_match_char_length:
            return []

        hits: list[ScoredItem] = []
        for item, fields in self._entries:
            score = self._score(needle, fields)
            if score is not None:
                hits.append(ScoredItem(item=item, score=score))

        hits.sort(key=lambda hit: hit.score)
        if limit is not None:
            hits = hits[:limit]
        return hits

    def _score(self, needle: str, fields: dict[str, str]) -> float | None:
        score = 1.0
        matched = False
        for name, weight in self.field_weights.items():
            distance = field_distance(needle, fields[name])
            if distance > self.threshold:
                continue
            matched = True
            score *= max(distance, EPSILON) ** weight
        return score if matched else None
