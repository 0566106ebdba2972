"""Autosuggestions from history, trending keywords and cached titles.

Suggestions are recomputed on a debounce timer for each keystroke. With
empty input the engine offers recent searches followed by trending
keywords. With text it fills the list in priority order: history prefix
matches, other history matches, fuzzy matches on cached titles and
finally trending keywords containing the text. Every stage skips strings
an earlier stage already picked.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Callable

from cinesearch.config.models import SuggestionSettings
from cinesearch.core.matching import FuzzyIndex
from cinesearch.core.suggestions.debouncer import Debouncer
from cinesearch.core.suggestions.trending import TrendingKeywordProvider
from cinesearch.services.result_cache import ResultCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestionState:
    suggestions: tuple[str, ...] = ()
    trending_keywords: tuple[str, ...] = ()


SuggestionListener = Callable[[SuggestionState], None]


class _Picker:
    """Collects unique strings up to a global cap."""

    def __init__(self, cap: int) -> None:
        self.cap = cap
        self.picked: list[str] = []

    @property
    def full(self) -> bool:
        return len(self.picked) >= self.cap

    def take(self, candidates: Iterable[str], limit: int) -> None:
        taken = 0
        for candidate in candidates:
            if taken >= limit or self.full:
                return
            if candidate and candidate not in self.picked:
                self.picked.append(candidate)
                taken += 1


class SuggestionEngine:
    """Debounced suggestion generator.

    Args:
        cache: Result cache the title index is built from
        trending: Trending keyword provider
        settings: Suggestion tuning
        index: Title index, built with the suggestion tuning by default
    """

    def __init__(
        self,
        cache: ResultCache,
        trending: TrendingKeywordProvider,
        settings: SuggestionSettings | None = None,
        index: FuzzyIndex | None = None,
    ) -> None:
        self.settings = settings or SuggestionSettings()
        self._cache = cache
        self._trending = trending
        self._index = index or FuzzyIndex(
            field_weights=self.settings.field_weights(),
            threshold=self.settings.threshold,
            min_match_char_length=self.settings.min_match_char_length,
        )
        self._cache.add_listener(self._index.mark_stale)
        self._debouncer = Debouncer(self.settings.debounce_seconds)
        self._state = SuggestionState()
        self._listeners: list[SuggestionListener] = []

    @property
    def state(self) -> SuggestionState:
        return self._state

    @property
    def suggestions(self) -> tuple[str, ...]:
        return self._state.suggestions

    @property
    def trending_keywords(self) -> tuple[str, ...]:
        return self._state.trending_keywords

    def add_listener(self, listener: SuggestionListener) -> None:
        self._listeners.append(listener)

    async def initialize(self) -> None:
        """Load trending keywords. Never raises."""
        keywords = await self._trending.get_keywords()
        self._publish(SuggestionState(self._state.suggestions, tuple(keywords)))
        logger.debug("Suggestion engine ready with %d trending keywords", len(keywords))

    def compute(self, text: str, history: Sequence[str]) -> list[str]:
        """Rank suggestions for the given input synchronously."""
        s = self.settings
        picker = _Picker(s.max_suggestions)
        query = text.strip().lower()
        trending = self._state.trending_keywords

        if not query:
            picker.take(history, s.max_recent_searches)
            picker.take(trending, s.max_trending_keywords)
            return picker.picked

        picker.take(
            (h for h in history if h.lower().startswith(query)),
            s.max_prefix_matches,
        )
        picker.take(
            (h for h in history if query in h.lower() and not h.lower().startswith(query)),
            s.max_partial_matches,
        )
        picker.take(self._title_matches(query), s.max_title_matches)
        picker.take((k for k in trending if query in k.lower()), s.max_trending_matches)
        return picker.picked

    def generate(self, text: str, history: Sequence[str]) -> asyncio.Task[None]:
        """Recompute suggestions after the debounce delay.

        Only the last call within the delay window produces a result.
        """
        snapshot = tuple(history)

        def run() -> None:
            suggestions = self.compute(text, snapshot)
            self._publish(SuggestionState(tuple(suggestions), self._state.trending_keywords))

        return self._debouncer.trigger(run)

    def close(self) -> None:
        """Cancel any pending computation."""
        self._debouncer.cancel()

    def _title_matches(self, query: str) -> list[str]:
        if self._index.needs_build():
            self._index.build(self._cache.snapshot())
        return [hit.item.title for hit in self._index.search(query) if hit.item.title]

    def _publish(self, state: SuggestionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
