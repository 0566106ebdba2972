"""Search domain configuration models.

Settings for the orchestrator, the result cache, the quota tracker,
search history, the fuzzy index and autosuggestions.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from cinesearch.shared.constants import (
    CacheConfig,
    FuzzyIndexConfig,
    HistoryConfig,
    RateLimitConfig,
    SearchConfig,
    SuggestionConfig,
)


class SearchSettings(BaseModel):
    """Search orchestration settings."""

    min_query_length: int = Field(
        default=SearchConfig.MIN_QUERY_LENGTH,
        ge=1,
        description="Minimum normalized query length",
    )
    page_size: int = Field(
        default=SearchConfig.PAGE_SIZE,
        gt=0,
        description="Results per page for local pagination",
    )
    sufficiency_threshold: int = Field(
        default=SearchConfig.SUFFICIENCY_THRESHOLD,
        ge=0,
        description="Local page-1 total at which the remote lookup is skipped",
    )
    max_local_results: int = Field(
        default=SearchConfig.MAX_LOCAL_RESULTS,
        gt=0,
        description="Maximum number of hits taken from the local index",
    )
    placeholder_poster_url: str = Field(
        default=SearchConfig.PLACEHOLDER_POSTER_URL,
        description="Poster URL used when upstream has no image",
    )


class CacheSettings(BaseModel):
    """Result cache settings."""

    max_size: int = Field(
        default=CacheConfig.MAX_SIZE,
        gt=0,
        description="Maximum number of cached catalog items",
    )


class RateLimitSettings(BaseModel):
    """Remote quota settings."""

    max_calls_per_window: int = Field(
        default=RateLimitConfig.MAX_CALLS_PER_WINDOW,
        gt=0,
        description="Remote calls allowed per window",
    )
    window_seconds: float = Field(
        default=RateLimitConfig.WINDOW_SECONDS,
        gt=0,
        description="Length of the quota window in seconds",
    )


class HistorySettings(BaseModel):
    """Search history settings."""

    max_size: int = Field(
        default=HistoryConfig.MAX_SIZE,
        gt=0,
        description="Maximum number of remembered queries",
    )


class IndexSettings(BaseModel):
    """Fuzzy index tuning for the main search."""

    threshold: float = Field(
        default=FuzzyIndexConfig.THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Field scores above this are not a match (0 = exact)",
    )
    min_match_char_length: int = Field(
        default=FuzzyIndexConfig.MIN_MATCH_CHAR_LENGTH,
        ge=1,
        description="Queries shorter than this never match",
    )
    title_weight: float = Field(default=FuzzyIndexConfig.TITLE_WEIGHT, ge=0.0)
    year_weight: float = Field(default=FuzzyIndexConfig.YEAR_WEIGHT, ge=0.0)
    genre_weight: float = Field(default=FuzzyIndexConfig.GENRE_WEIGHT, ge=0.0)

    @model_validator(mode="after")
    def _check_weights(self) -> IndexSettings:
        if self.title_weight + self.year_weight + self.genre_weight <= 0:
            msg = "At least one index field weight must be positive"
            raise ValueError(msg)
        return self

    def field_weights(self) -> dict[str, float]:
        return {
            "title": self.title_weight,
            "year": self.year_weight,
            "genre": self.genre_weight,
        }


class SuggestionSettings(BaseModel):
    """Autosuggestion settings."""

    debounce_seconds: float = Field(default=SuggestionConfig.DEBOUNCE_SECONDS, ge=0.0)
    max_suggestions: int = Field(default=SuggestionConfig.MAX_SUGGESTIONS, gt=0)
    max_recent_searches: int = Field(default=SuggestionConfig.MAX_RECENT_SEARCHES, ge=0)
    max_trending_keywords: int = Field(default=SuggestionConfig.MAX_TRENDING_KEYWORDS, ge=0)
    max_prefix_matches: int = Field(default=SuggestionConfig.MAX_PREFIX_MATCHES, ge=0)
    max_partial_matches: int = Field(default=SuggestionConfig.MAX_PARTIAL_MATCHES, ge=0)
    max_title_matches: int = Field(default=SuggestionConfig.MAX_TITLE_MATCHES, ge=0)
    max_trending_matches: int = Field(default=SuggestionConfig.MAX_TRENDING_MATCHES, ge=0)
    threshold: float = Field(default=SuggestionConfig.THRESHOLD, ge=0.0, le=1.0)
    min_match_char_length: int = Field(
        default=SuggestionConfig.MIN_MATCH_CHAR_LENGTH,
        ge=1,
    )
    title_weight: float = Field(default=SuggestionConfig.TITLE_WEIGHT, ge=0.0)
    year_weight: float = Field(default=SuggestionConfig.YEAR_WEIGHT, ge=0.0)
    trending_freshness_seconds: float = Field(
        default=SuggestionConfig.TRENDING_FRESHNESS_SECONDS,
        gt=0,
        description="How long cached trending keywords stay fresh",
    )

    def field_weights(self) -> dict[str, float]:
        return {"title": self.title_weight, "year": self.year_weight}


__all__ = [
    "CacheSettings",
    "HistorySettings",
    "IndexSettings",
    "RateLimitSettings",
    "SearchSettings",
    "SuggestionSettings",
]
