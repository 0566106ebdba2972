"""Catalog data models.

CatalogItem is the record shared by the result cache, the fuzzy index and
the presentation layer. It keeps the upstream record shape (``imdbID``,
``Title``, ``Year``...) through pydantic aliases so the persisted cache
round-trips without a migration step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cinesearch.shared.constants import FilterType

_KNOWN_TYPES = (FilterType.MOVIE, FilterType.SERIES)
OTHER_TYPE = "other"


class CatalogItem(BaseModel):
    """A single catalog entry.

    Identity is ``id``. Every other field may change between two fetches
    of the same item. Unknown upstream fields are kept as extras.

    Attributes:
        id: Stable unique identifier (``imdbID`` in the record shape)
        title: Display title
        year: Release year, or a year range for series ("2008-2013")
        type: "movie", "series" or "other"
        genre: Comma separated genre names, used only for scoring
        poster: Poster image URL, "N/A" when upstream has no image
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(alias="imdbID", min_length=1)
    title: str = Field(default="", alias="Title")
    year: str = Field(default="", alias="Year")
    type: str = Field(default=OTHER_TYPE, alias="Type")
    genre: str = Field(default="", alias="Genre")
    poster: str | None = Field(default=None, alias="Poster")

    @field_validator("id", "year", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> str:
        tag = str(value or "").strip().lower()
        return tag if tag in _KNOWN_TYPES else OTHER_TYPE

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> CatalogItem:
        """Build an item from an upstream or persisted record."""
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Serialize back to the upstream record shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ScoredItem:
    """Fuzzy index hit. Lower score means a better match."""

    item: CatalogItem
    score: float


@dataclass(frozen=True)
class RemotePage:
    """One page of remote catalog results.

    ``total_pages`` is set when the remote service reports its own page
    count, which can differ from the local page size.
    """

    items: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    total_pages: int | None = None
