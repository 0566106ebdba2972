"""API configuration models (TMDB).

This module contains configuration models for the remote catalog,
backed by the TMDB API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from cinesearch.shared.constants import TMDBConfig as TMDBConstants


class TMDBSettings(BaseModel):
    """TMDB API configuration.

    Security: api_key is masked in __repr__ to prevent accidental
    exposure in logs.
    """

    api_key: str = Field(
        default="",
        repr=False,
        description="TMDB API key (required for remote lookups)",
    )
    language: str = Field(
        default=TMDBConstants.DEFAULT_LANGUAGE,
        description="Language code for TMDB requests",
    )
    region: str = Field(
        default=TMDBConstants.DEFAULT_REGION,
        description="Region code for TMDB requests",
    )
    image_base_url: str = Field(
        default=TMDBConstants.IMAGE_BASE_URL,
        description="Base URL prepended to poster paths",
    )

    def __repr__(self) -> str:
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"TMDBSettings("
            f"api_key={masked_key}, "
            f"language={self.language}, "
            f"region={self.region})"
        )


class APISettings(BaseModel):
    """API configuration container."""

    tmdb: TMDBSettings = Field(
        default_factory=TMDBSettings,
        description="TMDB API configuration",
    )


__all__ = [
    "APISettings",
    "TMDBSettings",
]
