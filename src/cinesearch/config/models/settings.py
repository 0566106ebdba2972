"""CineSearch Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import toml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cinesearch.config.models.api_settings import APISettings
from cinesearch.config.models.app_settings import LoggingSettings, StorageSettings
from cinesearch.config.models.search_settings import (
    CacheSettings,
    HistorySettings,
    IndexSettings,
    RateLimitSettings,
    SearchSettings,
    SuggestionSettings,
)

logger = logging.getLogger(__name__)

TMDB_API_KEY_ENV = "TMDB_API_KEY"


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from (highest priority first) init kwargs or a TOML file,
    ``CINESEARCH_*`` environment variables, then the defaults in
    ``cinesearch.shared.constants``. Nested fields use ``__`` in
    environment variable names, e.g. ``CINESEARCH_SEARCH__PAGE_SIZE``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CINESEARCH_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    search: SearchSettings = Field(default_factory=SearchSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    index: IndexSettings = Field(default_factory=IndexSettings)
    suggestions: SuggestionSettings = Field(default_factory=SuggestionSettings)
    api: APISettings = Field(default_factory=APISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def _api_key_from_environment(self) -> Settings:
        # Plain TMDB_API_KEY is honoured when no prefixed value was given
        if not self.api.tmdb.api_key:
            env_key = os.environ.get(TMDB_API_KEY_ENV, "").strip()
            if env_key:
                self.api.tmdb.api_key = env_key
        return self

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file, falling back to the environment."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration from %s", file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
