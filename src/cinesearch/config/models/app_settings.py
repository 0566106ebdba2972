"""Application-level configuration models (storage, logging)."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from cinesearch.shared.constants import FileSystem


def _default_data_dir() -> Path:
    return Path.home() / FileSystem.HOME_DIR / FileSystem.STORAGE_DIR


class StorageSettings(BaseModel):
    """Persistent key-value store location."""

    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Directory holding one JSON file per storage key",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Optional JSON log file")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Invalid log level: {value}"
            raise ValueError(msg)
        return level


__all__ = [
    "LoggingSettings",
    "StorageSettings",
]
