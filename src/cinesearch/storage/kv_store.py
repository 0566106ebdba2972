"""Persistent key-value store boundary.

The search core persists the result cache, the quota state, search
history and trending keywords through a tiny string key-value interface.
Two adapters are provided: an in-memory store for tests and ephemeral
sessions, and a file-backed store writing one file per key.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

from cinesearch.shared.constants import FileSystem
from cinesearch.shared.errors import create_storage_error

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStore(Protocol):
    """String key-value storage consumed by the search core."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dictionary-backed store, nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class JsonFileKeyValueStore:
    """File-backed store, one ``<key>.json`` file per key.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace`` so a crash never leaves a half-written value.

    Args:
        directory: Directory holding the value files. Created on first write.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            msg = f"Invalid storage key: {key!r}"
            raise ValueError(msg)
        return self.directory / f"{key}{FileSystem.STORAGE_SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            with self._lock:
                return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise create_storage_error(
                f"Failed to read storage key '{key}': {e}",
                key,
                write=False,
                original_error=e,
            ) from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            with self._lock:
                self.directory.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.directory,
                    prefix=f".{key}.",
                    suffix=".tmp",
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                        tmp.write(value)
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
        except OSError as e:
            raise create_storage_error(
                f"Failed to write storage key '{key}': {e}",
                key,
                write=True,
                original_error=e,
            ) from e
        logger.debug("Persisted storage key %s (%d bytes)", key, len(value))

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            with self._lock:
                path.unlink(missing_ok=True)
        except OSError as e:
            raise create_storage_error(
                f"Failed to remove storage key '{key}': {e}",
                key,
                write=True,
                original_error=e,
            ) from e
