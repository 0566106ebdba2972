"""JSON encoding for values kept in the key-value store.

Values are encoded with orjson. Read helpers never raise: a missing,
unreadable or corrupted value is logged and reported as ``None`` so the
caller can start from empty state.
"""

from __future__ import annotations

import logging
from typing import Any

import orjson

from cinesearch.shared.errors import (
    CineSearchError,
    ErrorCode,
    ErrorContext,
    StorageError,
    create_storage_error,
)
from cinesearch.shared.logging import log_operation_error
from cinesearch.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def dumps(value: Any) -> str:
    """Encode a JSON-compatible value to a string."""
    return orjson.dumps(value).decode("utf-8")


def read_json(store: KeyValueStore, key: str) -> Any | None:
    """Read and decode a JSON value, returning None when unavailable.

    Args:
        store: Store to read from
        key: Storage key

    Returns:
        Decoded value, or None if the key is missing, unreadable or corrupted
    """
    try:
        raw = store.get(key)
    except StorageError as e:
        log_operation_error(logger, e, level=logging.WARNING)
        return None
    except OSError as e:
        log_operation_error(
            logger,
            create_storage_error(str(e), key, write=False, original_error=e),
            level=logging.WARNING,
        )
        return None

    if raw is None:
        return None

    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        error = CineSearchError(
            ErrorCode.CACHE_CORRUPTED,
            f"Stored value for '{key}' is not valid JSON, ignoring it",
            ErrorContext(operation="storage_read", key=key),
            original_error=e,
        )
        log_operation_error(logger, error, level=logging.WARNING)
        return None


def write_json(store: KeyValueStore, key: str, value: Any) -> bool:
    """Encode and write a JSON value. Failures are logged, not raised.

    Returns:
        True if the value was persisted
    """
    try:
        store.set(key, dumps(value))
    except StorageError as e:
        log_operation_error(logger, e, level=logging.WARNING)
        return False
    except (OSError, TypeError) as e:
        log_operation_error(
            logger,
            create_storage_error(str(e), key, write=True, original_error=e),
            level=logging.WARNING,
        )
        return False
    return True


def remove_key(store: KeyValueStore, key: str) -> bool:
    """Remove a key. Failures are logged, not raised.

    Returns:
        True if the key was removed
    """
    try:
        store.remove(key)
    except StorageError as e:
        log_operation_error(logger, e, level=logging.WARNING)
        return False
    except OSError as e:
        log_operation_error(
            logger,
            create_storage_error(str(e), key, write=True, original_error=e),
            level=logging.WARNING,
        )
        return False
    return True
