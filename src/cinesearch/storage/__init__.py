"""Key-value storage adapters."""

from .kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore

__all__ = ["InMemoryKeyValueStore", "JsonFileKeyValueStore", "KeyValueStore"]
