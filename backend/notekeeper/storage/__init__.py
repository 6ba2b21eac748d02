"""Key-value storage backends."""
from notekeeper.storage.kv_store import InMemoryKeyValueStore, KeyValueStore, SqlKeyValueStore
from notekeeper.storage.locks import KeyedLock

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "KeyedLock",
    "SqlKeyValueStore",
]
