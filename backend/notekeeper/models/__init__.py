"""SQLAlchemy models package."""
from notekeeper.models.kv_entry import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
