"""Asynchronous string key-value stores."""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
import logging

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeeper.database import get_db_context
from notekeeper.errors import StorageError
from notekeeper.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class KeyValueStore(ABC):
    """Durable mapping from string keys to string values.

    ``get`` of an absent key returns ``None``. Backend failures raise
    ``StorageError``.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        ...


class SqlKeyValueStore(KeyValueStore):
    """Key-value store backed by the ``kv_entries`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        try:
            async with self._session_factory() as db:
                entry = await db.get(KeyValueEntry, key)
                return entry.value if entry else None
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(f"Failed to read key '{key}': {exc}", "get") from exc

    async def set(self, key: str, value: str) -> None:
        """Insert or overwrite ``key`` in one statement."""
        now = datetime.now(timezone.utc).isoformat()
        try:
            async with get_db_context(self._session_factory) as db:
                insert = UPSERT_INSERTS[db.get_bind().dialect.name]
                statement = insert(KeyValueEntry).values(
                    key=key, value=value, created_at=now, updated_at=now,
                )
                await db.execute(statement.on_conflict_do_update(
                    index_elements=[KeyValueEntry.key],
                    set_={"value": statement.excluded.value, "updated_at": now},
                ))
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(f"Failed to write key '{key}': {exc}", "set") from exc
        logger.debug(f"Stored key {key} ({len(value)} chars)")

    async def remove(self, key: str) -> None:
        try:
            async with get_db_context(self._session_factory) as db:
                await db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(f"Failed to remove key '{key}': {exc}", "remove") from exc
        logger.debug(f"Removed key {key}")


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)
