"""Database engine and session management."""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from notekeeper.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_memory_database(database: str | None) -> bool:
    return not database or database == ":memory:"


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine for ``settings.database_url``.

    File-backed SQLite databases get their parent directory created; an
    in-memory SQLite database is pinned to one connection so every session
    sees the same data.
    """
    url = make_url(settings.database_url)
    kwargs = {"echo": settings.debug}

    if url.get_backend_name() == "sqlite":
        if _is_memory_database(url.database):
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(settings.database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    # Import all models so they're registered with Base
    from notekeeper import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug(f"Tables ready on {engine.url.render_as_string(hide_password=True)}")


@asynccontextmanager
async def get_db_context(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on success and rolls back on any error."""
    db = session_factory()
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    finally:
        await db.close()
