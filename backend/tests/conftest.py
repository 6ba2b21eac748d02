"""Shared fixtures: a fresh on-disk database and wired services per test."""
import os
import sys

import pytest

os.environ.setdefault("NOTEKEEPER_BCRYPT_ROUNDS", "4")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from notekeeper.config import Settings
from notekeeper.database import create_engine, create_session_factory, init_db
from notekeeper.main import build_notekeeper
from notekeeper.storage import KeyedLock, SqlKeyValueStore


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notekeeper.db'}",
        data_dir=tmp_path,
        bcrypt_rounds=4,
        _env_file=None,
    )


@pytest.fixture
async def engine(settings):
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine):
    return SqlKeyValueStore(create_session_factory(engine))


@pytest.fixture
def locks():
    return KeyedLock()


@pytest.fixture
def notekeeper(settings, store, engine):
    return build_notekeeper(settings, store, engine)


@pytest.fixture
def image_file(tmp_path):
    """A small source image outside the asset directory."""
    source_dir = tmp_path / "camera"
    source_dir.mkdir()
    path = source_dir / "IMG_0001.JPG"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return path


@pytest.fixture
def failing_store():
    """In-memory store whose chosen operations raise StorageError."""
    from notekeeper.errors import StorageError
    from notekeeper.storage import InMemoryKeyValueStore

    class FailingStore(InMemoryKeyValueStore):
        def __init__(self):
            super().__init__()
            self.fail_on: set[str] = set()

        async def get(self, key):
            if "get" in self.fail_on:
                raise StorageError("backend unavailable", "get")
            return await super().get(key)

        async def set(self, key, value):
            if "set" in self.fail_on:
                raise StorageError("disk full", "set")
            await super().set(key, value)

        async def remove(self, key):
            if "remove" in self.fail_on:
                raise StorageError("backend unavailable", "remove")
            await super().remove(key)

    return FailingStore()
