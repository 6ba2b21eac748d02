"""Notekeeper - local account and note storage core."""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from notekeeper.config import Settings, get_settings
from notekeeper.database import create_engine, create_session_factory, init_db
from notekeeper.errors import AssetError
from notekeeper.observability import setup_logging
from notekeeper.services.assets import ImageAssetManager
from notekeeper.services.credentials import CredentialStore
from notekeeper.services.editor import NoteEditor
from notekeeper.services.notes import NoteRepository
from notekeeper.services.preferences import PreferenceStore
from notekeeper.services.session import AuthSession
from notekeeper.storage import KeyedLock, KeyValueStore, SqlKeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class Notekeeper:
    """Wired services handed to the presentation layer."""

    settings: Settings
    store: KeyValueStore
    credentials: CredentialStore
    notes: NoteRepository
    preferences: PreferenceStore
    assets: ImageAssetManager
    session: AuthSession
    editor: NoteEditor
    engine: AsyncEngine | None = None


def build_notekeeper(
    settings: Settings,
    store: KeyValueStore,
    engine: AsyncEngine | None = None,
) -> Notekeeper:
    """Wire every service on top of ``store``."""
    locks = KeyedLock()
    credentials = CredentialStore(store, locks, bcrypt_rounds=settings.bcrypt_rounds)
    notes = NoteRepository(store, locks)
    assets = ImageAssetManager(settings.assets_dir)
    return Notekeeper(
        settings=settings,
        store=store,
        credentials=credentials,
        notes=notes,
        preferences=PreferenceStore(store),
        assets=assets,
        session=AuthSession(credentials),
        editor=NoteEditor(notes, assets),
        engine=engine,
    )


@asynccontextmanager
async def open_notekeeper(settings: Settings | None = None) -> AsyncIterator[Notekeeper]:
    """Application lifespan.

    Startup: configure logging, create tables and the asset directory, read
    the persisted session. Startup fails with ``AssetError`` when the asset
    directory cannot be created. Shutdown: dispose of the engine.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    engine = create_engine(settings)
    try:
        await init_db(engine)
        app = build_notekeeper(settings, SqlKeyValueStore(create_session_factory(engine)), engine)
        if await app.assets.ensure_asset_directory() is None:
            raise AssetError(f"Cannot create asset directory {settings.assets_dir}", "startup")

        current = await app.session.restore()
        logger.info(f"{settings.app_name} ready (logged in: {current or 'nobody'})")
        yield app
    finally:
        await engine.dispose()
