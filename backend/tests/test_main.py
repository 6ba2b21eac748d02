import json
import logging

import pytest

from notekeeper.errors import AssetError
from notekeeper.main import open_notekeeper
from notekeeper.observability import JSONFormatter, setup_logging
from notekeeper.schemas.preferences import SortOption, UserPreferences


@pytest.mark.asyncio
async def test_startup_creates_asset_directory(settings):
    async with open_notekeeper(settings) as app:
        assert settings.assets_dir.is_dir()
        assert await app.session.is_logged_in() is False


@pytest.mark.asyncio
async def test_startup_fails_when_asset_directory_cannot_be_created(settings, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    settings = settings.model_copy(update={"assets_dir": blocker / "notes_images"})

    with pytest.raises(AssetError) as exc_info:
        async with open_notekeeper(settings):
            pass
    assert exc_info.value.operation == "startup"


@pytest.mark.asyncio
async def test_state_survives_restart(settings, image_file):
    async with open_notekeeper(settings) as app:
        assert await app.credentials.register_user("alice", "secret") is True
        assert await app.session.login("alice", "secret") is True
        image = await app.assets.import_asset(str(image_file))
        note = await app.editor.save("alice", "Trip", "pack bags", image_uri=image)
        await app.preferences.set_preferences("alice", UserPreferences(sort_option=SortOption.OLDEST))

    async with open_notekeeper(settings) as app:
        assert await app.session.restore() == "alice"
        assert await app.notes.list_notes("alice") == [note]
        assert await app.assets.asset_exists(note.image_uri) is True
        prefs = await app.preferences.get_preferences("alice")
        assert prefs.sort_option == SortOption.OLDEST


def _ours(root):
    return [handler for handler in root.handlers if handler.get_name() == "notekeeper"]


def test_setup_logging_replaces_its_own_handler():
    root = logging.getLogger()
    level = root.level

    setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")

    try:
        assert len(_ours(root)) == 1
        assert not isinstance(_ours(root)[0].formatter, JSONFormatter)
        assert root.level == logging.WARNING
    finally:
        for handler in _ours(root):
            root.removeHandler(handler)
        root.setLevel(level)


def test_json_formatter():
    record = logging.LogRecord("notekeeper.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "notekeeper.test"
    assert payload["message"] == "hello world"
