"""Per-user preference store."""
import logging

from pydantic import ValidationError

from notekeeper.errors import StorageError, attempt
from notekeeper.schemas.preferences import UserPreferences
from notekeeper.storage import KeyValueStore

logger = logging.getLogger(__name__)


def preferences_key(username: str) -> str:
    return f"user_preferences_{username}"


class PreferenceStore:
    def __init__(self, store: KeyValueStore):
        self._store = store

    async def _load(self, username: str) -> UserPreferences:
        raw = await self._store.get(preferences_key(username))
        if raw is None:
            return UserPreferences()
        try:
            return UserPreferences.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Preferences for {username} are unreadable: {exc}", "decode") from exc

    async def get_preferences(self, username: str) -> UserPreferences:
        """Stored preferences, or the defaults when none are stored."""
        outcome = await attempt("get preferences", self._load(username))
        return outcome.value if outcome.ok else UserPreferences()

    async def set_preferences(self, username: str, preferences: UserPreferences) -> None:
        await attempt(
            "set preferences",
            self._store.set(preferences_key(username), preferences.model_dump_json(by_alias=True)),
        )
