"""Per-user note repository."""
import logging

from pydantic import ValidationError

from notekeeper.errors import StorageError, attempt
from notekeeper.schemas.note import Note, NoteList
from notekeeper.storage import KeyedLock, KeyValueStore

logger = logging.getLogger(__name__)


def notes_key(username: str) -> str:
    return f"user_{username}_notes"


class NoteRepository:
    """Stores each user's notes as one JSON array under ``user_<name>_notes``.

    Every save or delete loads the whole collection, changes it in memory and
    writes it back while holding that user's lock. The repository does not
    validate note content and does not touch timestamps.
    """

    def __init__(self, store: KeyValueStore, locks: KeyedLock | None = None):
        self._store = store
        self._locks = locks or KeyedLock()

    async def _load(self, username: str) -> list[Note]:
        raw = await self._store.get(notes_key(username))
        if raw is None:
            return []
        try:
            return NoteList.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Notes for {username} are unreadable: {exc}", "decode") from exc

    async def _write(self, username: str, notes: list[Note]) -> None:
        await self._store.set(notes_key(username), NoteList.dump_json(notes, by_alias=True).decode("utf-8"))

    async def list_notes(self, username: str) -> list[Note]:
        """All notes of ``username`` in stored order; empty when there are none."""
        outcome = await attempt("list notes", self._load(username))
        return outcome.value if outcome.ok else []

    async def get_note(self, username: str, note_id: str) -> Note | None:
        for note in await self.list_notes(username):
            if note.id == note_id:
                return note
        return None

    async def save_note(self, username: str, note: Note) -> bool:
        """Replace the note with the same id in place, or append a new one."""
        async with self._locks.hold(notes_key(username)):
            outcome = await attempt("save note", self._save(username, note))
        return outcome.ok

    async def _save(self, username: str, note: Note) -> None:
        notes = await self._load(username)
        for index, existing in enumerate(notes):
            if existing.id == note.id:
                notes[index] = note
                break
        else:
            notes.append(note)
        await self._write(username, notes)
        logger.debug(f"Saved note {note.id} for {username} ({len(notes)} total)")

    async def delete_note(self, username: str, note_id: str) -> bool:
        """Drop the note with ``note_id``.

        Returns True when the collection was written, including when no note
        had that id. False only when storage fails.
        """
        async with self._locks.hold(notes_key(username)):
            outcome = await attempt("delete note", self._delete(username, note_id))
        return outcome.ok

    async def _delete(self, username: str, note_id: str) -> None:
        notes = await self._load(username)
        remaining = [note for note in notes if note.id != note_id]
        if len(remaining) == len(notes):
            logger.info(f"Delete of unknown note {note_id} for {username}")
        await self._write(username, remaining)
