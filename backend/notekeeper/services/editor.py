"""Note editing workflow: building, saving and deleting notes with their images."""
import logging
import secrets
import string

from notekeeper.errors import NoteValidationError
from notekeeper.schemas.base import now_ms
from notekeeper.schemas.capture import CaptureResponse
from notekeeper.schemas.note import Note
from notekeeper.services.assets import ImageAssetManager
from notekeeper.services.notes import NoteRepository

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_note_id() -> str:
    """``note_<epoch ms>_<9 random base-36 chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"note_{now_ms()}_{suffix}"


class NoteEditor:
    """What the create/edit screen does between the form and the repository.

    Image replacement imports the new file first and removes the old one only
    once the import succeeded, so a failed pick never loses the current image.
    """

    def __init__(self, notes: NoteRepository, assets: ImageAssetManager):
        self._notes = notes
        self._assets = assets

    async def build_note(
        self,
        username: str,
        title: str,
        body: str,
        image_uri: str | None = None,
        note_id: str | None = None,
    ) -> Note:
        """Trimmed note ready to save.

        Keeps ``created_at`` of an existing note with ``note_id``; raises
        ``NoteValidationError`` when title and body are both blank.
        """
        title, body = title.strip(), body.strip()
        if not title and not body:
            raise NoteValidationError("Note cannot be empty", "validate")

        now = now_ms()
        created_at = now
        if note_id:
            existing = await self._notes.get_note(username, note_id)
            if existing:
                created_at = existing.created_at
        else:
            note_id = new_note_id()

        return Note(
            id=note_id,
            title=title,
            body=body,
            image_uri=image_uri,
            created_at=created_at,
            updated_at=now,
        )

    async def save(
        self,
        username: str,
        title: str,
        body: str,
        image_uri: str | None = None,
        note_id: str | None = None,
    ) -> Note | None:
        """Create or update a note. None when it is empty or storage fails."""
        try:
            note = await self.build_note(username, title, body, image_uri, note_id)
        except NoteValidationError as exc:
            logger.info(f"Note not saved for {username}: {exc.message}")
            return None

        if not await self._notes.save_note(username, note):
            return None
        return note

    async def replace_image(self, current: str | None, source_uri: str) -> str | None:
        """Import ``source_uri`` and then delete ``current``.

        Returns the new asset path, or None when the import failed (in which
        case ``current`` is left untouched).
        """
        return await self._swap(current, await self._assets.import_asset(source_uri))

    async def replace_image_from_capture(self, current: str | None, response: CaptureResponse) -> str | None:
        return await self._swap(current, await self._assets.import_capture(response))

    async def _swap(self, current: str | None, new_path: str | None) -> str | None:
        if new_path is None:
            return None
        if current and current != new_path:
            await self._assets.delete_asset(current)
        return new_path

    async def remove_image(self, current: str | None) -> None:
        await self._assets.delete_asset(current)

    async def discard(self, image_uri: str | None, note_id: str | None = None) -> None:
        """Abandon a draft. Only a never-saved note's image is deleted."""
        if note_id is None and image_uri:
            await self._assets.delete_asset(image_uri)

    async def delete(self, username: str, note_id: str) -> bool:
        """Delete the note and then its image."""
        note = await self._notes.get_note(username, note_id)
        if not await self._notes.delete_note(username, note_id):
            return False
        if note and note.image_uri:
            await self._assets.delete_asset(note.image_uri)
        return True
