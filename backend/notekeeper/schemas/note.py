"""Note schemas."""
from pydantic import Field, TypeAdapter

from notekeeper.schemas.base import CamelModel, now_ms


class Note(CamelModel):
    """A titled text entry with an optional image, owned by one user."""

    id: str
    title: str = ""
    body: str = ""
    image_uri: str | None = None
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)


NoteList = TypeAdapter(list[Note])
