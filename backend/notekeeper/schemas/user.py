"""User record schemas."""
from pydantic import Field, TypeAdapter

from notekeeper.schemas.base import CamelModel, now_ms


class User(CamelModel):
    """Registered account as stored in the ``users`` registry."""

    username: str
    password_hash: str = Field(..., alias="password")
    created_at: int = Field(default_factory=now_ms)


UserList = TypeAdapter(list[User])
