"""Error hierarchy and the structured outcome used at collaborator boundaries.

Public store operations never raise these: each one runs its collaborator
calls through ``attempt`` and flattens the resulting ``Outcome`` to a bool,
``None`` or a default value.
"""
from collections.abc import Awaitable
from dataclasses import dataclass
import logging
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotekeeperError(Exception):
    """Base exception for all Notekeeper failures."""

    code = "notekeeper_error"

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"[{self.code}:{self.operation}] {self.message}"
        return f"[{self.code}] {self.message}"


class StorageError(NotekeeperError):
    """Key-value backend read/write failed or returned unreadable data."""

    code = "storage_error"


class AssetError(NotekeeperError):
    """Image asset copy or removal failed."""

    code = "asset_error"


class NoteValidationError(NotekeeperError):
    """A note failed the editing rules (e.g. empty title and body)."""

    code = "note_invalid"


@dataclass
class Outcome(Generic[T]):
    """Result of one collaborator call: success flag, payload and cause."""

    ok: bool
    value: T | None = None
    cause: NotekeeperError | None = None


async def attempt(operation: str, call: Awaitable[T]) -> Outcome[T]:
    """Await ``call`` and capture a NotekeeperError as a failed Outcome."""
    try:
        return Outcome(ok=True, value=await call)
    except NotekeeperError as exc:
        logger.error(f"{operation} failed: {exc}")
        return Outcome(ok=False, cause=exc)
