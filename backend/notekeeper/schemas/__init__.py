"""Pydantic schemas package."""
from notekeeper.schemas.auth import LoginForm, PasswordStrength, SignUpForm, password_strength
from notekeeper.schemas.base import CamelModel, now_ms
from notekeeper.schemas.capture import CapturedAsset, CaptureResponse
from notekeeper.schemas.note import Note, NoteList
from notekeeper.schemas.preferences import SortOption, UserPreferences
from notekeeper.schemas.user import User, UserList

__all__ = [
    "CamelModel",
    "CaptureResponse",
    "CapturedAsset",
    "LoginForm",
    "Note",
    "NoteList",
    "PasswordStrength",
    "SignUpForm",
    "SortOption",
    "User",
    "UserList",
    "UserPreferences",
    "now_ms",
    "password_strength",
]
