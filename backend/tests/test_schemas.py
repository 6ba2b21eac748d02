import pytest
from pydantic import ValidationError

from notekeeper.schemas.auth import PasswordStrength, password_strength
from notekeeper.schemas.note import Note
from notekeeper.schemas.preferences import SortOption, UserPreferences
from notekeeper.schemas.user import User


def test_user_accepts_stored_and_python_field_names():
    stored = User.model_validate({"username": "alice", "password": "h", "createdAt": 5})
    built = User(username="alice", password_hash="h", created_at=5)

    assert stored == built
    assert built.model_dump(by_alias=True) == {"username": "alice", "password": "h", "createdAt": 5}


def test_note_defaults():
    note = Note(id="n1")

    assert note.title == ""
    assert note.body == ""
    assert note.image_uri is None
    assert note.created_at > 0


def test_sort_option_values():
    assert [option.value for option in SortOption] == ["newest", "oldest", "titleAsc", "titleDesc"]
    assert UserPreferences().sort_option == SortOption.NEWEST
    assert UserPreferences.model_validate({"sortOption": "titleAsc"}).sort_option == SortOption.TITLE_ASC


def test_unknown_sort_option_rejected():
    with pytest.raises(ValidationError):
        UserPreferences.model_validate({"sortOption": "random"})


@pytest.mark.parametrize("password, expected", [
    ("", PasswordStrength.EMPTY),
    ("abc", PasswordStrength.WEAK),
    ("abcd", PasswordStrength.MEDIUM),
    ("abcdefg", PasswordStrength.MEDIUM),
    ("abcdefgh", PasswordStrength.STRONG),
])
def test_password_strength(password, expected):
    assert password_strength(password) == expected
