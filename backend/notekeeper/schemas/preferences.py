"""User preference schemas."""
from enum import Enum

from notekeeper.schemas.base import CamelModel


class SortOption(str, Enum):
    """Order in which a user's notes are listed."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE_ASC = "titleAsc"
    TITLE_DESC = "titleDesc"


class UserPreferences(CamelModel):
    """Per-user preferences."""

    sort_option: SortOption = SortOption.NEWEST
