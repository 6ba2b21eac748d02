"""Search and ordering of note lists."""
from notekeeper.schemas.note import Note
from notekeeper.schemas.preferences import SortOption


def search_notes(notes: list[Note], query: str) -> list[Note]:
    """Notes whose title or body contains ``query``, ignoring case."""
    if not query.strip():
        return list(notes)
    needle = query.casefold()
    return [
        note for note in notes
        if needle in note.title.casefold() or needle in note.body.casefold()
    ]


def sort_notes(notes: list[Note], option: SortOption) -> list[Note]:
    """Ordered copy of ``notes``; ties keep their stored order."""
    if option == SortOption.NEWEST:
        return sorted(notes, key=lambda note: note.updated_at, reverse=True)
    if option == SortOption.OLDEST:
        return sorted(notes, key=lambda note: note.updated_at)
    if option == SortOption.TITLE_ASC:
        return sorted(notes, key=lambda note: (note.title or "").casefold())
    if option == SortOption.TITLE_DESC:
        return sorted(notes, key=lambda note: (note.title or "").casefold(), reverse=True)
    return list(notes)


def filter_and_sort(notes: list[Note], query: str, option: SortOption) -> list[Note]:
    return sort_notes(search_notes(notes, query), option)
