"""Pure, derived views over a `StoreState` snapshot."""

from .core.model import Note, StoreState


def selected_note(state: StoreState) -> Note | None:
    return state.find(state.selected_note_id)


def _display_key(note: Note) -> tuple[int, str, str]:
    # newest first; then title A-Z ignoring case; id makes the order total
    return (-note.updated_at, note.title.casefold(), note.id)


def sorted_notes(state: StoreState) -> list[Note]:
    """Notes by updated_at descending, ties broken by title then id."""
    return sorted(state.notes, key=_display_key)


def is_loading(state: StoreState) -> bool:
    return bool(state.loading)


def get_error(state: StoreState) -> str | None:
    return state.error
