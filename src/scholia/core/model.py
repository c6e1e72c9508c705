from __future__ import annotations

from dataclasses import dataclass
from typing import Any

NoteId = str


@dataclass(frozen=True)
class Note:
    id: NoteId
    title: str = ""
    content: str = ""
    created_at: int = 0  # epoch milliseconds
    updated_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Canonical wire/blob shape (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class StoreState:
    """
    Immutable snapshot of the notes store.

    `notes` keeps insertion order, not display order; use
    `scholia.selectors.sorted_notes` for the latter.
    """

    notes: tuple[Note, ...] = ()
    selected_note_id: NoteId | None = None
    loading: bool = False
    error: str | None = None

    def find(self, note_id: NoteId | None) -> Note | None:
        if note_id is None:
            return None
        for note in self.notes:
            if note.id == note_id:
                return note
        return None
