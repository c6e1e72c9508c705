from typing import Any, Mapping, Protocol

from .model import Note, NoteId


class IdGenerator(Protocol):
    def new_id(self) -> NoteId:
        pass


class BlobStorage(Protocol):
    """
    Key/value store for serialized blobs. One key holds the whole note array.
    """

    def read_raw(self, key: str) -> str | None:
        pass

    def write_raw(self, key: str, contents: str) -> None:
        pass


class NotesBackend(Protocol):
    """
    CRUD over durable storage. Implementations return canonical `Note`
    records and raise `scholia.core.errors` types on failure.
    """

    async def list(self) -> list[Note]:
        pass

    async def create(self, title: str, content: str) -> Note:
        pass

    async def update(self, note_id: NoteId, patch: Mapping[str, Any]) -> Note:
        pass

    async def remove(self, note_id: NoteId) -> Note | None:
        pass

    async def aclose(self) -> None:
        pass
