"""Local persistence backend: one JSON array under a fixed storage key."""

import asyncio
import json
from typing import Any, Mapping

from ..core.errors import NotFoundError, StorageError
from ..core.model import Note, NoteId
from ..core.ports import BlobStorage, IdGenerator, NotesBackend
from ..core.utils import now_ms
from ..logging_config import get_logger
from .idgen import TimeRandomId
from .record_codec import normalize, normalize_many

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "notes_store_v1"
DEFAULT_LATENCY_MS = 300


def default_seed(now: int | None = None) -> list[Note]:
    """The two example notes written to an empty store on first use."""
    ts = now_ms() if now is None else now
    return [
        Note(
            id="1",
            title="Welcome to Notes",
            content="This is your first note. You can edit or delete it.",
            created_at=ts,
            updated_at=ts,
        ),
        Note(
            id="2",
            title="Second note",
            content="Keep track of ideas, todos, and more.",
            created_at=ts,
            updated_at=ts,
        ),
    ]


class LocalBackend(NotesBackend):
    """
    Read-modify-write over a single serialized blob.

    Every operation sleeps `latency_ms` first so callers see network-like
    timing (and the store's busy state) even without a server.
    """

    def __init__(
        self,
        storage: BlobStorage,
        key: str = DEFAULT_STORAGE_KEY,
        latency_ms: int = DEFAULT_LATENCY_MS,
        id_generator: IdGenerator | None = None,
    ):
        self.storage = storage
        self.key = key
        self.latency_ms = latency_ms
        self.idgen = id_generator or TimeRandomId()

    async def _delay(self) -> None:
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000)

    def _decode(self, raw: str) -> list[Note]:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Stored notes are not valid JSON: {e}", cause=e) from e
        if not isinstance(data, list):
            raise StorageError("Stored notes are not a list")
        return normalize_many(data, self.idgen)

    def _read(self) -> list[Note]:
        try:
            raw = self.storage.read_raw(self.key)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read notes: {e}", cause=e) from e
        if raw is None:
            seed = default_seed()
            self._write(seed)
            logger.info("notes_seeded", key=self.key, count=len(seed))
            return seed
        return self._decode(raw)

    def _write(self, notes: list[Note]) -> None:
        try:
            payload = json.dumps([n.to_dict() for n in notes], ensure_ascii=False)
            self.storage.write_raw(self.key, payload)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write notes: {e}", cause=e) from e

    def _index_of(self, notes: list[Note], note_id: NoteId) -> int:
        for i, note in enumerate(notes):
            if note.id == note_id:
                return i
        raise NotFoundError(note_id)

    def snapshot(self) -> list[Note]:
        """Current blob contents without latency or seeding; [] if unavailable."""
        try:
            raw = self.storage.read_raw(self.key)
            return [] if raw is None else self._decode(raw)
        except (OSError, UnicodeDecodeError, StorageError) as e:
            logger.warning("blob_unreadable", key=self.key, error=str(e))
            return []

    async def list(self) -> list[Note]:
        await self._delay()
        return self._read()

    async def create(self, title: str, content: str) -> Note:
        await self._delay()
        notes = self._read()
        now = now_ms()
        note = Note(
            id=self.idgen.new_id(),
            title=title or "",
            content=content or "",
            created_at=now,
            updated_at=now,
        )
        notes.append(note)
        self._write(notes)
        return note

    async def update(self, note_id: NoteId, patch: Mapping[str, Any]) -> Note:
        await self._delay()
        notes = self._read()
        idx = self._index_of(notes, note_id)
        merged = notes[idx].to_dict()
        for field in ("title", "content"):
            if patch.get(field) is not None:
                merged[field] = patch[field]
        merged["updatedAt"] = max(now_ms(), notes[idx].created_at)
        updated = normalize(merged, self.idgen)
        notes[idx] = updated
        self._write(notes)
        return updated

    async def remove(self, note_id: NoteId) -> Note | None:
        await self._delay()
        notes = self._read()
        removed = notes.pop(self._index_of(notes, note_id))
        self._write(notes)
        return removed

    async def aclose(self) -> None:
        return None
