"""Tests for the local blob backend and its storage adapters."""

import asyncio
import json
import tempfile
import time
from pathlib import Path

import pytest

from scholia.adapters.fs_storage import FsBlobStorage, MemoryBlobStorage
from scholia.adapters.local_backend import DEFAULT_STORAGE_KEY, LocalBackend
from scholia.core.errors import NotFoundError, StorageError
from scholia.core.model import StoreState
from scholia.store import NotesStore


@pytest.fixture
def data_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "data"


def _backend(storage, latency_ms=0):
    return LocalBackend(storage, latency_ms=latency_ms)


def test_first_list_seeds_two_examples():
    storage = MemoryBlobStorage()
    notes = asyncio.run(_backend(storage).list())

    assert [n.id for n in notes] == ["1", "2"]
    assert notes[0].title == "Welcome to Notes"
    stored = json.loads(storage.blobs[DEFAULT_STORAGE_KEY])
    assert [n["id"] for n in stored] == ["1", "2"]
    assert set(stored[0]) == {"id", "title", "content", "createdAt", "updatedAt"}


def test_empty_array_is_not_reseeded():
    storage = MemoryBlobStorage({DEFAULT_STORAGE_KEY: "[]"})
    assert asyncio.run(_backend(storage).list()) == []


def test_create_update_remove():
    storage = MemoryBlobStorage({DEFAULT_STORAGE_KEY: "[]"})
    backend = _backend(storage)

    async def scenario():
        created = await backend.create("Title", "Body")
        time.sleep(0.002)
        updated = await backend.update(created.id, {"title": "New"})
        listed = await backend.list()
        removed = await backend.remove(created.id)
        remaining = await backend.list()
        return created, updated, listed, removed, remaining

    created, updated, listed, removed, remaining = asyncio.run(scenario())

    assert created.created_at == created.updated_at
    assert updated.title == "New"
    assert updated.content == "Body"
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at
    assert listed == [updated]
    assert removed == updated
    assert remaining == []


def test_update_ignores_unknown_fields():
    storage = MemoryBlobStorage({DEFAULT_STORAGE_KEY: "[]"})
    backend = _backend(storage)

    async def scenario():
        note = await backend.create("t", "c")
        return note, await backend.update(note.id, {"id": "hijack", "createdAt": 0})

    note, updated = asyncio.run(scenario())
    assert updated.id == note.id
    assert updated.created_at == note.created_at


def test_missing_ids_raise_not_found():
    backend = _backend(MemoryBlobStorage({DEFAULT_STORAGE_KEY: "[]"}))
    with pytest.raises(NotFoundError):
        asyncio.run(backend.update("ghost", {"title": "x"}))
    with pytest.raises(NotFoundError):
        asyncio.run(backend.remove("ghost"))


def test_corrupt_blob_raises_storage_error():
    for raw in ("{not json", '{"id": "1"}'):
        backend = _backend(MemoryBlobStorage({DEFAULT_STORAGE_KEY: raw}))
        with pytest.raises(StorageError):
            asyncio.run(backend.list())


def test_undecodable_blob_raises_storage_error(data_dir):
    data_dir.mkdir(parents=True)
    (data_dir / f"{DEFAULT_STORAGE_KEY}.json").write_bytes(b"\xff\xfe[]")
    backend = _backend(FsBlobStorage(data_dir))

    with pytest.raises(StorageError, match="Failed to read notes"):
        asyncio.run(backend.list())
    assert backend.snapshot() == []


def test_write_failure_raises_storage_error():
    class FullStorage(MemoryBlobStorage):
        def write_raw(self, key, contents):
            raise OSError("No space left on device")

    backend = _backend(FullStorage({DEFAULT_STORAGE_KEY: "[]"}))
    with pytest.raises(StorageError, match="No space left"):
        asyncio.run(backend.create("a", "b"))


def test_latency_is_injected():
    backend = _backend(MemoryBlobStorage(), latency_ms=50)
    start = time.monotonic()
    asyncio.run(backend.list())
    assert time.monotonic() - start >= 0.045


def test_snapshot_does_not_seed():
    storage = MemoryBlobStorage()
    assert _backend(storage).snapshot() == []
    assert storage.blobs == {}


def test_snapshot_of_corrupt_blob_is_empty():
    storage = MemoryBlobStorage({DEFAULT_STORAGE_KEY: "oops"})
    assert _backend(storage).snapshot() == []


def test_fs_storage_round_trip(data_dir):
    storage = FsBlobStorage(data_dir)
    assert storage.read_raw("k") is None
    storage.write_raw("k", "[1, 2]")
    assert (data_dir / "k.json").read_text(encoding="utf-8") == "[1, 2]"
    storage.write_raw("k", "[]")
    assert storage.read_raw("k") == "[]"
    assert [p.name for p in data_dir.iterdir()] == ["k.json"]


def test_reload_restores_same_notes(data_dir):
    """Notes written through one store come back identical in a fresh one."""
    first = NotesStore(_backend(FsBlobStorage(data_dir)))

    async def write_notes():
        await first.load_notes()
        for i in range(3):
            await first.add_note(title=f"Title {i}", content=f"Content {i}")

    asyncio.run(write_notes())
    written = first.get_state().notes
    assert len(written) == 5

    restored_backend = _backend(FsBlobStorage(data_dir))
    second = NotesStore(restored_backend, StoreState(notes=tuple(restored_backend.snapshot())))
    assert second.get_state().notes == written

    asyncio.run(second.load_notes())
    assert second.get_state().notes == written
