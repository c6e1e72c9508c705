"""Shared fixtures: an in-memory backend the store can be driven against."""

import asyncio
import itertools
import logging
from typing import Any, Mapping

import pytest
import structlog

from scholia.core.errors import NotFoundError
from scholia.core.model import Note


class FakeBackend:
    """
    In-memory NotesBackend. `fail_with` makes the next call raise; `gate`
    (an asyncio.Event) holds every call until it is set.
    """

    def __init__(self, notes: list[Note] | None = None):
        self.notes: list[Note] = list(notes or [])
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: Exception | None = None
        self.gate: asyncio.Event | None = None
        self._ids = itertools.count(1)
        self._clock = itertools.count(1000, 10)
        self.closed = False

    async def _enter(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc

    def _find(self, note_id: str) -> int:
        for i, n in enumerate(self.notes):
            if n.id == note_id:
                return i
        raise NotFoundError(note_id)

    async def list(self) -> list[Note]:
        await self._enter("list")
        return list(self.notes)

    async def create(self, title: str, content: str) -> Note:
        await self._enter("create", (title, content))
        ts = next(self._clock)
        note = Note(id=f"n{next(self._ids)}", title=title, content=content, created_at=ts, updated_at=ts)
        self.notes.append(note)
        return note

    async def update(self, note_id: str, patch: Mapping[str, Any]) -> Note:
        await self._enter("update", (note_id, dict(patch)))
        idx = self._find(note_id)
        old = self.notes[idx]
        note = Note(
            id=old.id,
            title=patch.get("title", old.title),
            content=patch.get("content", old.content),
            created_at=old.created_at,
            updated_at=next(self._clock),
        )
        self.notes[idx] = note
        return note

    async def remove(self, note_id: str) -> Note | None:
        await self._enter("remove", note_id)
        return self.notes.pop(self._find(note_id))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _restore_logging():
    """configure_logging() touches process-wide state; undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def recorder():
    """Subscriber that keeps every snapshot it receives."""

    class Recorder:
        def __init__(self):
            self.states = []

        def __call__(self, state):
            self.states.append(state)

    return Recorder()
