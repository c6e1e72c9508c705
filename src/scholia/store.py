"""
Notes store: the single source of truth for notes and selection.

Actions follow one protocol:

    entry       loading=True, error=None      -> emit
    backend I/O (awaited)
    success     merge result into notes       -> emit
    failure     error=<message>               -> emit
    completion  loading recomputed            -> emit

Overlapping actions are allowed to interleave. Each merge is applied to the
state current at merge time, and `loading` stays True until the last
in-flight action completes.
"""

from collections import deque
from dataclasses import replace
from itertools import count
from typing import Any, Awaitable, Callable, Mapping

from . import selectors
from .adapters.record_codec import normalize
from .core.errors import ValidationError
from .core.model import Note, NoteId, StoreState
from .core.ports import IdGenerator, NotesBackend
from .logging_config import get_logger

logger = get_logger(__name__)

Subscriber = Callable[[StoreState], Any]


class NotesStore:
    def __init__(
        self,
        backend: NotesBackend,
        initial_state: StoreState | None = None,
        id_generator: IdGenerator | None = None,
    ):
        self.backend = backend
        self.idgen = id_generator
        self._state = initial_state or StoreState()
        self._subscribers: dict[int, Subscriber] = {}
        self._tokens = count()
        self._pending: deque[StoreState] = deque()
        self._emitting = False
        self._in_flight = 0

    # -- state & subscription -------------------------------------------------

    def get_state(self) -> StoreState:
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register `callback`; it is called right away with the current state and
        then once per change. Returns an idempotent unsubscribe function that is
        safe to call from inside a callback.
        """
        token = next(self._tokens)
        self._subscribers[token] = callback
        self._notify(callback, self._state)

        def unsubscribe() -> None:
            self._subscribers.pop(token, None)

        return unsubscribe

    def _notify(self, callback: Subscriber, state: StoreState) -> None:
        try:
            callback(state)
        except Exception:
            logger.exception("subscriber_failed", callback=getattr(callback, "__qualname__", repr(callback)))

    def _emit(self) -> None:
        # Changes made by subscribers while a round is running are queued so
        # every subscriber sees every snapshot, in order.
        self._pending.append(self._state)
        if self._emitting:
            return
        self._emitting = True
        try:
            while self._pending:
                state = self._pending.popleft()
                for token in list(self._subscribers):
                    callback = self._subscribers.get(token)
                    if callback is not None:
                        self._notify(callback, state)
        finally:
            self._emitting = False

    def _set_state(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        self._emit()

    # -- action plumbing --------------------------------------------------------

    def _coerce(self, record: Any) -> Note:
        return record if isinstance(record, Note) else normalize(record, self.idgen)

    async def _run(
        self,
        action: str,
        call: Callable[[], Awaitable[Any]],
        merge: Callable[[Any], None],
    ) -> bool:
        self._in_flight += 1
        self._set_state(loading=True, error=None)
        ok = False
        try:
            result = await call()
            merge(result)
            ok = True
        except Exception as e:
            message = str(e) or "Unknown error"
            logger.warning("action_failed", action=action, error=message, error_type=type(e).__name__)
            self._set_state(error=message)
        finally:
            self._in_flight -= 1
            self._set_state(loading=self._in_flight > 0)
        return ok

    # -- actions ---------------------------------------------------------------

    async def load_notes(self) -> list[Note]:
        """Replace all notes with the backend's list; clears a stale selection."""
        loaded: list[Note] = []

        def merge(result: Any) -> None:
            seen: set[NoteId] = set()
            for record in result or []:
                note = self._coerce(record)
                if note.id in seen:
                    continue
                seen.add(note.id)
                loaded.append(note)
            selected = self._state.selected_note_id
            if selected is not None and selected not in seen:
                selected = None
            self._set_state(notes=tuple(loaded), selected_note_id=selected)

        await self._run("load_notes", self.backend.list, merge)
        return loaded

    async def add_note(self, title: str | None = "", content: str | None = "") -> Note | None:
        """Create a note, append it and select it. Returns the new note."""
        created: list[Note] = []

        def merge(result: Any) -> None:
            note = self._coerce(result)
            created.append(note)
            notes = tuple(n for n in self._state.notes if n.id != note.id) + (note,)
            self._set_state(notes=notes, selected_note_id=note.id)

        await self._run(
            "add_note",
            lambda: self.backend.create(title or "", content or ""),
            merge,
        )
        return created[0] if created else None

    def update_note(
        self, note_id: NoteId | None, title: str | None = None, content: str | None = None
    ) -> Awaitable[Note | None]:
        """
        Patch a note's title and/or content. Fields left as None are kept.

        Raises ValidationError immediately (no state change) for a falsy id.
        """
        if not note_id:
            raise ValidationError("update_note requires an id")
        patch: dict[str, str] = {}
        if title is not None:
            patch["title"] = title
        if content is not None:
            patch["content"] = content
        return self._update(note_id, patch)

    async def _update(self, note_id: NoteId, patch: Mapping[str, str]) -> Note | None:
        updated: list[Note] = []

        def merge(result: Any) -> None:
            note = self._coerce(result)
            updated.append(note)
            notes = self._state.notes
            if any(n.id == note.id for n in notes):
                notes = tuple(note if n.id == note.id else n for n in notes)
            else:
                notes = notes + (note,)
            self._set_state(notes=notes)

        await self._run("update_note", lambda: self.backend.update(note_id, patch), merge)
        return updated[0] if updated else None

    def delete_note(self, note_id: NoteId | None) -> Awaitable[bool]:
        """
        Delete a note. If it was selected, selection moves to the first
        remaining note, or None.

        Raises ValidationError immediately (no state change) for a falsy id.
        """
        if not note_id:
            raise ValidationError("delete_note requires an id")
        return self._delete(note_id)

    async def _delete(self, note_id: NoteId) -> bool:
        def merge(result: Any) -> None:
            notes = tuple(n for n in self._state.notes if n.id != note_id)
            selected = self._state.selected_note_id
            if selected == note_id:
                selected = notes[0].id if notes else None
            self._set_state(notes=notes, selected_note_id=selected)

        return await self._run("delete_note", lambda: self.backend.remove(note_id), merge)

    def select_note(self, note_id: NoteId | None) -> None:
        """Synchronous; unknown ids leave the selection alone and set `error`."""
        if note_id is None:
            self._set_state(selected_note_id=None)
            return
        if self._state.find(note_id) is None:
            self._set_state(error=f"Note not found: {note_id}")
            return
        self._set_state(selected_note_id=note_id, error=None)

    # -- selectors over the live state -----------------------------------------

    def selected_note(self) -> Note | None:
        return selectors.selected_note(self._state)

    def sorted_notes(self) -> list[Note]:
        return selectors.sorted_notes(self._state)

    def is_loading(self) -> bool:
        return selectors.is_loading(self._state)

    def get_error(self) -> str | None:
        return selectors.get_error(self._state)
