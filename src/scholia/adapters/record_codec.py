"""Normalize loosely-shaped note payloads into canonical `Note` records."""

import math
from datetime import datetime, timezone
from typing import Any, Mapping

from ..core.model import Note
from ..core.ports import IdGenerator
from ..core.utils import now_ms
from .idgen import TimeRandomId

_default_ids = TimeRandomId()


def new_id() -> str:
    """Mint an id for a client-created note."""
    return _default_ids.new_id()


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except ValueError:
        # ints past the interpreter's digit limit
        return ""


def _as_timestamp(value: Any) -> int | None:
    """Epoch milliseconds from a number, numeric string or ISO-8601 string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        pass
    else:
        return int(number) if math.isfinite(number) else None

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def normalize(raw: Any, id_generator: IdGenerator | None = None, now: int | None = None) -> Note:
    """
    Coerce any payload into a well-formed Note. Never raises.

    - missing/empty id -> freshly minted id
    - title/content -> str, defaulting to ""
    - createdAt/updatedAt (or created_at/updated_at) -> epoch ms; a missing
      updatedAt becomes `now`, a missing createdAt becomes the earlier of
      updatedAt and `now`
    - updatedAt is raised to createdAt if it would precede it
    """
    if not isinstance(raw, Mapping):
        raw = {}
    if now is None:
        now = now_ms()

    note_id = _as_text(raw.get("id"))
    if not note_id:
        note_id = (id_generator or _default_ids).new_id()

    created = _as_timestamp(_pick(raw, "createdAt", "created_at"))
    updated = _as_timestamp(_pick(raw, "updatedAt", "updated_at"))
    if updated is None:
        updated = now
    if created is None:
        created = min(updated, now)
    if updated < created:
        updated = created

    return Note(
        id=note_id,
        title=_as_text(raw.get("title")),
        content=_as_text(raw.get("content")),
        created_at=created,
        updated_at=updated,
    )


def normalize_many(items: Any, id_generator: IdGenerator | None = None) -> list[Note]:
    """Normalize every mapping entry of a sequence, skipping anything else."""
    if not isinstance(items, (list, tuple)):
        return []
    return [normalize(item, id_generator) for item in items if isinstance(item, Mapping)]
