"""scholia - a small notes client built around a single observable store."""

__version__ = "0.1.0"

from .core.errors import (
    ConfigError,
    NotFoundError,
    ScholiaError,
    StorageError,
    TransportError,
    ValidationError,
)
from .core.model import Note, StoreState
from .runtime import Runtime, build_runtime
from .store import NotesStore

__all__ = [
    "__version__",
    "Note",
    "StoreState",
    "NotesStore",
    "Runtime",
    "build_runtime",
    "ScholiaError",
    "ValidationError",
    "NotFoundError",
    "TransportError",
    "StorageError",
    "ConfigError",
]
