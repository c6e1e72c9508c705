"""Error taxonomy shared by the store and its persistence backends."""

from typing import Any


class ScholiaError(Exception):
    """Base class for all scholia errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(ScholiaError):
    """Missing or invalid argument, detected before any I/O."""


class NotFoundError(ScholiaError):
    """The backend has no record with the requested id."""

    def __init__(self, note_id: str, status: int | None = None, body: Any = None):
        super().__init__(f"Note not found: {note_id}")
        self.note_id = note_id
        self.status = status
        self.body = body


class TransportError(ScholiaError):
    """Network failure, non-2xx response or undecodable body (remote backend)."""

    def __init__(self, message: str, status: int | None = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class StorageError(ScholiaError):
    """Local blob could not be read, decoded or written (local backend)."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ConfigError(ScholiaError):
    """scholia.toml or a SCHOLIA_* variable could not be parsed."""
