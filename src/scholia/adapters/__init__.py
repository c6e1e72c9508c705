"""Concrete storage, codec and id-generation adapters."""

from .fs_storage import FsBlobStorage, MemoryBlobStorage
from .local_backend import LocalBackend
from .remote_backend import RemoteBackend

__all__ = [
    "FsBlobStorage",
    "MemoryBlobStorage",
    "LocalBackend",
    "RemoteBackend",
]
