"""Persistence for entity collections."""

from tms.storage.backends import FileBackend, KeyValueBackend, MemoryBackend
from tms.storage.store import DEFAULT_KEY_PREFIX, PersistentStore

__all__ = [
    "KeyValueBackend",
    "FileBackend",
    "MemoryBackend",
    "PersistentStore",
    "DEFAULT_KEY_PREFIX",
]
