"""Adapters - I/O implementations of ports."""

from .file_store import FileKeyValueStore, StorageError
from .kv_entries import KeyValueEntryStore, EntryNotFoundError

__all__ = [
    "FileKeyValueStore",
    "StorageError",
    "KeyValueEntryStore",
    "EntryNotFoundError",
]
