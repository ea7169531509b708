"""Ports - interfaces/protocols for external dependencies."""

from .entry_store import EntryStore
from .kv_store import KeyValueStore

__all__ = [
    "EntryStore",
    "KeyValueStore",
]
