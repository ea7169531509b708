"""Durable key-value storage interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for local string storage."""

    def get(self, key: str) -> str | None:
        """Read the value for a key. Returns None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Write/overwrite the value for a key."""
        ...
