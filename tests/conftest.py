"""Shared test fixtures."""

import pytest


class DictKeyValueStore:
    """KeyValueStore over a plain dict."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


@pytest.fixture
def make_kv():
    """Factory for in-memory key-value stores."""
    return DictKeyValueStore
