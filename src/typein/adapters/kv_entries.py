"""Entry collection stored as a JSON list in a key-value store."""

import logging
from datetime import datetime

from ..core.entries import (
    Entry,
    create_entry,
    dump_entries,
    ensure_today,
    find_entry,
    parse_entries,
    remove_entry,
    sort_newest_first,
    update_content,
)
from ..ports.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

ENTRIES_KEY = "typein-entries"
ACTIVE_KEY = "typein-active"


class EntryNotFoundError(KeyError):
    """No entry with the requested id."""


class KeyValueEntryStore:
    """
    Entry collection backed by a KeyValueStore.

    Implements EntryStore protocol. On load, today's entry is created if
    missing and becomes the active entry unless another one was selected
    previously on the same day and still exists.
    """

    def __init__(self, kv: KeyValueStore, now: datetime | None = None):
        self.kv = kv
        self.entries: list[Entry] = []
        self._active_id: str | None = None
        self.load(now)

    def load(self, now: datetime | None = None) -> None:
        """(Re)read entries from storage and bootstrap today's entry."""
        loaded = parse_entries(self.kv.get(ENTRIES_KEY))
        self.entries, today = ensure_today(loaded, now)
        created = len(self.entries) != len(loaded)
        if created:
            logger.info(f"Created entry {today.id} for {today.day.isoformat()}")

        # A new day starts on today's entry; otherwise keep the last selection.
        previous = self.kv.get(ACTIVE_KEY)
        if previous and not created and find_entry(self.entries, previous):
            self._active_id = previous
        else:
            self._active_id = today.id
        self._write()

    def _write(self) -> None:
        self.kv.set(ENTRIES_KEY, dump_entries(self.entries))
        if self._active_id:
            self.kv.set(ACTIVE_KEY, self._active_id)

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active_entry(self) -> Entry | None:
        return find_entry(self.entries, self._active_id) if self._active_id else None

    def get_active_document_text(self) -> str:
        entry = self.active_entry
        return entry.content if entry else ""

    def persist(self, entry_id: str, content: str) -> None:
        """Store new content for an entry."""
        self.entries = update_content(self.entries, entry_id, content)
        self._write()

    def resolve(self, prefix: str) -> Entry:
        """Find an entry by id or unambiguous id prefix."""
        matches = [e for e in self.entries if e.id.startswith(prefix)]
        exact = find_entry(matches, prefix)
        if exact:
            return exact
        if len(matches) != 1:
            raise EntryNotFoundError(prefix)
        return matches[0]

    def select(self, entry_id: str) -> Entry:
        """Make an entry the active one."""
        entry = self.resolve(entry_id)
        self._active_id = entry.id
        self._write()
        return entry

    def create(self, now: datetime | None = None) -> Entry:
        """Add a new empty entry and make it active."""
        self.entries, entry = create_entry(self.entries, now)
        self._active_id = entry.id
        self._write()
        return entry

    def delete(self, entry_id: str, now: datetime | None = None) -> Entry:
        """Delete an entry. Returns the entry that is active afterwards."""
        entry = self.resolve(entry_id)
        self.entries, current = remove_entry(self.entries, entry.id, self._active_id, now)
        self._active_id = current.id
        self._write()
        return current

    def list_entries(self) -> list[Entry]:
        return sort_newest_first(self.entries)
