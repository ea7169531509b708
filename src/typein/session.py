"""Editor session - glue between the CLI, the editing core and storage.

The session owns the current snapshot and decides nothing about *when* to
save; callers check is_dirty and call save() according to their own policy.
"""

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from .adapters.file_store import FileKeyValueStore
from .adapters.kv_entries import KeyValueEntryStore
from .config import Config
from .core import codec, editor
from .core.codec import StoredBlob
from .core.editor import EditorSnapshot
from .ports.entry_store import EntryStore
from .ports.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

EDITOR_KEY = "editor-content"


def get_store(config: Config) -> FileKeyValueStore:
    """Resolve the storage directory from config."""
    return FileKeyValueStore(config.resolved_data_dir)


class EditorSession:
    """One editing session over the active entry."""

    def __init__(
        self,
        entries: EntryStore,
        kv: KeyValueStore,
        history_limit: int | None = editor.DEFAULT_HISTORY_LIMIT,
    ):
        self.entries = entries
        self.kv = kv
        self.history_limit = history_limit
        self.snapshot = EditorSnapshot.empty()
        self._entry_id: str | None = None

    @classmethod
    def from_config(cls, config: Config) -> "EditorSession":
        kv = get_store(config)
        session = cls(KeyValueEntryStore(kv), kv, history_limit=config.history_limit)
        session.load()
        return session

    @property
    def entry_id(self) -> str | None:
        """Entry the current snapshot belongs to."""
        return self._entry_id

    @property
    def is_dirty(self) -> bool:
        return self.snapshot.is_dirty

    @property
    def content(self) -> str:
        return self.snapshot.content

    def load(self) -> EditorSnapshot:
        """INIT from the active entry's stored text with a fresh history."""
        entry_id = self.entries.active_id
        last_saved = self.snapshot.last_saved if entry_id == self._entry_id else None
        self._entry_id = entry_id
        self.snapshot = editor.init_snapshot(self.entries.get_active_document_text(), last_saved)
        logger.debug(f"Loaded entry {entry_id} ({len(self.snapshot.content)} chars)")
        return self.snapshot

    def set_content(self, content: str) -> EditorSnapshot:
        self.snapshot = editor.set_content(self.snapshot, content, self.history_limit)
        return self.snapshot

    def undo(self) -> EditorSnapshot:
        self.snapshot = editor.undo(self.snapshot)
        return self.snapshot

    def redo(self) -> EditorSnapshot:
        self.snapshot = editor.redo(self.snapshot)
        return self.snapshot

    def save(self, now: datetime | None = None) -> bool:
        """
        Write the current snapshot to storage.

        Always encodes the snapshot as it is now, so a later save can never
        be overwritten by an earlier one. Storage failures are logged and
        leave the session dirty for a later retry; they are never raised.
        """
        snapshot = self.snapshot
        if not snapshot.is_dirty and snapshot.last_saved is not None:
            return True

        payload = codec.encode(editor.to_blob(snapshot))
        try:
            self.kv.set(EDITOR_KEY, payload)
            if self._entry_id:
                self.entries.persist(self._entry_id, snapshot.content)
        except OSError as e:
            logger.error(f"Failed to save entry {self._entry_id}: {e}")
            return False

        self.snapshot = editor.save(snapshot, now)
        logger.debug(f"Saved entry {self._entry_id}")
        return True

    def save_if_dirty(self, now: datetime | None = None) -> bool:
        if not self.snapshot.is_dirty:
            return True
        return self.save(now)

    def stored_blob(self) -> StoredBlob | None:
        """Decode the last saved editor state, if any."""
        return codec.decode(self.kv.get(EDITOR_KEY))


def open_session(config: Config, data_dir: Path | None = None) -> EditorSession:
    """Build a session over the configured (or given) data directory."""
    if data_dir:
        config = replace(config, data_dir=str(data_dir))
    return EditorSession.from_config(config)
