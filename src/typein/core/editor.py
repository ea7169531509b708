"""Editing state machine - pure transitions over editor snapshots, no I/O."""

from dataclasses import dataclass, replace
from datetime import datetime

from .codec import StoredBlob

DEFAULT_HISTORY_LIMIT = 500


@dataclass(frozen=True)
class EditorSnapshot:
    """
    Complete editable state at one instant.

    Snapshots are immutable; every transition returns a new one. Dirtiness is
    derived from content vs. base_content, so undoing back to the last saved
    text reads as clean without another save.
    """

    content: str = ""
    base_content: str = ""
    last_saved: datetime | None = None
    history: tuple[str, ...] = ()
    history_index: int = 0

    @property
    def is_dirty(self) -> bool:
        return self.content != self.base_content

    @property
    def can_undo(self) -> bool:
        return self.history_index > 0

    @property
    def can_redo(self) -> bool:
        return self.history_index < len(self.history) - 1

    @classmethod
    def empty(cls) -> "EditorSnapshot":
        """Uninitialised state, before the first INIT."""
        return cls()


def init_snapshot(content: str, last_saved: datetime | None = None) -> EditorSnapshot:
    """
    Start a fresh snapshot for a document.

    The only transition that discards history. Pass last_saved only when
    reinitialising the same logical document.
    """
    return EditorSnapshot(
        content=content,
        base_content=content,
        last_saved=last_saved,
        history=(content,),
        history_index=0,
    )


def set_content(
    snapshot: EditorSnapshot,
    new_content: str,
    history_limit: int | None = DEFAULT_HISTORY_LIMIT,
) -> EditorSnapshot:
    """
    Apply an edit.

    Typing after an undo discards the redo branch. When history_limit is set,
    the oldest entries are dropped to stay within it.
    """
    if new_content == snapshot.content:
        return snapshot

    kept = snapshot.history[: snapshot.history_index + 1]
    history = kept + (new_content,)
    if history_limit and len(history) > history_limit:
        history = history[-history_limit:]

    return replace(
        snapshot,
        content=new_content,
        history=history,
        history_index=len(history) - 1,
    )


def _move_to(snapshot: EditorSnapshot, index: int) -> EditorSnapshot:
    index = max(0, min(index, len(snapshot.history) - 1))
    if index == snapshot.history_index:
        return snapshot
    return replace(snapshot, content=snapshot.history[index], history_index=index)


def undo(snapshot: EditorSnapshot) -> EditorSnapshot:
    """Step back one history entry. No-op at the oldest entry."""
    if not snapshot.can_undo:
        return snapshot
    return _move_to(snapshot, snapshot.history_index - 1)


def redo(snapshot: EditorSnapshot) -> EditorSnapshot:
    """Step forward one history entry. No-op at the newest entry."""
    if not snapshot.can_redo:
        return snapshot
    return _move_to(snapshot, snapshot.history_index + 1)


def save(snapshot: EditorSnapshot, now: datetime | None = None) -> EditorSnapshot:
    """
    Mark the current content as saved.

    Only meaningful when dirty or never saved; otherwise the snapshot is
    returned unchanged. History is never touched.
    """
    if not snapshot.is_dirty and snapshot.last_saved is not None:
        return snapshot
    return replace(
        snapshot,
        base_content=snapshot.content,
        last_saved=now or datetime.now(),
    )


def to_blob(snapshot: EditorSnapshot) -> StoredBlob:
    """Persistable subset of a snapshot (drops save metadata)."""
    history = list(snapshot.history) or [snapshot.content]
    return StoredBlob(
        content=snapshot.content,
        history=history,
        history_index=min(snapshot.history_index, len(history) - 1),
    )
