"""Functional core - pure editor and storage logic with no I/O."""

from .codec import StoredBlob, encode, decode, DECODERS
from .editor import EditorSnapshot, init_snapshot, set_content, undo, redo, save, to_blob
from .entries import Entry, ensure_today, create_entry, remove_entry, content_preview
from .status import word_count, char_count, status_line

__all__ = [
    # Codec
    "StoredBlob",
    "encode",
    "decode",
    "DECODERS",
    # Editor
    "EditorSnapshot",
    "init_snapshot",
    "set_content",
    "undo",
    "redo",
    "save",
    "to_blob",
    # Entries
    "Entry",
    "ensure_today",
    "create_entry",
    "remove_entry",
    "content_preview",
    # Status
    "word_count",
    "char_count",
    "status_line",
]
