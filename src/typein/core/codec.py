"""
Persistence codec for editor state.

Encoded form is base64(zlib(json)). Decoding sniffs the format by trying an
ordered chain of decoders, newest format first, so anything written by an
older version (or pre-history plain text) still loads.
"""

import base64
import binascii
import json
import logging
import unicodedata
import zlib
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass
class StoredBlob:
    """Persisted subset of editor state."""

    content: str
    history: list[str] = field(default_factory=list)
    history_index: int = 0

    def to_dict(self) -> dict:
        # Field order is part of the canonical form.
        return {
            "content": self.content,
            "history": list(self.history),
            "historyIndex": self.history_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoredBlob":
        """
        Build from a parsed object.

        Missing history/historyIndex are filled in. Wrongly typed fields, or an
        index that does not point at content, raise ValueError.
        """
        content = data.get("content")
        if not isinstance(content, str):
            raise ValueError("content must be a string")

        history = data.get("history")
        if history is None:
            history = [content]
        if not isinstance(history, list) or not all(isinstance(h, str) for h in history):
            raise ValueError("history must be a list of strings")

        index = data.get("historyIndex")
        if index is None:
            index = max(len(history) - 1, 0)
        if not isinstance(index, int) or isinstance(index, bool):
            raise ValueError("historyIndex must be an integer")
        if history:
            if not 0 <= index < len(history):
                raise ValueError(f"historyIndex {index} out of range")
            if history[index] != content:
                raise ValueError("history does not match content at historyIndex")
        elif index != 0:
            raise ValueError("historyIndex must be 0 for an empty history")

        return cls(content=content, history=history, history_index=index)


def _serialize(blob: StoredBlob) -> str:
    return json.dumps(blob.to_dict(), ensure_ascii=False, separators=(",", ":"))


def _parse(text: str) -> StoredBlob:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("stored state is not an object")
    return StoredBlob.from_dict(data)


def encode(blob: StoredBlob) -> str:
    """Serialize, compress and base64 a blob; plain JSON if compression fails."""
    serialized = _serialize(blob)
    try:
        compressed = zlib.compress(serialized.encode("utf-8"))
        return base64.b64encode(compressed).decode("ascii")
    except (zlib.error, ValueError, MemoryError) as e:
        logger.warning(f"Compression failed, storing uncompressed: {e}")
        return serialized


# ============== Decoder chain ==============


def decode_compressed(stored: str) -> StoredBlob:
    """base64 -> inflate -> UTF-8 -> JSON."""
    raw = base64.b64decode(stored.encode("ascii"), validate=True)
    text = zlib.decompress(raw).decode("utf-8")
    return _parse(text)


def decode_plain(stored: str) -> StoredBlob:
    """Uncompressed JSON, written by the encode fallback or older versions."""
    return _parse(stored)


def _is_text(value: str) -> bool:
    # Control characters other than whitespace, or lone surrogates, mean corrupt data.
    return not any(
        unicodedata.category(ch) in ("Cc", "Cs") and ch not in "\t\n\r" for ch in value
    )


def decode_legacy(stored: str) -> StoredBlob:
    """Bare content string from before history was stored."""
    if not stored:
        raise ValueError("empty input")
    if not _is_text(stored):
        raise ValueError("input is not plain text")
    return StoredBlob(content=stored, history=[stored], history_index=0)


Decoder = Callable[[str], StoredBlob]

# Newest format first. Add new formats at the front; never remove old ones.
DECODERS: tuple[Decoder, ...] = (decode_compressed, decode_plain, decode_legacy)


def decode(stored: str | bytes | None) -> StoredBlob | None:
    """
    Decode a stored string, trying each format in turn.

    Returns None when nothing usable is found; callers treat that as first run.
    """
    if stored is None:
        return None
    if isinstance(stored, bytes):
        try:
            stored = stored.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Stored editor state is not valid UTF-8, ignoring")
            return None
    if not stored:
        return None

    # json raises RecursionError on deeply nested input.
    for decoder in DECODERS:
        try:
            return decoder(stored)
        except (ValueError, TypeError, RecursionError, binascii.Error, zlib.error, UnicodeError):
            continue

    logger.warning("Stored editor state could not be decoded, ignoring")
    return None
