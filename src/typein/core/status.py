"""Status bar data - counts and save state text."""

from datetime import datetime

from .editor import EditorSnapshot


def word_count(content: str) -> int:
    """Whitespace-separated words."""
    return len(content.split())


def char_count(content: str) -> int:
    return len(content)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_relative(then: datetime, now: datetime | None = None) -> str:
    """Human-readable distance in the past, e.g. "3 minutes ago"."""
    now = now or datetime.now()
    seconds = max(int((now - then).total_seconds()), 0)

    if seconds < 45:
        return "just now"
    minutes = round(seconds / 60)
    if minutes < 60:
        return f"{_plural(max(minutes, 1), 'minute')} ago"
    hours = round(minutes / 60)
    if hours < 24:
        return f"{_plural(hours, 'hour')} ago"
    days = round(hours / 24)
    return f"{_plural(days, 'day')} ago"


def saved_text(last_saved: datetime | None, is_dirty: bool, now: datetime | None = None) -> str:
    if last_saved is None:
        return "Not saved yet"
    if is_dirty:
        return "Saving..."
    return f"Saved {format_relative(last_saved, now)}"


def status_line(
    snapshot: EditorSnapshot, now: datetime | None = None, show_saved: bool = True
) -> str:
    """One-line summary: counts plus, optionally, save state."""
    parts = [
        _plural(word_count(snapshot.content), "word"),
        _plural(char_count(snapshot.content), "character"),
    ]
    if show_saved:
        parts.append(saved_text(snapshot.last_saved, snapshot.is_dirty, now))
    return " · ".join(parts)
