"""Pure entry-collection logic - no I/O dependencies."""

import json
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime

logger = logging.getLogger(__name__)

EMPTY_PREVIEW = "Empty entry..."


@dataclass(frozen=True)
class Entry:
    """One dated journal document."""

    id: str
    date: str  # ISO-8601 creation timestamp
    content: str = ""

    @property
    def created(self) -> datetime:
        """Creation time as local wall-clock time."""
        created = datetime.fromisoformat(self.date)
        if created.tzinfo is not None:
            created = created.astimezone().replace(tzinfo=None)
        return created

    @property
    def day(self) -> date:
        return self.created.date()

    @classmethod
    def new(cls, now: datetime | None = None) -> "Entry":
        """Create an empty entry stamped with the current time."""
        now = now or datetime.now()
        return cls(id=str(uuid.uuid4()), date=now.isoformat(), content="")

    def to_dict(self) -> dict:
        return {"id": self.id, "date": self.date, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        """Create Entry from its stored form. Raises ValueError on a bad date."""
        datetime.fromisoformat(data["date"])
        return cls(
            id=data["id"],
            date=data["date"],
            content=data.get("content", "") or "",
        )


def parse_entries(raw: str | None) -> list[Entry]:
    """
    Parse the stored entry list.

    Corrupt data yields an empty list rather than an error.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
        return [Entry.from_dict(item) for item in data]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Failed to parse saved entries: {e}")
        return []


def dump_entries(entries: list[Entry]) -> str:
    return json.dumps([e.to_dict() for e in entries], ensure_ascii=False)


def sort_newest_first(entries: list[Entry]) -> list[Entry]:
    """Sort entries by creation time, newest first."""
    return sorted(entries, key=lambda e: e.created, reverse=True)


def find_entry(entries: list[Entry], entry_id: str) -> Entry | None:
    for entry in entries:
        if entry.id == entry_id:
            return entry
    return None


def find_entry_for_day(entries: list[Entry], day: date) -> Entry | None:
    """First entry created on the given calendar day."""
    for entry in entries:
        if entry.day == day:
            return entry
    return None


def ensure_today(
    entries: list[Entry], now: datetime | None = None
) -> tuple[list[Entry], Entry]:
    """
    Make sure an entry exists for today.

    Returns (entries sorted newest first, today's entry). A new entry is
    prepended only when none exists for today.
    """
    now = now or datetime.now()
    entries = sort_newest_first(entries)
    today_entry = find_entry_for_day(entries, now.date())
    if today_entry:
        return entries, today_entry

    today_entry = Entry.new(now)
    return [today_entry, *entries], today_entry


def create_entry(
    entries: list[Entry], now: datetime | None = None
) -> tuple[list[Entry], Entry]:
    """Prepend a fresh empty entry and return it as the new current entry."""
    entry = Entry.new(now)
    return [entry, *entries], entry


def update_content(entries: list[Entry], entry_id: str, content: str) -> list[Entry]:
    """Replace one entry's content. Unknown ids leave the list unchanged."""
    return [replace(e, content=content) if e.id == entry_id else e for e in entries]


def remove_entry(
    entries: list[Entry],
    entry_id: str,
    current_id: str | None,
    now: datetime | None = None,
) -> tuple[list[Entry], Entry]:
    """
    Delete an entry and work out which entry is current afterwards.

    Deleting the current entry selects the first remaining one; deleting the
    last entry leaves a single fresh empty entry.
    """
    remaining = [e for e in entries if e.id != entry_id]

    if not remaining:
        fresh = Entry.new(now)
        return [fresh], fresh

    current = find_entry(remaining, current_id) if current_id else None
    return remaining, current or remaining[0]


def content_preview(content: str, width: int = 50) -> str:
    """First non-blank line of an entry, truncated for listings."""
    if not content:
        return EMPTY_PREVIEW
    first_line = next((line for line in content.split("\n") if line.strip()), "")
    first_line = first_line.strip()
    return first_line[:width] + ("..." if len(first_line) > width else "")
