"""Tests for core entry collection logic."""

import json
import time
from datetime import date, datetime, timedelta, timezone

import pytest

from typein.core.entries import (
    EMPTY_PREVIEW,
    Entry,
    content_preview,
    create_entry,
    dump_entries,
    ensure_today,
    find_entry_for_day,
    parse_entries,
    remove_entry,
    sort_newest_first,
    update_content,
)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 8, 0)


@pytest.fixture
def local_tz(monkeypatch):
    """Switch the process time zone for one test."""

    def switch(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield switch
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def sample_entries(now):
    """Three entries on consecutive earlier days, oldest first."""
    return [
        Entry(id="e1", date=(now - timedelta(days=3)).isoformat(), content="first"),
        Entry(id="e2", date=(now - timedelta(days=2)).isoformat(), content="second"),
        Entry(id="e3", date=(now - timedelta(days=1)).isoformat(), content="third"),
    ]


class TestEntry:
    def test_new_entry(self, now):
        entry = Entry.new(now)

        assert entry.content == ""
        assert entry.day == date(2025, 1, 15)
        assert len(entry.id) == 36

    def test_dict_roundtrip(self):
        entry = Entry(id="x", date="2025-01-15T08:00:00", content="hi")
        assert Entry.from_dict(entry.to_dict()) == entry

    def test_from_dict_tolerates_missing_content(self):
        entry = Entry.from_dict({"id": "x", "date": "2025-01-15T08:00:00"})
        assert entry.content == ""

    def test_parses_utc_suffix(self):
        """Dates written by browsers end with Z."""
        entry = Entry(id="x", date="2025-01-15T08:00:00.000Z")
        expected = datetime(2025, 1, 15, 8, 0, tzinfo=timezone.utc).astimezone()
        assert entry.created == expected.replace(tzinfo=None)
        assert entry.day == expected.date()

    def test_utc_date_uses_local_day(self, local_tz):
        local_tz("Asia/Tokyo")
        entry = Entry(id="x", date="2025-01-15T20:00:00.000Z")
        assert entry.day == date(2025, 1, 16)

    def test_from_dict_rejects_bad_date(self):
        with pytest.raises(ValueError):
            Entry.from_dict({"id": "x", "date": "yesterday"})


class TestParseEntries:
    def test_empty(self):
        assert parse_entries(None) == []
        assert parse_entries("") == []

    def test_roundtrip(self, sample_entries):
        assert parse_entries(dump_entries(sample_entries)) == sample_entries

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            json.dumps({"id": "x"}),
            json.dumps([{"date": "2025-01-15"}]),
            json.dumps([{"id": "x", "date": "yesterday"}]),
        ],
    )
    def test_corrupt_data_yields_empty_list(self, raw):
        assert parse_entries(raw) == []


class TestEnsureToday:
    def test_creates_today_entry(self, sample_entries, now):
        entries, today = ensure_today(sample_entries, now)

        assert len(entries) == 4
        assert entries[0] == today
        assert today.day == now.date()
        assert today.content == ""

    def test_sorts_newest_first(self, sample_entries, now):
        entries, _ = ensure_today(sample_entries, now)
        assert [e.id for e in entries[1:]] == ["e3", "e2", "e1"]

    def test_selects_existing_today_entry(self, sample_entries, now):
        existing = Entry(id="today", date=now.replace(hour=6).isoformat(), content="morning")

        entries, today = ensure_today([*sample_entries, existing], now)

        assert today == existing
        assert len(entries) == 4

    def test_idempotent(self, sample_entries, now):
        entries, first = ensure_today(sample_entries, now)
        entries_again, second = ensure_today(entries, now + timedelta(hours=2))

        assert first == second
        assert entries_again == entries

    def test_empty_collection(self, now):
        entries, today = ensure_today([], now)
        assert entries == [today]


class TestMutations:
    def test_create_entry_prepends(self, sample_entries, now):
        entries, entry = create_entry(sample_entries, now)

        assert entries[0] == entry
        assert len(entries) == 4

    def test_update_content(self, sample_entries):
        entries = update_content(sample_entries, "e2", "changed")

        assert entries[1].content == "changed"
        assert entries[0].content == "first"
        assert sample_entries[1].content == "second"

    def test_update_unknown_id(self, sample_entries):
        assert update_content(sample_entries, "nope", "x") == sample_entries

    def test_remove_other_entry_keeps_current(self, sample_entries, now):
        entries, current = remove_entry(sample_entries, "e1", "e3", now)

        assert [e.id for e in entries] == ["e2", "e3"]
        assert current.id == "e3"

    def test_remove_current_selects_first_remaining(self, sample_entries, now):
        entries, current = remove_entry(sample_entries, "e3", "e3", now)

        assert current.id == "e1"
        assert len(entries) == 2

    def test_remove_last_entry_creates_fresh_one(self, now):
        only = Entry(id="only", date=now.isoformat(), content="bye")

        entries, current = remove_entry([only], "only", "only", now)

        assert entries == [current]
        assert current.id != "only"
        assert current.content == ""


class TestQueries:
    def test_sort_mixes_offset_and_naive_dates(self, now):
        entries = [
            Entry(id="old", date="2025-01-10T08:00:00.000Z"),
            Entry(id="new", date=now.isoformat()),
        ]
        assert [e.id for e in sort_newest_first(entries)] == ["new", "old"]

    def test_sort_compares_offset_dates_in_local_time(self, local_tz):
        local_tz("America/New_York")
        entries = [
            Entry(id="utc", date="2025-01-15T03:00:00Z"),
            Entry(id="local", date="2025-01-14T23:00:00"),
        ]
        assert [e.id for e in sort_newest_first(entries)] == ["local", "utc"]

    def test_sort_newest_first(self, sample_entries):
        assert [e.id for e in sort_newest_first(sample_entries)] == ["e3", "e2", "e1"]

    def test_find_entry_for_day(self, sample_entries, now):
        assert find_entry_for_day(sample_entries, (now - timedelta(days=2)).date()).id == "e2"
        assert find_entry_for_day(sample_entries, now.date()) is None


class TestContentPreview:
    def test_empty(self):
        assert content_preview("") == EMPTY_PREVIEW

    def test_first_non_blank_line(self):
        assert content_preview("\n\n   \n  Hello there  \nsecond") == "Hello there"

    def test_truncates_long_line(self):
        preview = content_preview("x" * 80)
        assert preview == "x" * 50 + "..."

    def test_whitespace_only(self):
        assert content_preview("   \n  ") == ""
