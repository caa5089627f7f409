"""Shared fixtures: an in-memory entry store and a ready session."""

from datetime import date, datetime, timedelta, timezone

import pytest

from quill.config import Config
from quill.core.entries import Entry, EntryStoreError
from quill.session import EntrySession


class FakeEntryStore:
    """In-memory EntryStore. Ops named in fail_on raise EntryStoreError."""

    def __init__(self, entries: list[Entry] | None = None):
        self.entries = list(entries or [])
        self.fail_on: set[str] = set()
        self.calls: list[tuple] = []
        self._next_id = 100
        self._clock = datetime(2025, 1, 20, 12, 0, tzinfo=timezone.utc)

    def _check(self, op: str) -> None:
        if op in self.fail_on:
            raise EntryStoreError(f"{op} failed")

    def list_entries(self) -> list[Entry]:
        self.calls.append(("list",))
        self._check("list")
        return sorted(self.entries, key=lambda e: e.created_at, reverse=True)

    def insert_entry(self, title, content, tags, entry_date):
        self.calls.append(("insert", title, content, tags, entry_date))
        self._check("insert")
        self._next_id += 1
        self._clock += timedelta(minutes=1)
        entry = Entry(
            id=str(self._next_id),
            title=title,
            content=content,
            tags=tags,
            created_at=self._clock,
            entry_date=entry_date,
        )
        self.entries.append(entry)
        return entry

    def update_entry(self, entry_id, *, title, content, tags):
        self.calls.append(("update", entry_id, title, content, tags))
        self._check("update")
        for i, e in enumerate(self.entries):
            if e.id == entry_id:
                self._clock += timedelta(minutes=1)
                updated = e.with_fields(title=title, content=content, tags=tags, updated_at=self._clock)
                self.entries[i] = updated
                return updated
        raise EntryStoreError(f"No entry with id {entry_id}")

    def delete_entry(self, entry_id):
        self.calls.append(("delete", entry_id))
        self._check("delete")
        self.entries = [e for e in self.entries if e.id != entry_id]


class FakeUnlockStore:
    def __init__(self, value: str | None = None):
        self.value = value

    def read(self):
        return self.value

    def write(self, pin):
        self.value = pin

    def clear(self):
        self.value = None


def make_entry(entry_id: str, title: str, minutes_ago: int, content: str = "", tags: str = "") -> Entry:
    created = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago)
    return Entry(
        id=entry_id,
        title=title,
        content=content,
        tags=tags,
        created_at=created,
        entry_date=date(2025, 1, 15),
    )


@pytest.fixture
def config():
    return Config(pin="1234", timezone="America/Chicago")


@pytest.fixture
def sample_entries():
    """Three entries, newest first once listed."""
    return [
        make_entry("a", "Morning pages", 0, content="Slept well.", tags="sleep, routine"),
        make_entry("b", "Long walk", 60, content="Walked by the river."),
        make_entry("c", "First entry", 120, content="Hello journal."),
    ]


@pytest.fixture
def store(sample_entries):
    return FakeEntryStore(sample_entries)


@pytest.fixture
def unlock_store():
    return FakeUnlockStore()


@pytest.fixture
def session(store, config, unlock_store):
    """Unlocked session with entries loaded."""
    s = EntrySession(store, config, unlock_store=unlock_store)
    s.unlock("1234")
    s.load()
    return s
