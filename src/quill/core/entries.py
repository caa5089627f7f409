"""Pure entry domain logic - no I/O dependencies."""

import re
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone

DRAFT_FIELDS = ("title", "content", "tags")

_TZ_SHORT = re.compile(r"([+-]\d{2})$")
_TZ_COMPACT = re.compile(r"([+-]\d{2})(\d{2})$")
_FRACTION = re.compile(r"\.(\d+)")


class EntryStoreError(Exception):
    """Raised when the entry store fails or returns something unusable."""

    pass


def parse_timestamp(value) -> datetime:
    """
    Normalize a store timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (Postgres style "2025-04-22 13:24:03.557419+00"
    included), epoch seconds or milliseconds, datetimes, and document-store
    timestamp dicts ({"seconds": ...} or {"_seconds": ...}).
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, bool):
        raise ValueError(f"Unsupported timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        # Anything past year ~2286 in seconds is really milliseconds
        seconds = value / 1000 if value > 1e10 else value
        dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    elif isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if seconds is None:
            raise ValueError(f"Unsupported timestamp: {value!r}")
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        dt = datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip().replace(" ", "T", 1)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        if "T" in text:
            day, _, clock = text.partition("T")
            clock = _TZ_SHORT.sub(r"\1:00", clock)
            clock = _TZ_COMPACT.sub(r"\1:\2", clock)
            clock = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), clock)
            text = f"{day}T{clock}"
        dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def split_tags(tags: str | None) -> list[str]:
    """Split a comma-joined tag string, dropping blanks."""
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def join_tags(tags: list[str]) -> str:
    return ", ".join(t.strip() for t in tags if t.strip())


@dataclass(frozen=True)
class Entry:
    """A persisted journal entry."""

    id: str
    title: str
    content: str
    tags: str
    created_at: datetime
    entry_date: date
    updated_at: datetime | None = None

    @property
    def tag_list(self) -> list[str]:
        return split_tags(self.tags)

    def with_fields(self, **changes) -> "Entry":
        return replace(self, **changes)

    @classmethod
    def from_row(cls, row: dict) -> "Entry":
        """Create Entry from a raw store row, whatever its backend shape."""
        try:
            created_at = parse_timestamp(row["created_at"])
            updated_raw = row.get("updated_at")
            updated_at = parse_timestamp(updated_raw) if updated_raw else None

            raw_date = row.get("strict_date") or row.get("entry_date")
            if isinstance(raw_date, date) and not isinstance(raw_date, datetime):
                entry_date = raw_date
            elif raw_date:
                entry_date = date.fromisoformat(str(raw_date)[:10])
            else:
                entry_date = created_at.date()

            return cls(
                id=str(row["id"]),
                title=row.get("title") or "",
                content=row.get("content") or "",
                tags=row.get("tags") or "",
                created_at=created_at,
                entry_date=entry_date,
                updated_at=updated_at,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise EntryStoreError(f"Malformed entry row: {e}") from e


@dataclass(frozen=True)
class Draft:
    """Unsaved edit buffer for the selected entry."""

    entry_id: str | None = None
    title: str = ""
    content: str = ""
    tags: str = ""

    @classmethod
    def empty(cls) -> "Draft":
        return cls()

    @classmethod
    def from_entry(cls, entry: Entry | None) -> "Draft":
        if entry is None:
            return cls.empty()
        return cls(entry_id=entry.id, title=entry.title, content=entry.content, tags=entry.tags)

    def with_field(self, name: str, value: str) -> "Draft":
        if name not in DRAFT_FIELDS:
            raise ValueError(f"Unknown draft field: {name}")
        return replace(self, **{name: value})

    def matches(self, entry: Entry | None) -> bool:
        """True if the draft holds exactly the entry's persisted fields."""
        return self == Draft.from_entry(entry)


def find_entry(entries: list[Entry], entry_id: str | None) -> Entry | None:
    if entry_id is None:
        return None
    return next((e for e in entries if e.id == entry_id), None)


def sort_newest_first(entries: list[Entry]) -> list[Entry]:
    return sorted(entries, key=lambda e: e.created_at, reverse=True)


def fallback_selection(entries: list[Entry]) -> str | None:
    """Selection after the selected entry disappears: most recent remaining, or none."""
    return entries[0].id if entries else None
