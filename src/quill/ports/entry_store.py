"""Entry storage interface."""

from datetime import date
from typing import Protocol

from quill.core.entries import Entry


class EntryStore(Protocol):
    """Interface for persisting journal entries in a remote store."""

    def list_entries(self) -> list[Entry]:
        """All entries, newest created first."""
        ...

    def insert_entry(self, title: str, content: str, tags: str, entry_date: date) -> Entry:
        """Insert an entry. The store assigns id and created_at."""
        ...

    def update_entry(self, entry_id: str, *, title: str, content: str, tags: str) -> Entry:
        """Overwrite the editable fields and stamp a fresh updated_at."""
        ...

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry by id."""
        ...
