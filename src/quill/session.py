"""Entry session controller - the state shared by the CLI and Telegram surfaces.

Owns the loaded entries, the selected entry's draft, the unsaved-changes flag
and the lock. Every action that would discard a draft or delete an entry goes
through the confirmation gate first.
"""

import hmac
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from .assist import AIAssist
from .config import Config
from .core.confirmation import DELETE_PROMPT, DISCARD_PROMPT, LOCK_PROMPT, ConfirmationGate
from .core.entries import Draft, Entry, EntryStoreError, fallback_selection, find_entry, sort_newest_first
from .ports.entry_store import EntryStore
from .ports.unlock_store import UnlockStore

logger = logging.getLogger(__name__)


class JournalLockedError(Exception):
    """Raised when an editing action is attempted while the journal is locked."""

    pass


class EntrySession:
    """Keeps entries, selection and draft consistent for one user session."""

    def __init__(
        self,
        store: EntryStore,
        config: Config,
        unlock_store: UnlockStore | None = None,
        assist: AIAssist | None = None,
    ):
        self.store = store
        self.config = config
        self.unlock_store = unlock_store
        self.assist = assist
        self.gate = ConfirmationGate()

        self.entries: list[Entry] = []
        self.selected_id: str | None = None
        self.draft = Draft.empty()
        self.has_unsaved_changes = False
        self.is_loading = False
        self.error: str | None = None
        self.is_locked = True

    @property
    def selected_entry(self) -> Entry | None:
        return find_entry(self.entries, self.selected_id)

    def dismiss_error(self) -> None:
        self.error = None

    def _require_unlocked(self) -> None:
        if self.is_locked:
            raise JournalLockedError("Journal is locked")

    def _today(self) -> date:
        return datetime.now(ZoneInfo(self.config.timezone)).date()

    def _set_selection(self, entry_id: str | None) -> None:
        """Select an entry and reset the draft to its persisted fields."""
        self.selected_id = entry_id
        self.draft = Draft.from_entry(self.selected_entry)
        self.has_unsaved_changes = False

    # ============== Loading ==============

    def load(self) -> bool:
        """Fetch all entries. Prior state survives a failed fetch."""
        try:
            self.is_loading = True
            entries = self.store.list_entries()
        except EntryStoreError as e:
            logger.error(f"Error fetching entries: {e}")
            self.error = "Failed to load journal entries"
            return False
        finally:
            self.is_loading = False

        self.entries = sort_newest_first(entries)
        if self.selected_entry is None:
            self._set_selection(fallback_selection(self.entries))
        return True

    # ============== Selection & draft ==============

    def select(self, entry_id: str) -> None:
        """Select an entry, asking before discarding unsaved changes."""
        self._require_unlocked()
        if find_entry(self.entries, entry_id) is None:
            raise KeyError(entry_id)

        if self.has_unsaved_changes and entry_id != self.selected_id:
            self.gate.request(DISCARD_PROMPT, lambda: self._set_selection(entry_id))
            return
        self._set_selection(entry_id)

    def mutate_draft(self, field: str, value: str) -> None:
        """Change one draft field locally. Nothing is sent to the store."""
        self._require_unlocked()
        self.draft = self.draft.with_field(field, value)
        self.has_unsaved_changes = True

    def save(self) -> bool:
        """Persist the draft for the selected entry. The draft survives a failed save."""
        self._require_unlocked()
        if self.selected_id is None:
            return False

        entry_id = self.selected_id
        draft = self.draft
        try:
            self.is_loading = True
            saved = self.store.update_entry(
                entry_id, title=draft.title, content=draft.content, tags=draft.tags
            )
        except EntryStoreError as e:
            logger.error(f"Error updating entry {entry_id}: {e}")
            self.error = "Failed to update entry"
            return False
        finally:
            self.is_loading = False

        self.entries = [saved if e.id == entry_id else e for e in self.entries]
        self.has_unsaved_changes = False
        return True

    # ============== Add & delete ==============

    def add(self) -> Entry | None:
        """Create an empty entry dated today and select it."""
        self._require_unlocked()
        if self.has_unsaved_changes:
            self.gate.request(DISCARD_PROMPT, self._add)
            return None
        return self._add()

    def _add(self) -> Entry | None:
        self._require_unlocked()
        try:
            self.is_loading = True
            entry = self.store.insert_entry(title="", content="", tags="", entry_date=self._today())
        except EntryStoreError as e:
            logger.error(f"Error adding entry: {e}")
            self.error = "Failed to add new entry"
            return None
        finally:
            self.is_loading = False

        self.entries = [entry, *self.entries]
        self._set_selection(entry.id)
        return entry

    def delete(self, entry_id: str) -> None:
        """Ask to delete an entry. Deletion runs only once the gate is accepted."""
        self._require_unlocked()
        if find_entry(self.entries, entry_id) is None:
            raise KeyError(entry_id)
        self.gate.request(
            DELETE_PROMPT, lambda: self._delete(entry_id), kind="danger", confirm_text="Delete"
        )

    def _delete(self, entry_id: str) -> bool:
        self._require_unlocked()
        try:
            self.is_loading = True
            self.store.delete_entry(entry_id)
        except EntryStoreError as e:
            logger.error(f"Error deleting entry {entry_id}: {e}")
            self.error = "Failed to delete entry"
            return False
        finally:
            self.is_loading = False

        self.entries = [e for e in self.entries if e.id != entry_id]
        if self.selected_id == entry_id:
            self._set_selection(fallback_selection(self.entries))
        return True

    # ============== Lock ==============

    def restore_unlock(self) -> bool:
        """Unlock without a prompt if a remembered PIN is still valid."""
        stored = self.unlock_store.read() if self.unlock_store else None
        if stored and hmac.compare_digest(stored, self.config.pin):
            self.is_locked = False
        return not self.is_locked

    def unlock(self, pin: str, remember: bool = False) -> bool:
        if not hmac.compare_digest(pin.strip(), self.config.pin):
            self.error = "Incorrect PIN"
            return False

        self.is_locked = False
        self.error = None
        if remember and self.unlock_store is not None:
            self.unlock_store.write(self.config.pin)
        logger.info("Journal unlocked")
        return True

    def lock(self) -> None:
        """Lock the journal, asking first if there are unsaved changes."""
        if self.has_unsaved_changes:
            self.gate.request(LOCK_PROMPT, self._lock)
            return
        self._lock()

    def _lock(self) -> None:
        # Nothing requested before the lock may run after it
        self.gate.cancel()
        if self.unlock_store is not None:
            self.unlock_store.clear()
        self.is_locked = True
        self._set_selection(self.selected_id)
        logger.info("Journal locked")

    # ============== AI assist ==============

    def suggest_title(self) -> bool:
        """Replace the draft title with a generated one. Failure leaves it as is."""
        return self._suggest("title")

    def suggest_tags(self) -> bool:
        return self._suggest("tags")

    def _suggest(self, field: str) -> bool:
        self._require_unlocked()
        if self.assist is None:
            return False
        if field == "title":
            generated = self.assist.generate_title(self.draft.content)
        else:
            generated = self.assist.generate_tags(self.draft.content)
        if generated is None:
            return False
        self.mutate_draft(field, generated)
        return True
