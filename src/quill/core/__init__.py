"""Functional core - pure business logic with no I/O."""

from .entries import (
    Draft,
    Entry,
    EntryStoreError,
    fallback_selection,
    find_entry,
    join_tags,
    parse_timestamp,
    sort_newest_first,
    split_tags,
)
from .confirmation import (
    DELETE_PROMPT,
    DISCARD_PROMPT,
    LOCK_PROMPT,
    ConfirmationGate,
    PendingConfirmation,
)
from .dates import format_datetime, format_time, format_updated_at

__all__ = [
    # Entries
    "Draft",
    "Entry",
    "EntryStoreError",
    "fallback_selection",
    "find_entry",
    "join_tags",
    "parse_timestamp",
    "sort_newest_first",
    "split_tags",
    # Confirmation
    "ConfirmationGate",
    "PendingConfirmation",
    "DELETE_PROMPT",
    "DISCARD_PROMPT",
    "LOCK_PROMPT",
    # Dates
    "format_datetime",
    "format_time",
    "format_updated_at",
]
