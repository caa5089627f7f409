"""Adapters - I/O implementations of ports."""

from .supabase_store import SupabaseEntryStore
from .openai_chat import OpenAIChatService
from .file_unlock import FileUnlockStore

__all__ = [
    "SupabaseEntryStore",
    "OpenAIChatService",
    "FileUnlockStore",
]
