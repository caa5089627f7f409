"""Ports - interfaces/protocols for external dependencies."""

from .entry_store import EntryStore
from .llm_service import LLMError, LLMService
from .unlock_store import UnlockStore

__all__ = [
    "EntryStore",
    "LLMError",
    "LLMService",
    "UnlockStore",
]
