"""Persisted unlock marker interface."""

from typing import Protocol


class UnlockStore(Protocol):
    """Remembers that the journal was unlocked with a given PIN."""

    def read(self) -> str | None:
        ...

    def write(self, pin: str) -> None:
        ...

    def clear(self) -> None:
        ...
