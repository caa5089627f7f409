"""Single-slot confirmation gate for destructive or discarding actions."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal

logger = logging.getLogger(__name__)

DISCARD_PROMPT = "You have unsaved changes. Do you want to discard them?"
DELETE_PROMPT = "Are you sure you want to delete this entry? This cannot be undone."
LOCK_PROMPT = "You have unsaved changes. Do you want to discard them and lock the journal?"


@dataclass(frozen=True)
class PendingConfirmation:
    """A yes/no question waiting on the user."""

    prompt: str
    on_accept: Callable[[], Any]
    kind: Literal["danger", "warning"] = "warning"
    confirm_text: str = "Confirm"


class ConfirmationGate:
    """
    idle -> pending(prompt, on_accept) -> idle.

    Only one request is outstanding at a time; a new request replaces the
    old one. Nothing is accepted without an explicit accept().
    """

    def __init__(self):
        self._pending: PendingConfirmation | None = None

    @property
    def pending(self) -> PendingConfirmation | None:
        return self._pending

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def request(
        self,
        prompt: str,
        on_accept: Callable[[], Any],
        kind: Literal["danger", "warning"] = "warning",
        confirm_text: str = "Confirm",
    ) -> PendingConfirmation:
        if self._pending is not None:
            logger.debug(f"Replacing pending confirmation: {self._pending.prompt!r}")
        self._pending = PendingConfirmation(prompt, on_accept, kind, confirm_text)
        return self._pending

    def accept(self) -> Any:
        """Run the pending action and return to idle. Returns the action's result."""
        pending = self._pending
        if pending is None:
            return None
        # Clear first so the action can itself request a new confirmation
        self._pending = None
        return pending.on_accept()

    def cancel(self) -> None:
        self._pending = None
