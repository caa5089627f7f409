"""Tests for the confirmation gate."""

from unittest.mock import MagicMock

from quill.core.confirmation import ConfirmationGate


class TestConfirmationGate:
    def test_starts_idle(self):
        gate = ConfirmationGate()
        assert gate.pending is None
        assert gate.is_pending is False

    def test_request_does_not_run_action(self):
        gate = ConfirmationGate()
        action = MagicMock()

        gate.request("Sure?", action)

        assert gate.is_pending
        assert gate.pending.prompt == "Sure?"
        action.assert_not_called()

    def test_accept_runs_action_once_and_returns_result(self):
        gate = ConfirmationGate()
        action = MagicMock(return_value="done")
        gate.request("Sure?", action)

        assert gate.accept() == "done"
        assert gate.accept() is None

        action.assert_called_once()
        assert gate.pending is None

    def test_cancel_discards_action(self):
        gate = ConfirmationGate()
        action = MagicMock()
        gate.request("Sure?", action)

        gate.cancel()
        gate.accept()

        action.assert_not_called()
        assert gate.pending is None

    def test_last_request_wins(self):
        gate = ConfirmationGate()
        first, second = MagicMock(), MagicMock()
        gate.request("First?", first)
        gate.request("Second?", second, kind="danger", confirm_text="Delete")

        assert gate.pending.prompt == "Second?"
        assert gate.pending.kind == "danger"
        assert gate.pending.confirm_text == "Delete"

        gate.accept()
        first.assert_not_called()
        second.assert_called_once()

    def test_action_may_request_again(self):
        gate = ConfirmationGate()
        follow_up = MagicMock()
        gate.request("First?", lambda: gate.request("Again?", follow_up))

        gate.accept()

        assert gate.pending.prompt == "Again?"
        follow_up.assert_not_called()

    def test_idle_accept_and_cancel_are_noops(self):
        gate = ConfirmationGate()
        assert gate.accept() is None
        gate.cancel()
        assert gate.pending is None
