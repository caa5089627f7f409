"""Tests for the Telegram formatting and handlers."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
import telegramify_markdown
from telegram.ext import CallbackQueryHandler

from quill.config import Config
from quill.core.confirmation import PendingConfirmation
from quill.telegram_bot import AuthFilter, create_application, restrict_callback
from quill.telegram_format import MAX_CHUNK, chunk_markdown, confirmation_keyboard
from quill.telegram_handlers import confirm_handler, content_handler, delete_handler, save_handler


def _update(text=None, data=None, user_id=1):
    update = MagicMock()
    update.effective_user.id = user_id
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.effective_message = update.message
    update.callback_query.data = data
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()
    update.callback_query.message.reply_text = AsyncMock()
    return update


def _context(session):
    context = MagicMock()
    context.chat_data = {"session": session}
    context.args = []
    return context


class TestFormatting:
    def test_short_text_single_chunk(self):
        chunks = chunk_markdown("# Hello")
        assert len(chunks) == 1
        assert "Hello" in chunks[0]

    def test_long_text_is_split(self):
        chunks = chunk_markdown("word " * 2000)
        assert len(chunks) > 1
        assert all(len(c) <= MAX_CHUNK for c in chunks)

    @pytest.mark.parametrize("prefix", ["", "b", "bb"])
    def test_split_keeps_escapes_whole(self, prefix):
        text = prefix + "a." * 3000

        chunks = chunk_markdown(text)

        assert len(chunks) > 1
        assert "".join(chunks) == telegramify_markdown.markdownify(text)
        for chunk in chunks:
            assert len(chunk) <= MAX_CHUNK
            trailing = len(chunk) - len(chunk.rstrip("\\"))
            assert trailing % 2 == 0

    def test_split_prefers_line_breaks(self):
        text = "\n\n".join(["word " * 100] * 20)

        chunks = chunk_markdown(text)

        assert len(chunks) > 1
        assert all(len(c) <= MAX_CHUNK for c in chunks)
        assert all(c.startswith("\n") for c in chunks[1:])

    def test_confirmation_keyboard(self):
        pending = PendingConfirmation("Sure?", lambda: None, kind="danger", confirm_text="Delete")
        buttons = confirmation_keyboard(pending).inline_keyboard[0]
        assert buttons[0].text == "Delete"
        assert buttons[0].callback_data == "confirm:yes"
        assert buttons[1].callback_data == "confirm:no"


class TestAuthFilter:
    def test_allows_listed_user(self):
        assert AuthFilter([1, 2]).check_update(_update(user_id=2)) is True

    def test_rejects_other_user(self):
        assert AuthFilter([1]).check_update(_update(user_id=3)) is False

    def test_open_when_unconfigured(self):
        assert AuthFilter([]).check_update(_update(user_id=3)) is True


class TestHandlers:
    def test_content_appends_to_draft(self, session):
        asyncio.run(content_handler(_update(text="Went running."), _context(session)))
        assert session.draft.content == "Slept well.\nWent running."
        assert session.has_unsaved_changes is True

    def test_locked_session_refuses(self, session):
        session.lock()
        update = _update(text="hello")

        asyncio.run(content_handler(update, _context(session)))

        update.message.reply_text.assert_awaited_once_with("Journal is locked. Use /unlock PIN.")

    def test_save_persists(self, session):
        session.mutate_draft("title", "Renamed")
        update = _update()

        asyncio.run(save_handler(update, _context(session)))

        update.message.reply_text.assert_awaited_once_with("Saved.")
        assert session.entries[0].title == "Renamed"

    def test_delete_asks_then_confirm_deletes(self, session):
        update = _update()
        context = _context(session)

        asyncio.run(delete_handler(update, context))
        prompt = update.message.reply_text.await_args.args[0]
        assert "cannot be undone" in prompt
        assert [e.id for e in session.entries] == ["a", "b", "c"]

        asyncio.run(confirm_handler(_update(data="confirm:yes"), context))
        assert [e.id for e in session.entries] == ["b", "c"]
        assert session.selected_id == "b"

    def test_confirm_cancel(self, session):
        session.delete("a")
        update = _update(data="confirm:no")

        asyncio.run(confirm_handler(update, _context(session)))

        update.callback_query.edit_message_text.assert_awaited_once_with("Cancelled.")
        assert session.gate.pending is None
        assert len(session.entries) == 3

    @pytest.mark.parametrize("data", ["confirm:yes", "confirm:no"])
    def test_confirm_with_nothing_pending(self, session, data):
        update = _update(data=data)
        asyncio.run(confirm_handler(update, _context(session)))
        update.callback_query.edit_message_text.assert_awaited_once_with("Nothing to confirm.")


class TestRestrictCallback:
    def test_unlisted_user_cannot_confirm(self, session):
        session.delete("b")
        update = _update(data="confirm:yes", user_id=99)

        guarded = restrict_callback(confirm_handler, AuthFilter([1]))
        asyncio.run(guarded(update, _context(session)))

        update.callback_query.answer.assert_awaited_once_with("Unauthorized.", show_alert=True)
        assert session.gate.pending is not None
        assert [e.id for e in session.entries] == ["a", "b", "c"]

    def test_listed_user_passes_through(self, session):
        session.delete("b")

        guarded = restrict_callback(confirm_handler, AuthFilter([1]))
        asyncio.run(guarded(_update(data="confirm:yes", user_id=1), _context(session)))

        assert [e.id for e in session.entries] == ["a", "c"]

    def test_application_guards_every_button(self, session):
        app = create_application(Config(telegram_bot_token="123456:TEST", telegram_allowed_users=[1]))
        callbacks = [h for group in app.handlers.values() for h in group if isinstance(h, CallbackQueryHandler)]
        assert len(callbacks) == 2

        session.delete("b")
        for handler in callbacks:
            data = "select:c" if "select" in handler.pattern.pattern else "confirm:yes"
            asyncio.run(handler.callback(_update(data=data, user_id=99), _context(session)))

        assert session.selected_id == "a"
        assert session.gate.pending is not None
        assert [e.id for e in session.entries] == ["a", "b", "c"]


class TestLockDuringConfirmation:
    def test_stale_delete_button_after_lock(self, session):
        context = _context(session)
        asyncio.run(delete_handler(_update(), context))

        session.lock()
        update = _update(data="confirm:yes")
        asyncio.run(confirm_handler(update, context))

        update.callback_query.edit_message_text.assert_awaited_once_with("Nothing to confirm.")
        assert [e.id for e in session.entries] == ["a", "b", "c"]
