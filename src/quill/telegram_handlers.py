"""Telegram command handlers."""

import functools
import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from .config import load_config
from .session import EntrySession
from .telegram_format import confirmation_keyboard, send_markdown
from .workflows import open_session, render_entry

logger = logging.getLogger(__name__)

MAX_LISTED_ENTRIES = 20


def get_session(context: ContextTypes.DEFAULT_TYPE) -> EntrySession:
    """One session per chat, created on first use."""
    if "session" not in context.chat_data:
        context.chat_data["session"] = open_session(load_config(), load=False, remember_unlock=False)
    return context.chat_data["session"]


async def _report(message, session: EntrySession) -> bool:
    """Send any pending confirmation or error. Returns True if something was sent."""
    if session.gate.pending is not None:
        await message.reply_text(
            session.gate.pending.prompt,
            reply_markup=confirmation_keyboard(session.gate.pending),
        )
        return True
    if session.error:
        await message.reply_text(f"Error: {session.error}")
        session.dismiss_error()
        return True
    return False


async def _show_draft(message, session: EntrySession) -> None:
    entry = session.selected_entry
    if entry is None:
        await message.reply_text("No entry selected. Use /new to start one.")
        return
    if session.has_unsaved_changes:
        draft = entry.with_fields(title=session.draft.title, content=session.draft.content, tags=session.draft.tags)
        text = render_entry(draft, session.config.timezone) + "\n\n_Unsaved changes. /save to keep them._"
    else:
        text = render_entry(entry, session.config.timezone)
    await send_markdown(message, text)


def unlocked(handler):
    """Only run the handler once the chat's session is unlocked."""

    @functools.wraps(handler)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        session = get_session(context)
        if session.is_locked:
            message = update.effective_message
            await message.reply_text("Journal is locked. Use /unlock PIN.")
            return
        return await handler(update, context, session)

    return wrapper


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hi! I'm Quill, your private journal.\n\n"
        "Unlock with /unlock PIN, then use /entries to browse or /new to write.\n"
        "/help - Show all commands"
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*Quill Commands*\n\n"
        "/unlock PIN - Unlock the journal\n"
        "/lock - Lock the journal\n"
        "/entries - Pick an entry\n"
        "/show - Show the selected entry\n"
        "/new - Start a new entry for today\n"
        "/title TEXT - Set the title\n"
        "/tags a, b - Set the tags\n"
        "/suggest\\_title - Generate a title from the content\n"
        "/suggest\\_tags - Generate tags from the content\n"
        "/save - Save changes\n"
        "/delete - Delete the selected entry\n\n"
        "Any other message is added to the selected entry's content.",
        parse_mode="Markdown",
    )


# ============== Lock ==============


async def unlock_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /unlock PIN."""
    session = get_session(context)
    pin = " ".join(context.args or [])

    # Keep the PIN out of the chat history
    try:
        await update.message.delete()
    except TelegramError as e:
        logger.debug(f"Could not delete PIN message: {e}")

    if not session.is_locked:
        await update.effective_chat.send_message("Journal is already unlocked.")
        return
    if not pin:
        await update.effective_chat.send_message("Usage: /unlock PIN")
        return
    if not session.unlock(pin):
        await update.effective_chat.send_message(session.error)
        session.dismiss_error()
        return

    session.load()
    if session.error:
        await update.effective_chat.send_message(f"Unlocked, but: {session.error}")
        session.dismiss_error()
        return
    await update.effective_chat.send_message(f"Unlocked. {len(session.entries)} entries.")


async def lock_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /lock."""
    session = get_session(context)
    session.lock()
    if not await _report(update.message, session):
        await update.message.reply_text("Locked.")


# ============== Entries ==============


@unlocked
async def entries_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /entries - reload and offer a picker."""
    session.load()
    if await _report(update.message, session):
        return
    if not session.entries:
        await update.message.reply_text("No entries yet. Use /new to start one.")
        return

    keyboard = []
    for entry in session.entries[:MAX_LISTED_ENTRIES]:
        marker = "> " if entry.id == session.selected_id else ""
        label = f"{marker}{entry.entry_date.isoformat()} {entry.title or 'Untitled'}"
        keyboard.append([InlineKeyboardButton(label[:60], callback_data=f"select:{entry.id}")])

    await update.message.reply_text("Pick an entry:", reply_markup=InlineKeyboardMarkup(keyboard))


@unlocked
async def select_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle entry picker taps."""
    query = update.callback_query
    await query.answer()

    entry_id = query.data.removeprefix("select:")
    try:
        session.select(entry_id)
    except KeyError:
        await query.edit_message_text("That entry no longer exists. Use /entries to refresh.")
        return

    if await _report(query.message, session):
        return
    await _show_draft(query.message, session)


@unlocked
async def show_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /show."""
    await _show_draft(update.message, session)


@unlocked
async def new_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /new."""
    entry = session.add()
    if await _report(update.message, session):
        return
    await update.message.reply_text(
        f"New entry for {entry.entry_date.isoformat()}. Send messages to write, /title to name it."
    )


@unlocked
async def title_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /title TEXT."""
    if session.selected_id is None:
        await update.message.reply_text("No entry selected.")
        return
    session.mutate_draft("title", " ".join(context.args or []))
    await update.message.reply_text(f"Title: {session.draft.title or '(empty)'}")


@unlocked
async def tags_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /tags a, b, c."""
    if session.selected_id is None:
        await update.message.reply_text("No entry selected.")
        return
    session.mutate_draft("tags", " ".join(context.args or []))
    await update.message.reply_text(f"Tags: {session.draft.tags or '(none)'}")


@unlocked
async def content_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle plain messages by appending them to the draft content."""
    if session.selected_id is None:
        await update.message.reply_text("No entry selected. Use /new or /entries first.")
        return

    text = update.message.text.strip()
    if not text:
        return
    content = session.draft.content
    session.mutate_draft("content", f"{content}\n{text}" if content else text)
    await update.message.reply_text("Added. /save when you're done.")


@unlocked
async def save_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /save."""
    if session.selected_id is None:
        await update.message.reply_text("No entry selected.")
        return
    if session.save():
        await update.message.reply_text("Saved.")
    else:
        await _report(update.message, session)


@unlocked
async def delete_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /delete - asks before deleting the selected entry."""
    if session.selected_id is None:
        await update.message.reply_text("No entry selected.")
        return
    session.delete(session.selected_id)
    await _report(update.message, session)


# ============== AI Assist ==============


@unlocked
async def suggest_title_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /suggest_title."""
    await update.message.reply_text("Generating a title...")
    if session.suggest_title():
        await update.message.reply_text(f"Title: {session.draft.title}\n/save to keep it.")
    else:
        await update.message.reply_text(session.assist.error or "Title generation is not available.")
        session.assist.dismiss_error()


@unlocked
async def suggest_tags_handler(update: Update, context: ContextTypes.DEFAULT_TYPE, session: EntrySession):
    """Handle /suggest_tags."""
    await update.message.reply_text("Generating tags...")
    if session.suggest_tags():
        await update.message.reply_text(f"Tags: {session.draft.tags}\n/save to keep them.")
    else:
        await update.message.reply_text(session.assist.error or "Tag generation is not available.")
        session.assist.dismiss_error()


# ============== Confirmation ==============


async def confirm_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle Yes/Cancel taps on a pending confirmation."""
    query = update.callback_query
    await query.answer()
    session = get_session(context)

    pending = session.gate.pending
    if pending is None:
        await query.edit_message_text("Nothing to confirm.")
        return

    if query.data == "confirm:no":
        session.gate.cancel()
        await query.edit_message_text("Cancelled.")
        return

    session.gate.accept()
    if session.error:
        await query.edit_message_text(f"Error: {session.error}")
        session.dismiss_error()
        return

    await query.edit_message_text("Done.")
    if session.is_locked:
        await query.message.reply_text("Locked.")
    else:
        await _show_draft(query.message, session)
