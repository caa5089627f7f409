"""Telegram message formatting utilities."""

import telegramify_markdown
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from .core.confirmation import PendingConfirmation

MAX_CHUNK = 4000


def chunk_markdown(text: str) -> list[str]:
    """Convert markdown to MarkdownV2 and split it under Telegram's message limit."""
    converted = telegramify_markdown.markdownify(text)
    chunks = []
    while len(converted) > MAX_CHUNK:
        # Prefer a line break; otherwise never cut between a backslash and the char it escapes
        cut = converted.rfind("\n", 0, MAX_CHUNK)
        if cut <= 0:
            cut = MAX_CHUNK
            head = converted[:cut]
            if (len(head) - len(head.rstrip("\\"))) % 2:
                cut -= 1
        chunks.append(converted[:cut])
        converted = converted[cut:]
    chunks.append(converted)
    return chunks


async def send_markdown(message, text: str, reply_markup=None):
    """Reply with markdown text; the keyboard, if any, goes on the last chunk."""
    chunks = chunk_markdown(text)
    for i, chunk in enumerate(chunks):
        markup = reply_markup if i == len(chunks) - 1 else None
        await message.reply_text(chunk, parse_mode="MarkdownV2", reply_markup=markup)


def confirmation_keyboard(pending: PendingConfirmation) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(pending.confirm_text, callback_data="confirm:yes"),
                InlineKeyboardButton("Cancel", callback_data="confirm:no"),
            ]
        ]
    )
