"""Quill Telegram Bot."""

import functools
import logging

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from .config import Config, load_config
from .telegram_handlers import (
    confirm_handler,
    content_handler,
    delete_handler,
    entries_handler,
    help_handler,
    lock_handler,
    new_handler,
    save_handler,
    select_handler,
    show_handler,
    start_handler,
    suggest_tags_handler,
    suggest_title_handler,
    tags_handler,
    title_handler,
    unlock_handler,
)

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def restrict_callback(handler, auth_filter: AuthFilter):
    """Apply the allow-list to button taps, which CallbackQueryHandler cannot filter."""

    @functools.wraps(handler)
    async def wrapper(update: Update, context):
        if not auth_filter.check_update(update):
            user = update.effective_user
            logger.warning(f"Unauthorized button tap from user {user.id if user else None}")
            await update.callback_query.answer("Unauthorized.", show_alert=True)
            return
        return await handler(update, context)

    return wrapper


COMMANDS = {
    "start": start_handler,
    "help": help_handler,
    "unlock": unlock_handler,
    "lock": lock_handler,
    "entries": entries_handler,
    "show": show_handler,
    "new": new_handler,
    "title": title_handler,
    "tags": tags_handler,
    "save": save_handler,
    "delete": delete_handler,
    "suggest_title": suggest_title_handler,
    "suggest_tags": suggest_tags_handler,
}


def create_application(config: Config | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to quill.conf"
        )

    app = Application.builder().token(config.telegram_bot_token).build()
    auth_filter = AuthFilter(config.telegram_allowed_users)

    for name, handler in COMMANDS.items():
        app.add_handler(CommandHandler(name, handler, filters=auth_filter))

    app.add_handler(CallbackQueryHandler(restrict_callback(select_handler, auth_filter), pattern=r"^select:"))
    app.add_handler(CallbackQueryHandler(restrict_callback(confirm_handler, auth_filter), pattern=r"^confirm:"))
    app.add_handler(MessageHandler(auth_filter & filters.TEXT & ~filters.COMMAND, content_handler))

    # Handle unauthorized access attempts
    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This journal is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in quill.conf"
        )

    if config.telegram_allowed_users:
        app.add_handler(MessageHandler(~auth_filter & filters.ALL, unauthorized_handler))

    return app


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    app = create_application(config)

    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting Quill Telegram bot...")
    app.run_polling(allowed_updates=Update.ALL_TYPES)
