import asyncio
from functools import wraps

import telegram
from telegram.ext import Application, ApplicationBuilder, CommandHandler, ContextTypes, MessageHandler, filters

from remindbot.channels.base import DeliverySink
from remindbot.config.settings import ADMIN_TELEGRAM_CHAT_ID, ALLOWED_CHAT_IDS
from remindbot.core.commands import handle_command
from remindbot.core.context import AppContext
from remindbot.logger import logger

__all__ = ["COMMANDS", "TelegramSink", "build_application", "run_polling"]

# Telegram only accepts lower-case command names; incoming commands are matched case-insensitively
COMMANDS = [
    "start",
    "addreminder",
    "listreminders",
    "deletereminder",
    "deletereminders",
    "updatereminder",
]


class TelegramSink(DeliverySink):
    def __init__(self, bot: telegram.Bot) -> None:
        self.bot = bot

    async def send_message(self, recipient_id: str, text: str) -> None:
        logger.debug(f"Sending message to chat {recipient_id}")
        await self.bot.send_message(chat_id=recipient_id, text=text)


def requires_auth(func):
    @wraps(func)
    async def decorated(update: telegram.Update, *args, **kwargs):
        chat_id = update.effective_chat.id
        if ALLOWED_CHAT_IDS and chat_id not in ALLOWED_CHAT_IDS:
            logger.warning(f"Chat {chat_id} is not allowed to use the bot")
            await update.effective_message.reply_text("You are not allowed to use this bot. Please contact the administrator.")
        else:
            return await func(update, *args, **kwargs)
    return decorated


@requires_auth
async def on_command(update: telegram.Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    if message is None or not message.text:
        return

    ctx: AppContext = context.bot_data["ctx"]
    owner_id = str(update.effective_chat.id)
    for reply in await handle_command(ctx, owner_id, message.text):
        await message.reply_text(reply)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Errors raised inside handlers"""
    logger.error(f"Telegram error: {context.error}", exc_info=context.error)
    if ADMIN_TELEGRAM_CHAT_ID != 0:
        chat = update.effective_chat.id if isinstance(update, telegram.Update) and update.effective_chat else "unknown"
        try:
            await context.bot.send_message(
                chat_id=ADMIN_TELEGRAM_CHAT_ID,
                text=f"Warning! Reminder bot hit an error while handling chat {chat}: {context.error}",
            )
        except Exception as e:
            logger.error(f"Failed to notify admin: {e}", exc_info=e)


def bot_error_callback(error: telegram.error.TelegramError) -> None:
    """Errors raised while polling for updates"""
    if isinstance(error, telegram.error.NetworkError):
        logger.warning(f"Telegram network error: {error}")
    else:
        logger.error(f"Unexpected Telegram polling error: {error}", exc_info=error)


def build_application(token: str) -> Application:
    app = ApplicationBuilder().token(token).build()

    app.add_handler(CommandHandler(COMMANDS, on_command))
    # Anything else that looks like a command gets the "unknown command" reply
    app.add_handler(MessageHandler(filters.COMMAND, on_command))
    app.add_error_handler(error_handler)
    return app


async def run_polling(app: Application, shutdown_event: asyncio.Event) -> None:
    """Poll for updates until shutdown. `app` must already be initialized and carry the context in bot_data."""
    try:
        await app.updater.start_polling(
            poll_interval=0.5,
            timeout=15,
            bootstrap_retries=-1,
            drop_pending_updates=False,  # keep commands sent while offline
            error_callback=bot_error_callback,
        )
        await app.start()
        logger.info("Telegram polling started")

        await shutdown_event.wait()
    finally:
        logger.info("Stopping Telegram polling...")
        if app.updater.running:
            await app.updater.stop()
        if app.running:
            await app.stop()
        await app.shutdown()
