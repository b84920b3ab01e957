import asyncio
import signal
import sys

import pytz

from remindbot.config.settings import *
from remindbot.logger import logger, setup_logging

import remindbot.scheduler as scheduler
from remindbot.channels.telegram_polling import TelegramSink, build_application, run_polling
from remindbot.core.context import AppContext
from remindbot.metrics import runtime_metrics
from remindbot.storage import ReminderStore, init_db

shutdown_event = asyncio.Event()


def signal_handler(sig, frame):
    """SIGINT / SIGTERM"""
    logger.info("Received shutdown signal, stopping components...")
    shutdown_event.set()


async def main() -> None:
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    conn = await init_db(DB_PATH)
    store = ReminderStore(conn)

    app = build_application(TELEGRAM_BOT_TOKEN)
    ctx = AppContext(
        store=store,
        sink=TelegramSink(app.bot),
        timezone=pytz.timezone(REMINDER_TIMEZONE),
    )
    app.bot_data["ctx"] = ctx

    try:
        await app.initialize()
        await asyncio.gather(
            scheduler.main_loop(ctx, shutdown_event, SCHEDULER_INTERVAL_SECONDS),
            run_polling(app, shutdown_event),
        )
    finally:
        shutdown_event.set()
        logger.info("Closing database connection...")
        await conn.close()
        store.conn = None
        logger.info(f"Runtime metrics: {runtime_metrics.snapshot()}")
        logger.info("Reminder bot stopped")


def run() -> None:
    setup_logging(
        log_level=LOG_LEVEL,
        log_file=LOG_FILE,
        console_level=CONSOLE_LOG_LEVEL,
    )

    errors = validate_settings()
    if errors:
        for error in errors:
            logger.critical(f"Invalid configuration: {error}")
        sys.exit(1)

    logger.info("Starting reminder bot...")
    asyncio.run(main())


if __name__ == "__main__":
    run()
