import os

import pytz
from dotenv import load_dotenv

load_dotenv()

__all__ = [
    "TELEGRAM_BOT_TOKEN", "ALLOWED_CHAT_IDS", "ADMIN_TELEGRAM_CHAT_ID",
    "REMINDER_TIMEZONE", "SCHEDULER_INTERVAL_SECONDS",
    "DB_PATH",
    "LOG_FILE", "LOG_LEVEL", "CONSOLE_LOG_LEVEL",
    "validate_settings",
]


def _parse_int_list(name: str) -> list[int]:
    raw = os.getenv(name, "")
    result: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if part:
            result.append(int(part))
    return result


# Telegram Bot
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
ALLOWED_CHAT_IDS = _parse_int_list("ALLOWED_CHAT_IDS")  # empty: everyone may use the bot
ADMIN_TELEGRAM_CHAT_ID = int(os.getenv("ADMIN_TELEGRAM_CHAT_ID", "0"))

# Scheduling
# All reminder times are stored and matched as wall-clock times in this zone.
REMINDER_TIMEZONE = os.getenv("REMINDER_TIMEZONE", "Asia/Kolkata")
SCHEDULER_INTERVAL_SECONDS = int(os.getenv("SCHEDULER_INTERVAL_SECONDS", "60"))

# Storage
DB_PATH = os.getenv("DB_PATH", "data/reminders.db")

# Logging
LOG_FILE = os.getenv("LOG_FILE", "logs/remindbot.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
CONSOLE_LOG_LEVEL = os.getenv("CONSOLE_LOG_LEVEL", "INFO")


def validate_settings() -> list[str]:
    """Return the list of configuration problems, empty when the bot can start."""
    errors = []

    if not TELEGRAM_BOT_TOKEN:
        errors.append("TELEGRAM_BOT_TOKEN is not set")

    if REMINDER_TIMEZONE not in pytz.all_timezones_set:
        errors.append(f"REMINDER_TIMEZONE is not a known timezone: {REMINDER_TIMEZONE}")

    if SCHEDULER_INTERVAL_SECONDS <= 0:
        errors.append("SCHEDULER_INTERVAL_SECONDS must be greater than 0")

    return errors
