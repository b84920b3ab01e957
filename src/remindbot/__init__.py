"""remindbot: a Telegram bot for weekly recurring reminders."""

__version__ = "0.3.0"
