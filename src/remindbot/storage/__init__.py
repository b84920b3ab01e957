from remindbot.storage.db_config import init_db
from remindbot.storage.reminder import ReminderStore, StorageError

__all__ = ["init_db", "ReminderStore", "StorageError"]
