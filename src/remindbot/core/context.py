from dataclasses import dataclass

import pytz

from remindbot.channels.base import DeliverySink
from remindbot.storage import ReminderStore

__all__ = ["AppContext"]


@dataclass
class AppContext:
    """Process-wide handles, built once at startup and passed to the command and scheduler paths."""

    store: ReminderStore
    sink: DeliverySink
    timezone: pytz.BaseTzInfo
