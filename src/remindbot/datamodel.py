from dataclasses import dataclass
from enum import Enum

__all__ = ["DayOfWeek", "Reminder", "TIME_OF_DAY_PATTERN"]

# "HH:MM", 00-23 / 00-59
TIME_OF_DAY_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


class DayOfWeek(str, Enum):
    # Declaration order is the canonical order (Sunday first)
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


@dataclass
class Reminder:
    id: int
    owner_id: str  # Telegram chat id, stored as text
    message: str
    day_of_week: DayOfWeek
    time_of_day: str  # "HH:MM"
    recurring: bool = True  # always True for now, not read by the scheduler
