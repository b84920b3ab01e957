from datetime import datetime

import pytz

from remindbot.datamodel import DayOfWeek

__all__ = ["now_in_tz", "day_of_week_of", "time_of_day_of", "tz_label"]

_WEEKDAYS = [
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
]


def now_in_tz(tz: pytz.BaseTzInfo) -> datetime:
    """Current time as an aware datetime in `tz`"""
    return datetime.now(pytz.UTC).astimezone(tz)


def day_of_week_of(dt: datetime) -> DayOfWeek:
    # datetime.weekday() counts from Monday
    return _WEEKDAYS[dt.weekday()]


def time_of_day_of(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def tz_label(dt: datetime) -> str:
    """Short zone name for replies, e.g. "IST"; falls back to the UTC offset."""
    return dt.tzname() or dt.strftime("%z")
