"""Command grammar.

A command line is split into a keyword and an argument, then the keyword
selects one intent from a fixed set and the argument is parsed for it.
Parsing never touches storage; bad input raises CommandParseError whose
message is meant for the user.
"""

import re
from dataclasses import dataclass
from typing import Union

import pytz

from remindbot.core.time_parser import extract_time_text, parse_time_of_day
from remindbot.datamodel import DayOfWeek
from remindbot.utils import time_of_day_of, tz_label

__all__ = [
    "CommandParseError",
    "Start", "AddReminder", "ListReminders", "DeleteReminder", "DeleteReminders",
    "UpdateReminder", "Unrecognized", "Intent",
    "split_command", "parse_command", "parse_add", "parse_delete", "parse_delete_many", "parse_update",
]


class CommandParseError(ValueError):
    """Malformed command input. str(error) is the corrective reply."""


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class AddReminder:
    message: str
    days: tuple[DayOfWeek, ...]
    time_of_day: str
    tz_label: str


@dataclass(frozen=True)
class ListReminders:
    pass


@dataclass(frozen=True)
class DeleteReminder:
    id: int


@dataclass(frozen=True)
class DeleteReminders:
    ids: tuple[int, ...]


@dataclass(frozen=True)
class UpdateReminder:
    id: int
    new_message: str


@dataclass(frozen=True)
class Unrecognized:
    keyword: str


Intent = Union[Start, AddReminder, ListReminders, DeleteReminder, DeleteReminders, UpdateReminder, Unrecognized]

_REMIND_PREFIX = re.compile(r"^remind\s*")
_LEADING_ID = re.compile(r"^(\d+)")
_UPDATE_ARGS = re.compile(r"^(\d+)\s+(.+)$", re.DOTALL)


def split_command(text: str) -> tuple[str, str]:
    """Split "/addReminder@my_bot foo bar" into ("addreminder", "foo bar")."""
    parts = text.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    keyword = parts[0].lstrip("/").split("@", 1)[0].lower()
    argument = parts[1].strip() if len(parts) > 1 else ""
    return keyword, argument


def parse_add(argument: str, tz: pytz.BaseTzInfo) -> AddReminder:
    text = argument.lower()
    if not text.strip():
        raise CommandParseError(
            "❗ Usage: /addReminder <message> every <days> <time>\n"
            "Example: /addReminder remind to take out waste every Sunday and Wednesday 8pm"
        )

    if "every" not in text:
        raise CommandParseError('❗ Please use the word "every" to set recurring reminders.')

    message_part, _, day_time_part = text.partition("every")
    message_part = _REMIND_PREFIX.sub("", message_part).strip()
    day_time_part = day_time_part.strip()

    # Plain substring match, so a day name inside a longer word still counts
    days = tuple(day for day in DayOfWeek if day.value in day_time_part)
    if not days:
        raise CommandParseError("❗ No days found. Mention days like Sunday, Wednesday.")

    parsed = parse_time_of_day(extract_time_text(day_time_part), tz)
    if parsed is None:
        raise CommandParseError("❗ No valid time found. Please specify a time like 2pm or 8pm.")

    return AddReminder(
        message=message_part,
        days=days,
        time_of_day=time_of_day_of(parsed),
        tz_label=tz_label(parsed),
    )


def parse_delete(argument: str) -> DeleteReminder:
    match = _LEADING_ID.match(argument.strip())
    if not match:
        raise CommandParseError("❗ Usage: /deleteReminder <id>\nExample: /deleteReminder 1")
    return DeleteReminder(id=int(match.group(1)))


def parse_delete_many(argument: str) -> DeleteReminders:
    ids: list[int] = []
    for token in argument.split(","):
        try:
            reminder_id = int(token.strip())
        except ValueError:
            continue
        if reminder_id not in ids:
            ids.append(reminder_id)

    if not ids:
        raise CommandParseError("❗ Please provide valid reminder IDs to delete.")
    return DeleteReminders(ids=tuple(ids))


def parse_update(argument: str) -> UpdateReminder:
    match = _UPDATE_ARGS.match(argument.strip())
    if not match:
        raise CommandParseError(
            "❗ Usage: /updateReminder <id> <new message>\nExample: /updateReminder 1 Take out trash"
        )
    return UpdateReminder(id=int(match.group(1)), new_message=match.group(2).strip())


def parse_command(keyword: str, argument: str, tz: pytz.BaseTzInfo) -> Intent:
    keyword = keyword.lower()
    if keyword == "start":
        return Start()
    if keyword == "addreminder":
        return parse_add(argument, tz)
    if keyword == "listreminders":
        return ListReminders()
    if keyword == "deletereminder":
        return parse_delete(argument)
    if keyword == "deletereminders":
        return parse_delete_many(argument)
    if keyword == "updatereminder":
        return parse_update(argument)
    return Unrecognized(keyword=keyword)
