"""Natural-language time-of-day parsing, backed by dateparser."""

import re
from datetime import datetime
from typing import Optional

import dateparser
import pytz

__all__ = ["TIME_TOKEN_PATTERN", "extract_time_text", "parse_time_of_day"]

# Matches "8pm", "10am", and the tail of "8:30pm"
TIME_TOKEN_PATTERN = re.compile(r"\d{1,2}(am|pm)", re.IGNORECASE)


def extract_time_text(text: str) -> str:
    """Keep only the whitespace-separated tokens that look like a clock time, joined by single spaces."""
    return " ".join(token for token in text.split() if TIME_TOKEN_PATTERN.search(token))


def _parse(text: str, tz: pytz.BaseTzInfo) -> Optional[datetime]:
    parsed = dateparser.parse(
        text,
        languages=["en"],
        settings={
            "TIMEZONE": tz.zone,
            "RETURN_AS_TIMEZONE_AWARE": True,
            "PREFER_DATES_FROM": "future",
        },
    )
    if parsed is None:
        return None
    return parsed.astimezone(tz)


def parse_time_of_day(text: str, tz: pytz.BaseTzInfo) -> Optional[datetime]:
    """Parse `text` as a wall-clock time in `tz`.

    When the whole text does not parse (e.g. "8pm 9pm"), the first token that
    does wins. Returns an aware datetime in `tz`, or None.
    """
    if not text.strip():
        return None

    parsed = _parse(text, tz)
    if parsed is not None:
        return parsed

    for token in text.split():
        parsed = _parse(token, tz)
        if parsed is not None:
            return parsed
    return None
