"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest
import pytest_asyncio
import pytz

from remindbot.channels.base import DeliverySink
from remindbot.core.context import AppContext
from remindbot.storage import ReminderStore, init_db

TZ = pytz.timezone("Asia/Kolkata")


class RecordingSink(DeliverySink):
    """Collects outgoing messages instead of sending them."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.fail_for: set[str] = set()

    async def send_message(self, recipient_id: str, text: str) -> None:
        if recipient_id in self.fail_for:
            raise ConnectionError(f"chat {recipient_id} unreachable")
        self.sent.append((recipient_id, text))


def local_time(year, month, day, hour, minute) -> datetime:
    return TZ.localize(datetime(year, month, day, hour, minute))


@pytest_asyncio.fixture
async def store(tmp_path):
    """A store backed by a fresh database file per test."""
    conn = await init_db(str(tmp_path / "reminders.db"))
    yield ReminderStore(conn)
    await conn.close()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def ctx(store, sink):
    return AppContext(store=store, sink=sink, timezone=TZ)
