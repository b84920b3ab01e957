"""Reminder table access.

Every operation except find_matching is scoped to the owning chat.
find_matching is the scheduler's due-now query and crosses owners.
"""

import asyncio
import re
from typing import Iterable

import aiosqlite

from remindbot.datamodel import TIME_OF_DAY_PATTERN, DayOfWeek, Reminder
from remindbot.events import E, bus
from remindbot.logger import logger

__all__ = ["ReminderStore", "StorageError"]

_COLUMNS = "id, chat_id, message, day_of_week, time, recurring"
_TIME_RE = re.compile(TIME_OF_DAY_PATTERN)

# SQLite INTEGER is a signed 64-bit value; larger ids cannot exist
_MAX_ID = 2**63 - 1


class StorageError(Exception):
    """A database fault while reading or writing reminders."""


def _row_to_reminder(row) -> Reminder:
    return Reminder(
        id=row[0],
        owner_id=row[1],
        message=row[2],
        day_of_week=DayOfWeek(row[3]),
        time_of_day=row[4],
        recurring=row[5] == "yes",
    )


def _check_time_of_day(time_of_day: str) -> None:
    if not _TIME_RE.match(time_of_day):
        raise ValueError(f"time_of_day must be HH:MM, got {time_of_day!r}")


class ReminderStore:
    def __init__(self, conn: aiosqlite.Connection | None) -> None:
        self.conn = conn
        # One connection serves every path; reads wait for an open group write to commit or roll back
        self._lock = asyncio.Lock()

    def _ensure_conn(self) -> aiosqlite.Connection:
        if self.conn is None:
            raise StorageError("Database is not initialised, call init_db() first")
        return self.conn

    async def _fetch(self, sql: str, params: tuple) -> list[Reminder]:
        conn = self._ensure_conn()
        async with self._lock:
            try:
                async with conn.execute(sql, params) as cursor:
                    rows = await cursor.fetchall()
            except aiosqlite.Error as e:
                raise StorageError(f"Query failed: {e}") from e
        return [_row_to_reminder(row) for row in rows]

    async def _write(self, sql: str, params: tuple) -> int:
        """Run a single statement and commit; returns the affected row count."""
        conn = self._ensure_conn()
        async with self._lock:
            try:
                async with conn.execute(sql, params) as cursor:
                    changes = cursor.rowcount
                await conn.commit()
            except aiosqlite.Error as e:
                await self._rollback(conn)
                raise StorageError(f"Write failed: {e}") from e
        return changes

    @staticmethod
    async def _rollback(conn: aiosqlite.Connection) -> None:
        try:
            await conn.rollback()
        except aiosqlite.Error as e:
            logger.error(f"Rollback failed: {e}", exc_info=e)

    async def create(self, owner_id: str, message: str, day_of_week: DayOfWeek, time_of_day: str) -> int:
        ids = await self.create_many(owner_id, message, [day_of_week], time_of_day)
        return ids[0]

    async def create_many(
        self,
        owner_id: str,
        message: str,
        days: Iterable[DayOfWeek],
        time_of_day: str,
    ) -> list[int]:
        """Create one row per day in a single transaction, returning the new ids in order."""
        days = [DayOfWeek(day) for day in days]
        _check_time_of_day(time_of_day)
        conn = self._ensure_conn()

        ids: list[int] = []
        async with self._lock:
            try:
                for day in days:
                    async with conn.execute(
                        "INSERT INTO reminders (chat_id, message, day_of_week, time, recurring) VALUES (?, ?, ?, ?, ?)",
                        (owner_id, message, day.value, time_of_day, "yes"),
                    ) as cursor:
                        ids.append(cursor.lastrowid)
                await conn.commit()
            except aiosqlite.Error as e:
                await self._rollback(conn)
                raise StorageError(f"Failed to create reminders: {e}") from e

        for reminder_id, day in zip(ids, days):
            logger.trace(f"Reminder created: id={reminder_id}, owner={owner_id}, day={day.value}, time={time_of_day}")
            bus.emit(E.REMINDER_CREATED, reminder_id=reminder_id, owner_id=owner_id)
        return ids

    async def list_by_owner(self, owner_id: str) -> list[Reminder]:
        return await self._fetch(
            f"SELECT {_COLUMNS} FROM reminders WHERE chat_id = ? ORDER BY id",
            (owner_id,),
        )

    async def delete(self, reminder_id: int, owner_id: str) -> int:
        """Delete one of the owner's reminders; 0 when it doesn't exist or belongs to someone else."""
        if not 0 < reminder_id <= _MAX_ID:
            return 0
        changes = await self._write(
            "DELETE FROM reminders WHERE id = ? AND chat_id = ?",
            (reminder_id, owner_id),
        )
        if changes:
            logger.trace(f"Reminder deleted: id={reminder_id}, owner={owner_id}")
            bus.emit(E.REMINDER_DELETED, reminder_id=reminder_id, owner_id=owner_id)
        return changes

    async def update_message(self, reminder_id: int, owner_id: str, new_message: str) -> int:
        if not 0 < reminder_id <= _MAX_ID:
            return 0
        changes = await self._write(
            "UPDATE reminders SET message = ? WHERE id = ? AND chat_id = ?",
            (new_message, reminder_id, owner_id),
        )
        if changes:
            logger.trace(f"Reminder updated: id={reminder_id}, owner={owner_id}")
            bus.emit(E.REMINDER_UPDATED, reminder_id=reminder_id, owner_id=owner_id)
        return changes

    async def find_matching(self, day_of_week: DayOfWeek, time_of_day: str) -> list[Reminder]:
        """All reminders due at `day_of_week` / `time_of_day`, across every owner."""
        return await self._fetch(
            f"SELECT {_COLUMNS} FROM reminders WHERE day_of_week = ? AND time = ? ORDER BY id",
            (DayOfWeek(day_of_week).value, time_of_day),
        )
