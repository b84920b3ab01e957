"""Reminder scheduler.

Note: reminders have minute resolution. A tick looks up every reminder whose
day and "HH:MM" equal the current wall clock in the configured timezone and
sends it. Minutes during which the process was not running are skipped.
"""

import asyncio
import time
from datetime import datetime

from remindbot.core.context import AppContext
from remindbot.datamodel import Reminder
from remindbot.events import E, bus
from remindbot.logger import logger
from remindbot.storage import StorageError
from remindbot.utils import day_of_week_of, now_in_tz, time_of_day_of

__all__ = ["format_delivery", "run_tick", "main_loop"]


def format_delivery(reminder: Reminder) -> str:
    return f"🔔 Reminder: {reminder.message}"


async def _deliver(ctx: AppContext, reminder: Reminder) -> bool:
    bus.emit(E.REMINDER_TRIGGERED, reminder=reminder)
    try:
        await ctx.sink.send_message(reminder.owner_id, format_delivery(reminder))
    except Exception as e:
        logger.error(f"Failed to deliver reminder {reminder.id} to chat {reminder.owner_id}: {e}", exc_info=e)
        bus.emit(E.REMINDER_SEND_FAILED, reminder=reminder)
        return False
    bus.emit(E.REMINDER_SENT, reminder=reminder)
    return True


async def run_tick(ctx: AppContext, now: datetime | None = None) -> int:
    """Deliver everything due at `now`; returns the number of successful deliveries."""
    now = (now or now_in_tz(ctx.timezone)).astimezone(ctx.timezone)
    day = day_of_week_of(now)
    time_of_day = time_of_day_of(now)

    try:
        due = await ctx.store.find_matching(day, time_of_day)
    except StorageError as e:
        logger.error(f"Due-now query failed for {day.value} {time_of_day}: {e}", exc_info=e)
        return 0

    if not due:
        logger.trace(f"No reminders due at {day.value} {time_of_day}")
        return 0

    logger.info(f"{len(due)} reminder(s) due at {day.value} {time_of_day}")
    delivered = 0
    for reminder in due:
        if await _deliver(ctx, reminder):
            delivered += 1
    return delivered


def _seconds_until_next_tick(interval: float) -> float:
    # Wake on interval boundaries of the wall clock, so 60s ticks land on each new minute
    return interval - (time.time() % interval)


async def main_loop(ctx: AppContext, shutdown_event: asyncio.Event, interval: float = 60) -> None:
    logger.info(f"Reminder scheduler started (interval {interval}s, timezone {ctx.timezone.zone})")

    last_slot = None
    while not shutdown_event.is_set():
        # An early wake can land just before the boundary; never tick the same minute twice
        now = now_in_tz(ctx.timezone)
        slot = (day_of_week_of(now), time_of_day_of(now))
        if slot != last_slot:
            last_slot = slot
            await run_tick(ctx, now)

        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=_seconds_until_next_tick(interval))
        except asyncio.TimeoutError:
            pass

    logger.info("Reminder scheduler stopped")
