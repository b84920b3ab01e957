"""Tests for command execution against a real store."""

import pytest
from unittest.mock import AsyncMock

from remindbot.core.commands import WELCOME_TEXT, handle_command
from remindbot.core.context import AppContext
from remindbot.datamodel import DayOfWeek
from remindbot.storage import StorageError

from conftest import TZ

OWNER = "100"
OTHER = "200"


@pytest.mark.asyncio
async def test_start_replies_with_help(ctx):
    assert await handle_command(ctx, OWNER, "/start") == [WELCOME_TEXT]


@pytest.mark.asyncio
async def test_add_creates_one_reminder_per_day(ctx):
    replies = await handle_command(
        ctx, OWNER, "/addReminder remind to take out waste every Sunday and Wednesday 8pm"
    )

    assert replies == ["✅ Reminder set for sunday, wednesday at 20:00 IST"]
    reminders = await ctx.store.list_by_owner(OWNER)
    assert len(reminders) == 2
    assert len({r.id for r in reminders}) == 2
    assert [r.day_of_week for r in reminders] == [DayOfWeek.SUNDAY, DayOfWeek.WEDNESDAY]
    assert {r.message for r in reminders} == {"to take out waste"}
    assert {r.time_of_day for r in reminders} == {"20:00"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text,expected",
    [
        ("/addReminder take out waste on sunday 8pm", 'use the word "every"'),
        ("/addReminder take out waste every sunday", "No valid time found"),
        ("/addReminder take out waste every weekend 8pm", "No days found"),
        ("/addReminder", "Usage"),
    ],
)
async def test_rejected_add_does_not_touch_store(ctx, text, expected):
    [reply] = await handle_command(ctx, OWNER, text)

    assert reply.startswith("❗")
    assert expected in reply
    assert await ctx.store.list_by_owner(OWNER) == []


@pytest.mark.asyncio
async def test_list_formats_owned_reminders(ctx):
    first = await ctx.store.create(OWNER, "stretch", DayOfWeek.MONDAY, "10:00")
    second = await ctx.store.create(OWNER, "read", DayOfWeek.FRIDAY, "21:30")
    await ctx.store.create(OTHER, "not mine", DayOfWeek.MONDAY, "10:00")

    [reply] = await handle_command(ctx, OWNER, "/listReminders")

    assert reply == (
        "📋 Your Reminders:\n\n"
        f"ID: {first} \nMessage: stretch \nDay: monday \nTime: 10:00\n\n"
        f"ID: {second} \nMessage: read \nDay: friday \nTime: 21:30"
    )
    assert await handle_command(ctx, OWNER, "/listReminders") == [reply]


@pytest.mark.asyncio
async def test_list_empty(ctx):
    assert await handle_command(ctx, OWNER, "/listReminders") == ["❗ You have no reminders set."]


@pytest.mark.asyncio
async def test_delete_foreign_reminder_is_not_found(ctx):
    reminder_id = await ctx.store.create(OWNER, "mine", DayOfWeek.MONDAY, "10:00")

    replies = await handle_command(ctx, OTHER, f"/deleteReminder {reminder_id}")

    assert replies == [f"❗ No reminder found with ID {reminder_id}."]
    assert [r.id for r in await ctx.store.list_by_owner(OWNER)] == [reminder_id]


@pytest.mark.asyncio
async def test_delete_own_reminder(ctx):
    reminder_id = await ctx.store.create(OWNER, "mine", DayOfWeek.MONDAY, "10:00")

    replies = await handle_command(ctx, OWNER, f"/deleteReminder {reminder_id}")

    assert replies == [f"✅ Reminder with ID {reminder_id} deleted."]
    assert await ctx.store.list_by_owner(OWNER) == []


@pytest.mark.asyncio
async def test_delete_many_attempts_only_numeric_ids(ctx):
    store = AsyncMock()
    store.delete.return_value = 1
    mock_ctx = AppContext(store=store, sink=ctx.sink, timezone=TZ)

    replies = await handle_command(mock_ctx, OWNER, "/deleteReminders 1,abc,3")

    assert [call.args for call in store.delete.await_args_list] == [(1, OWNER), (3, OWNER)]
    assert replies == ["✅ Successfully deleted reminders with IDs: 1, 3"]


@pytest.mark.asyncio
async def test_delete_many_reports_attempted_ids_regardless_of_outcome(ctx):
    mine = await ctx.store.create(OWNER, "mine", DayOfWeek.MONDAY, "10:00")
    theirs = await ctx.store.create(OTHER, "theirs", DayOfWeek.MONDAY, "10:00")

    replies = await handle_command(ctx, OWNER, f"/deleteReminders {mine}, {theirs}, 999")

    assert replies == [f"✅ Successfully deleted reminders with IDs: {mine}, {theirs}, 999"]
    assert await ctx.store.list_by_owner(OWNER) == []
    assert [r.id for r in await ctx.store.list_by_owner(OTHER)] == [theirs]


@pytest.mark.asyncio
async def test_delete_many_continues_after_storage_error(ctx):
    store = AsyncMock()
    store.delete.side_effect = [StorageError("locked"), 1]
    mock_ctx = AppContext(store=store, sink=ctx.sink, timezone=TZ)

    replies = await handle_command(mock_ctx, OWNER, "/deleteReminders 1,2")

    assert replies == [
        "❌ Failed to delete reminder with ID: 1",
        "✅ Successfully deleted reminders with IDs: 1, 2",
    ]


@pytest.mark.asyncio
async def test_update_own_reminder(ctx):
    reminder_id = await ctx.store.create(OWNER, "old", DayOfWeek.MONDAY, "10:00")

    replies = await handle_command(ctx, OWNER, f"/updateReminder {reminder_id} New Text")

    assert replies == [f"✅ Reminder with ID {reminder_id} updated."]
    [reminder] = await ctx.store.list_by_owner(OWNER)
    assert reminder.message == "New Text"


@pytest.mark.asyncio
async def test_update_missing_reminder_is_not_found(ctx):
    reminder_id = await ctx.store.create(OWNER, "old", DayOfWeek.MONDAY, "10:00")
    before = await ctx.store.list_by_owner(OWNER)

    replies = await handle_command(ctx, OWNER, f"/updateReminder {reminder_id + 10} new")

    assert replies == [f"❗ No reminder found with ID {reminder_id + 10}."]
    assert await ctx.store.list_by_owner(OWNER) == before


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text,method,expected",
    [
        ("/listReminders", "list_by_owner", "❗ Error retrieving reminders."),
        ("/deleteReminder 1", "delete", "❗ Error deleting reminder."),
        ("/updateReminder 1 x", "update_message", "❗ Error updating reminder."),
        ("/addReminder gym every monday 8pm", "create_many", "❗ Error saving reminder."),
    ],
)
async def test_storage_errors_get_generic_reply(ctx, text, method, expected):
    store = AsyncMock()
    getattr(store, method).side_effect = StorageError("database is locked")
    mock_ctx = AppContext(store=store, sink=ctx.sink, timezone=TZ)

    assert await handle_command(mock_ctx, OWNER, text) == [expected]


@pytest.mark.asyncio
async def test_unknown_command(ctx):
    [reply] = await handle_command(ctx, OWNER, "/snooze 1")
    assert "/start" in reply


HUGE_ID = "99999999999999999999"


@pytest.mark.asyncio
async def test_delete_out_of_range_id_is_not_found(ctx):
    assert await handle_command(ctx, OWNER, f"/deleteReminder {HUGE_ID}") == [
        f"❗ No reminder found with ID {HUGE_ID}."
    ]


@pytest.mark.asyncio
async def test_update_out_of_range_id_is_not_found(ctx):
    reminder_id = await ctx.store.create(OWNER, "old", DayOfWeek.MONDAY, "10:00")

    assert await handle_command(ctx, OWNER, f"/updateReminder {HUGE_ID} new") == [
        f"❗ No reminder found with ID {HUGE_ID}."
    ]
    [reminder] = await ctx.store.list_by_owner(OWNER)
    assert (reminder.id, reminder.message) == (reminder_id, "old")


@pytest.mark.asyncio
async def test_delete_many_with_out_of_range_id_keeps_going(ctx):
    first = await ctx.store.create(OWNER, "a", DayOfWeek.MONDAY, "10:00")
    second = await ctx.store.create(OWNER, "b", DayOfWeek.MONDAY, "10:00")

    replies = await handle_command(ctx, OWNER, f"/deleteReminders {first},{HUGE_ID},{second}")

    assert replies == [f"✅ Successfully deleted reminders with IDs: {first}, {HUGE_ID}, {second}"]
    assert await ctx.store.list_by_owner(OWNER) == []
