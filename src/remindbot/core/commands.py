"""Executes parsed commands against the application context.

handle_command() is the single entry point used by the transport: it takes
the raw command line of one chat and returns the replies to send back.
"""

from remindbot.core.context import AppContext
from remindbot.core.parser import *
from remindbot.events import E, bus
from remindbot.logger import logger
from remindbot.storage import StorageError

__all__ = ["WELCOME_TEXT", "handle_command", "execute"]

WELCOME_TEXT = """👋 Welcome to Reminder Bot!

Use the following commands to manage your reminders:

1. /addReminder - Add a new reminder.
   Example: /addReminder remind to take out waste every Sunday and Wednesday 8pm

2. /listReminders - List all your active reminders.

3. /deleteReminder [id] - Delete a specific reminder by its ID.
   Example: /deleteReminder 1

4. /updateReminder [id] [new_message] - Update a specific reminder's message by its ID.
   Example: /updateReminder 1 Take out trash

5. /deleteReminders [id1,id2,...] - Delete multiple reminders at once.
   Example: /deleteReminders 1,3,5

Try any of these commands to manage your reminders!"""


async def _add(ctx: AppContext, owner_id: str, intent: AddReminder) -> list[str]:
    try:
        await ctx.store.create_many(owner_id, intent.message, intent.days, intent.time_of_day)
    except StorageError as e:
        logger.error(f"Failed to save reminder for chat {owner_id}: {e}", exc_info=e)
        return ["❗ Error saving reminder."]

    day_names = ", ".join(day.value for day in intent.days)
    logger.info(f"Chat {owner_id} added reminder for {day_names} at {intent.time_of_day}")
    return [f"✅ Reminder set for {day_names} at {intent.time_of_day} {intent.tz_label}"]


async def _list(ctx: AppContext, owner_id: str) -> list[str]:
    try:
        reminders = await ctx.store.list_by_owner(owner_id)
    except StorageError as e:
        logger.error(f"Failed to list reminders for chat {owner_id}: {e}", exc_info=e)
        return ["❗ Error retrieving reminders."]

    if not reminders:
        return ["❗ You have no reminders set."]

    reminder_list = "\n\n".join(
        f"ID: {r.id} \nMessage: {r.message} \nDay: {r.day_of_week.value} \nTime: {r.time_of_day}"
        for r in reminders
    )
    return [f"📋 Your Reminders:\n\n{reminder_list}"]


async def _delete(ctx: AppContext, owner_id: str, intent: DeleteReminder) -> list[str]:
    try:
        changes = await ctx.store.delete(intent.id, owner_id)
    except StorageError as e:
        logger.error(f"Failed to delete reminder {intent.id} for chat {owner_id}: {e}", exc_info=e)
        return ["❗ Error deleting reminder."]

    if changes == 0:
        return [f"❗ No reminder found with ID {intent.id}."]
    return [f"✅ Reminder with ID {intent.id} deleted."]


async def _delete_many(ctx: AppContext, owner_id: str, intent: DeleteReminders) -> list[str]:
    # The final reply lists every attempted id, whatever each delete returned
    replies = []
    for reminder_id in intent.ids:
        try:
            await ctx.store.delete(reminder_id, owner_id)
        except StorageError as e:
            logger.error(f"Failed to delete reminder {reminder_id} for chat {owner_id}: {e}", exc_info=e)
            replies.append(f"❌ Failed to delete reminder with ID: {reminder_id}")

    attempted = ", ".join(str(reminder_id) for reminder_id in intent.ids)
    replies.append(f"✅ Successfully deleted reminders with IDs: {attempted}")
    return replies


async def _update(ctx: AppContext, owner_id: str, intent: UpdateReminder) -> list[str]:
    try:
        changes = await ctx.store.update_message(intent.id, owner_id, intent.new_message)
    except StorageError as e:
        logger.error(f"Failed to update reminder {intent.id} for chat {owner_id}: {e}", exc_info=e)
        return ["❗ Error updating reminder."]

    if changes == 0:
        return [f"❗ No reminder found with ID {intent.id}."]
    return [f"✅ Reminder with ID {intent.id} updated."]


async def execute(ctx: AppContext, owner_id: str, intent: Intent) -> list[str]:
    if isinstance(intent, Start):
        return [WELCOME_TEXT]
    if isinstance(intent, AddReminder):
        return await _add(ctx, owner_id, intent)
    if isinstance(intent, ListReminders):
        return await _list(ctx, owner_id)
    if isinstance(intent, DeleteReminder):
        return await _delete(ctx, owner_id, intent)
    if isinstance(intent, DeleteReminders):
        return await _delete_many(ctx, owner_id, intent)
    if isinstance(intent, UpdateReminder):
        return await _update(ctx, owner_id, intent)
    return [f"❗ Unknown command /{intent.keyword}. Send /start to see the available commands."]


async def handle_command(ctx: AppContext, owner_id: str, text: str) -> list[str]:
    keyword, argument = split_command(text)
    logger.debug(f"Chat {owner_id} sent /{keyword}")
    bus.emit(E.COMMAND_RECEIVED, owner_id=owner_id, keyword=keyword)

    try:
        intent = parse_command(keyword, argument, ctx.timezone)
    except CommandParseError as e:
        logger.info(f"Rejected /{keyword} from chat {owner_id}: {e}")
        return [str(e)]

    return await execute(ctx, owner_id, intent)
