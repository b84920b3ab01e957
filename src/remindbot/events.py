"""In-process event bus: the Bus class and the event name set E.

Handlers may be plain functions or coroutines. Plain handlers run inline
during emit(); coroutine handlers are scheduled on the running loop.
"""

from __future__ import annotations

from typing import Any, Callable

from pyee.asyncio import AsyncIOEventEmitter

from remindbot.logger import logger

Handler = Callable[..., Any]


class E:
    COMMAND_RECEIVED = "command.received"
    REMINDER_CREATED = "reminder.created"
    REMINDER_DELETED = "reminder.deleted"
    REMINDER_UPDATED = "reminder.updated"
    REMINDER_TRIGGERED = "reminder.triggered"
    REMINDER_SENT = "reminder.sent"
    REMINDER_SEND_FAILED = "reminder.send_failed"


class Bus(AsyncIOEventEmitter):
    def on(self, event: str) -> Callable[[Handler], Handler]:
        """Decorator that registers a handler for `event`."""
        def decorator(handler: Handler) -> Handler:
            logger.debug(f"Registering event handler: {event} -> {handler.__name__}")
            super(Bus, self).on(event, handler)
            return handler

        return decorator


bus = Bus()

__all__ = ["bus", "Bus", "E"]
