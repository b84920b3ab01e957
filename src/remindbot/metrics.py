"""
Runtime counters for commands and reminder traffic, fed by the event bus.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from remindbot.events import E, bus


@dataclass
class RuntimeMetrics:
    started_at: float = field(default_factory=time.time)
    command_count: int = 0
    reminder_created_count: int = 0
    reminder_deleted_count: int = 0
    reminder_updated_count: int = 0
    reminder_triggered_count: int = 0
    reminder_sent_count: int = 0
    reminder_send_failed_count: int = 0

    def record_command(self) -> None:
        self.command_count += 1

    def record_created(self) -> None:
        self.reminder_created_count += 1

    def record_deleted(self) -> None:
        self.reminder_deleted_count += 1

    def record_updated(self) -> None:
        self.reminder_updated_count += 1

    def record_triggered(self) -> None:
        self.reminder_triggered_count += 1

    def record_sent(self) -> None:
        self.reminder_sent_count += 1

    def record_send_failed(self) -> None:
        self.reminder_send_failed_count += 1

    def snapshot(self) -> dict:
        return {
            "uptime_seconds": round(time.time() - self.started_at, 1),
            "command_count": self.command_count,
            "reminder_created_count": self.reminder_created_count,
            "reminder_deleted_count": self.reminder_deleted_count,
            "reminder_updated_count": self.reminder_updated_count,
            "reminder_triggered_count": self.reminder_triggered_count,
            "reminder_sent_count": self.reminder_sent_count,
            "reminder_send_failed_count": self.reminder_send_failed_count,
        }


runtime_metrics = RuntimeMetrics()


@bus.on(E.COMMAND_RECEIVED)
def _on_command(**_) -> None:
    runtime_metrics.record_command()


@bus.on(E.REMINDER_CREATED)
def _on_created(**_) -> None:
    runtime_metrics.record_created()


@bus.on(E.REMINDER_DELETED)
def _on_deleted(**_) -> None:
    runtime_metrics.record_deleted()


@bus.on(E.REMINDER_UPDATED)
def _on_updated(**_) -> None:
    runtime_metrics.record_updated()


@bus.on(E.REMINDER_TRIGGERED)
def _on_triggered(**_) -> None:
    runtime_metrics.record_triggered()


@bus.on(E.REMINDER_SENT)
def _on_sent(**_) -> None:
    runtime_metrics.record_sent()


@bus.on(E.REMINDER_SEND_FAILED)
def _on_send_failed(**_) -> None:
    runtime_metrics.record_send_failed()


__all__ = ["RuntimeMetrics", "runtime_metrics"]
