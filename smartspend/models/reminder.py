"""
Reminder Models

A small to-do list of payment reminders. Session-only, never persisted,
never read by the dashboard or the AI services.
"""

from datetime import date
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class ReminderPriority(str, Enum):
    """Reminder priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Reminder(BaseModel):
    """A single reminder."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    completed: bool = False
    priority: ReminderPriority = ReminderPriority.MEDIUM


def _seed_reminders() -> tuple[Reminder, ...]:
    return (
        Reminder(
            id="1",
            title="Pagar tarjeta de crédito",
            date="2023-11-05",
            completed=False,
            priority=ReminderPriority.HIGH,
        ),
        Reminder(
            id="2",
            title="Revisar suscripción Netflix",
            date="2023-11-10",
            completed=True,
            priority=ReminderPriority.LOW,
        ),
    )


class ReminderList(BaseModel):
    """Ordered reminders. Each operation returns a new list."""
    model_config = ConfigDict(frozen=True)

    items: tuple[Reminder, ...] = Field(default_factory=_seed_reminders)

    def add(self, title: str, today: Optional[date] = None) -> "ReminderList":
        """Append a medium-priority reminder dated today. Blank titles are ignored."""
        if not title.strip():
            return self
        reminder = Reminder(
            title=title,
            date=(today or date.today()).isoformat(),
        )
        return ReminderList(items=self.items + (reminder,))

    def toggle(self, reminder_id: str) -> "ReminderList":
        return ReminderList(items=tuple(
            r.model_copy(update={"completed": not r.completed}) if r.id == reminder_id else r
            for r in self.items
        ))

    def remove(self, reminder_id: str) -> "ReminderList":
        return ReminderList(items=tuple(r for r in self.items if r.id != reminder_id))

    @property
    def pending_count(self) -> int:
        return sum(1 for r in self.items if not r.completed)
