# src/study_planner/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any

from ..errors import PreconditionViolation

TaskCollection = tuple["Task", ...]


def new_task_id() -> str:
    """Fresh opaque id; never reused across the store."""
    return uuid.uuid4().hex


def to_local_naive(value: datetime) -> datetime:
    """
    Normalize to local wall-clock time.

    Aware values (e.g. parsed from "...Z") are converted to the local zone and
    stripped of tzinfo; naive values are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


@dataclass(frozen=True, slots=True)
class Task:
    """
    One study task.

    Only year/month/day of due_date matter for day and month bucketing;
    the time of day is kept but ignored there.

    Preconditions (raise PreconditionViolation):
    - id is a non-empty string
    - title is non-empty after stripping whitespace
    """

    id: str
    title: str
    description: str
    due_date: datetime
    reminder_time: datetime | None = None
    is_completed: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise PreconditionViolation("task id must be a non-empty string")
        if not isinstance(self.title, str) or not self.title.strip():
            raise PreconditionViolation("task title must be non-empty")

        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(self, "due_date", to_local_naive(self.due_date))
        if self.reminder_time is not None:
            object.__setattr__(self, "reminder_time", to_local_naive(self.reminder_time))

    @classmethod
    def create(
        cls,
        title: str,
        due_date: datetime,
        *,
        description: str = "",
        reminder_time: datetime | None = None,
    ) -> Task:
        return cls(
            id=new_task_id(),
            title=title,
            description=description,
            due_date=due_date,
            reminder_time=reminder_time,
        )

    @property
    def has_reminder(self) -> bool:
        return self.reminder_time is not None

    def with_changes(self, **changes: Any) -> Task:
        """
        Build the whole-record replacement used by TaskStore.update().

        The id is fixed for the lifetime of a task.
        """
        if "id" in changes and changes["id"] != self.id:
            raise PreconditionViolation("task id is immutable")
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise PreconditionViolation(f"unknown task fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def mark_completed(self, done: bool = True) -> Task:
        return replace(self, is_completed=bool(done))
