# src/study_planner/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..core.ports import TaskRepo
from ..errors import PreconditionViolation
from .reminders import REMINDER_WINDOW_MINUTES, find_due_reminder
from .task_models import Task

logger = logging.getLogger(__name__)

# Fields an edit dialog may change; id and completion are kept.
EDITABLE_FIELDS = frozenset({"title", "description", "due_date", "reminder_time"})


async def check_reminders(
    store: TaskRepo,
    *,
    now: datetime | None = None,
    window_minutes: int = REMINDER_WINDOW_MINUTES,
) -> Task | None:
    """
    Call-site helper for "should I alert now?" (e.g. on screen entry).

    Returns None when reminders are disabled; otherwise the first task whose
    reminder falls inside the window, evaluated on the store's current snapshot.
    """
    if not await store.is_reminder_enabled():
        logger.debug("Reminders disabled; skipping check")
        return None
    if now is None:
        now = datetime.now()
    return find_due_reminder(store.tasks, now, window_minutes=window_minutes)


async def create_task(
    store: TaskRepo,
    *,
    title: str,
    due_date: datetime,
    description: str = "",
    reminder_time: datetime | None = None,
) -> Task:
    """Convenience helper: build a task with a fresh id and add it to the store."""
    task = Task.create(title, due_date, description=description, reminder_time=reminder_time)
    return await store.add(task)


async def set_completed(store: TaskRepo, task_id: str, done: bool = True) -> Task | None:
    """Whole-record replacement of the completion flag. Unknown id -> None."""
    return await store.modify(task_id, lambda current: current.mark_completed(done))


async def edit_task(store: TaskRepo, task_id: str, **fields: Any) -> Task | None:
    """
    Replace the editable fields of a task (title, description, due_date, reminder_time).

    Unknown id -> None. Passing any other field raises PreconditionViolation.
    """
    extra = set(fields) - EDITABLE_FIELDS
    if extra:
        raise PreconditionViolation(f"not editable: {', '.join(sorted(extra))}")
    return await store.modify(task_id, lambda current: current.with_changes(**fields))
