# src/study_planner/tasks/reminders.py

from __future__ import annotations

"""
Reminder window detection.

find_due_reminder() decides whether a task should surface an alert now.
It returns at most one task per call (first match in store order wins) and has
no notion of the "reminders enabled" preference: gating is done by the caller
(see task_api.check_reminders).
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from .task_models import Task, to_local_naive

logger = logging.getLogger(__name__)

REMINDER_WINDOW_MINUTES = 5

_MINUTE = timedelta(minutes=1)


def minutes_until(reminder_time: datetime, now: datetime) -> int:
    """
    Whole minutes from `now` to `reminder_time`, truncated toward zero.

    +3m30s -> 3, -30s -> 0, -1m10s -> -1.
    Aware values are compared in local wall-clock time, like Task fields.
    """
    delta = to_local_naive(reminder_time) - to_local_naive(now)
    if delta >= timedelta(0):
        return delta // _MINUTE
    return -((-delta) // _MINUTE)


def is_reminder_due(task: Task, now: datetime, *, window_minutes: int = REMINDER_WINDOW_MINUTES) -> bool:
    if task.reminder_time is None or task.is_completed:
        return False
    diff = minutes_until(task.reminder_time, now)
    return 0 <= diff <= window_minutes


def find_due_reminder(
    tasks: Iterable[Task],
    now: datetime,
    *,
    window_minutes: int = REMINDER_WINDOW_MINUTES,
) -> Task | None:
    now = to_local_naive(now)
    for task in tasks:
        if is_reminder_due(task, now, window_minutes=window_minutes):
            logger.info("Reminder due id=%s reminder_time=%s", task.id, task.reminder_time)
            return task
    return None


def reminder_message(task: Task) -> str:
    return f"Don't forget: {task.title}"
