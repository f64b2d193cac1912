# src/study_planner/tasks/task_queries.py

from __future__ import annotations

"""
Date-bucketed views over a task collection.

All functions are pure: they take a snapshot (e.g. TaskStore.tasks) and never
mutate it. Only the calendar day of due_date is compared; time of day is ignored.
"""

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ..errors import PreconditionViolation
from .task_models import Task


def is_same_day(a: date, b: date) -> bool:
    """True when a and b fall on the same calendar day (works for date and datetime)."""
    return a.year == b.year and a.month == b.month and a.day == b.day


def tasks_for_day(tasks: Iterable[Task], day: date) -> list[Task]:
    """Tasks due on `day`, in store order."""
    return [t for t in tasks if is_same_day(t.due_date, day)]


def tasks_for_date(tasks: Iterable[Task], selected: date) -> list[Task]:
    """Tasks for a selected calendar cell. Same matching rule as tasks_for_day()."""
    return tasks_for_day(tasks, selected)


def incomplete_first_key(task: Task) -> int:
    return 1 if task.is_completed else 0


def sort_incomplete_first(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable: ties keep store order.
    return sorted(tasks, key=incomplete_first_key)


def _check_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise PreconditionViolation(f"month must be in 1..12, got {month}")
    if not 1 <= year <= 9999:
        raise PreconditionViolation(f"year out of range: {year}")


def days_in_month(year: int, month: int) -> int:
    _check_month(year, month)
    return calendar.monthrange(year, month)[1]


def calendar_day(year: int, month: int, day: int) -> date:
    """Validated calendar day; 2023-02-29 and friends raise PreconditionViolation."""
    n = days_in_month(year, month)
    if not 1 <= day <= n:
        raise PreconditionViolation(f"{year:04d}-{month:02d} has {n} days, got day {day}")
    return date(year, month, day)


def dates_with_tasks_in_month(tasks: Iterable[Task], year: int, month: int) -> set[int]:
    """Distinct day-of-month numbers that have at least one task due (calendar dots)."""
    _check_month(year, month)
    return {t.due_date.day for t in tasks if t.due_date.year == year and t.due_date.month == month}


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move `delta` months from (year, month), carrying into the year (Dec + 1 -> Jan next year)."""
    _check_month(year, month)
    y, m0 = divmod(year * 12 + (month - 1) + delta, 12)
    _check_month(y, m0 + 1)
    return y, m0 + 1


@dataclass(frozen=True, slots=True)
class CalendarMonth:
    """
    Data behind one month grid.

    The grid starts on Sunday; leading_blanks is the number of empty cells
    before day 1.
    """

    year: int
    month: int
    days_in_month: int
    leading_blanks: int
    days_with_tasks: frozenset[int]

    def cells(self) -> list[int | None]:
        return [None] * self.leading_blanks + list(range(1, self.days_in_month + 1))

    def has_tasks(self, day: int) -> bool:
        return day in self.days_with_tasks


def build_calendar_month(tasks: Iterable[Task], year: int, month: int) -> CalendarMonth:
    n = days_in_month(year, month)
    # date.weekday(): Monday=0 .. Sunday=6; shift so Sunday is column 0.
    leading = (date(year, month, 1).weekday() + 1) % 7
    return CalendarMonth(
        year=year,
        month=month,
        days_in_month=n,
        leading_blanks=leading,
        days_with_tasks=frozenset(dates_with_tasks_in_month(tasks, year, month)),
    )
