# src/study_planner/tasks/task_codec.py

from __future__ import annotations

"""
Task <-> plain record mapping.

Record schema (one task):
    {"id": str, "title": str, "description": str,
     "dueDate": ISO-8601 str, "reminderTime": ISO-8601 str | null,
     "isCompleted": bool}

The "tasks" blob is a JSON array of such records.
"""

import json
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

from ..errors import MalformedRecordError, PreconditionViolation
from .task_models import Task

FIELD_ID = "id"
FIELD_TITLE = "title"
FIELD_DESCRIPTION = "description"
FIELD_DUE_DATE = "dueDate"
FIELD_REMINDER_TIME = "reminderTime"
FIELD_IS_COMPLETED = "isCompleted"


def _encode_dt(value: datetime) -> str:
    return value.isoformat()


def _decode_dt(raw: Any, field: str) -> datetime:
    if not isinstance(raw, str):
        raise MalformedRecordError(f"{field} must be an ISO-8601 string", field=field)
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError as exc:
        raise MalformedRecordError(f"{field} is not a valid date-time: {raw!r}", field=field) from exc


def _require_str(record: Mapping[str, Any], field: str) -> str:
    if field not in record:
        raise MalformedRecordError(f"missing required field {field!r}", field=field)
    value = record[field]
    if not isinstance(value, str):
        raise MalformedRecordError(f"{field} must be a string", field=field)
    return value


def encode_task(task: Task) -> dict[str, Any]:
    return {
        FIELD_ID: task.id,
        FIELD_TITLE: task.title,
        FIELD_DESCRIPTION: task.description,
        FIELD_DUE_DATE: _encode_dt(task.due_date),
        FIELD_REMINDER_TIME: _encode_dt(task.reminder_time) if task.reminder_time is not None else None,
        FIELD_IS_COMPLETED: bool(task.is_completed),
    }


def decode_task(record: Mapping[str, Any]) -> Task:
    """
    Inverse of encode_task().

    Tolerated:
    - reminderTime absent/null -> None
    - isCompleted absent/null  -> False
    - unknown extra keys       -> ignored

    Everything else that is missing or mistyped raises MalformedRecordError.
    """
    if not isinstance(record, Mapping):
        raise MalformedRecordError(f"task record must be an object, got {type(record).__name__}")

    task_id = _require_str(record, FIELD_ID)
    title = _require_str(record, FIELD_TITLE)
    description = _require_str(record, FIELD_DESCRIPTION)

    if FIELD_DUE_DATE not in record:
        raise MalformedRecordError(f"missing required field {FIELD_DUE_DATE!r}", field=FIELD_DUE_DATE)
    due_date = _decode_dt(record[FIELD_DUE_DATE], FIELD_DUE_DATE)

    raw_reminder = record.get(FIELD_REMINDER_TIME)
    reminder_time = None if raw_reminder is None else _decode_dt(raw_reminder, FIELD_REMINDER_TIME)

    raw_completed = record.get(FIELD_IS_COMPLETED)
    if raw_completed is None:
        is_completed = False
    elif isinstance(raw_completed, bool):
        is_completed = raw_completed
    else:
        raise MalformedRecordError(f"{FIELD_IS_COMPLETED} must be a boolean", field=FIELD_IS_COMPLETED)

    try:
        return Task(
            id=task_id,
            title=title,
            description=description,
            due_date=due_date,
            reminder_time=reminder_time,
            is_completed=is_completed,
        )
    except PreconditionViolation as exc:
        raise MalformedRecordError(str(exc)) from exc


def encode_tasks(tasks: Iterable[Task]) -> list[dict[str, Any]]:
    return [encode_task(t) for t in tasks]


def decode_tasks(records: Sequence[Any]) -> list[Task]:
    out: list[Task] = []
    for i, record in enumerate(records):
        try:
            out.append(decode_task(record))
        except MalformedRecordError as exc:
            raise MalformedRecordError(str(exc), field=exc.field, index=i) from exc
    return out


def dumps_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps(encode_tasks(tasks), ensure_ascii=False)


def loads_tasks(raw: str) -> list[Task]:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise MalformedRecordError(f"tasks blob is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise MalformedRecordError(f"tasks blob must be a JSON array, got {type(data).__name__}")
    return decode_tasks(data)
