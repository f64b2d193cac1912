# src/study_planner/errors.py

"""
Error taxonomy shared by the planner core.

Storage backends raise StorageIOError; the codec raises MalformedRecordError;
TaskStore.load() turns decode failures into StorageCorruptionError.
Nothing here is used for ordinary control flow ("not found" is a no-op, not an error).
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for every error raised by study_planner."""


class PreconditionViolation(PlannerError, ValueError):
    """A caller broke a documented precondition (empty id/title, duplicate id, bad day...)."""


class MalformedRecordError(PlannerError, ValueError):
    """A task record is missing a required field or has one of the wrong type."""

    def __init__(self, message: str, *, field: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.index = index

    def __str__(self) -> str:
        msg = super().__str__()
        if self.index is not None:
            return f"record #{self.index}: {msg}"
        return msg


class StorageCorruptionError(PlannerError):
    """The persisted task blob cannot be decoded into a task collection."""


class StorageIOError(PlannerError):
    """Reading from or writing to the blob store failed."""
