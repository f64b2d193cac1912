# src/study_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and presentation layers swappable and makes testing easier.
"""

from collections.abc import Callable, Sequence
from typing import Awaitable, Protocol

from ..tasks.task_models import Task, TaskCollection


class BlobStore(Protocol):
    """
    Opaque string-keyed key-value persistence.

    Implementations raise StorageIOError when the backend fails.
    Durability is whatever the backend provides; the core does not add any.
    """

    def get_string(self, key: str) -> Awaitable[str | None]: ...
    def set_string(self, key: str, value: str) -> Awaitable[None]: ...
    def get_bool(self, key: str) -> Awaitable[bool | None]: ...
    def set_bool(self, key: str, value: bool) -> Awaitable[None]: ...


class TaskRepo(Protocol):
    """
    What a presentation layer may depend on.

    Mutations are reported through return values; the UI re-reads `tasks`
    afterwards instead of holding callbacks into the store.
    """

    @property
    def tasks(self) -> TaskCollection: ...

    def get(self, task_id: str) -> Task | None: ...

    # Persistence
    def load(self) -> Awaitable[TaskCollection]: ...
    def save(self, tasks: Sequence[Task] | None = None) -> Awaitable[None]: ...

    # Mutators (write-through)
    def add(self, task: Task) -> Awaitable[Task]: ...
    def update(self, task: Task) -> Awaitable[bool]: ...
    def modify(self, task_id: str, change: Callable[[Task], Task]) -> Awaitable[Task | None]: ...
    def remove(self, task_id: str) -> Awaitable[bool]: ...

    # Preferences
    def set_reminder_enabled(self, enabled: bool) -> Awaitable[None]: ...
    def is_reminder_enabled(self) -> Awaitable[bool]: ...
