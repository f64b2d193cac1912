# src/study_planner/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from ..errors import MalformedRecordError, PreconditionViolation, StorageCorruptionError, StorageIOError
from .task_codec import dumps_tasks, loads_tasks
from .task_models import Task, TaskCollection

if TYPE_CHECKING:
    from ..core.ports import BlobStore

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
REMINDER_ENABLED_KEY = "reminder_enabled"


class TaskStore:
    """
    Owner of the authoritative task collection.

    Persistence:
    - the whole collection is stored as one JSON blob under TASKS_KEY
    - every mutator writes through before returning
    - the in-memory collection changes only after the write succeeded,
      so memory is never ahead of the blob store

    Concurrency:
    - one asyncio.Lock per instance serializes load/save/mutators/preferences
    - `tasks` returns an immutable snapshot that queries can use without locking
    """

    def __init__(
        self,
        blob_store: BlobStore,
        *,
        tasks_key: str = TASKS_KEY,
        reminder_key: str = REMINDER_ENABLED_KEY,
    ) -> None:
        self._blob = blob_store
        self._tasks_key = tasks_key
        self._reminder_key = reminder_key
        self._tasks: list[Task] = []
        self._lock = asyncio.Lock()

    @property
    def tasks(self) -> TaskCollection:
        return tuple(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- low-level helpers ----

    async def _read_string(self, key: str) -> str | None:
        try:
            return await self._blob.get_string(key)
        except StorageIOError:
            raise
        except OSError as exc:
            raise StorageIOError(f"read failed key={key}") from exc

    async def _write_string(self, key: str, value: str) -> None:
        try:
            await self._blob.set_string(key, value)
        except StorageIOError:
            raise
        except OSError as exc:
            raise StorageIOError(f"write failed key={key}") from exc

    async def _persist_and_commit(self, new_tasks: list[Task]) -> None:
        """Write the collection, then make it authoritative. Caller holds the lock."""
        await self._write_string(self._tasks_key, dumps_tasks(new_tasks))
        self._tasks = new_tasks

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    @staticmethod
    def _duplicate_ids(tasks: Sequence[Task]) -> list[str]:
        seen: set[str] = set()
        dupes: list[str] = []
        for t in tasks:
            if t.id in seen and t.id not in dupes:
                dupes.append(t.id)
            seen.add(t.id)
        return dupes

    # ---- persistence ----

    async def load(self) -> TaskCollection:
        """
        Read the collection from the blob store.

        Missing key -> empty collection.
        Undecodable blob or repeated ids -> StorageCorruptionError (in-memory
        state is left untouched); falling back to an empty list is the caller's
        decision.
        """
        async with self._lock:
            raw = await self._read_string(self._tasks_key)
            if raw is None:
                self._tasks = []
                logger.info("TaskStore loaded key=%s total=0 (empty)", self._tasks_key)
                return ()

            try:
                loaded = loads_tasks(raw)
            except MalformedRecordError as exc:
                logger.exception("Stored tasks blob is corrupt key=%s", self._tasks_key)
                raise StorageCorruptionError(f"cannot decode stored tasks: {exc}") from exc

            dupes = self._duplicate_ids(loaded)
            if dupes:
                logger.error("Stored tasks blob repeats ids key=%s ids=%s", self._tasks_key, dupes)
                raise StorageCorruptionError(f"stored tasks repeat ids: {', '.join(dupes)}")

            self._tasks = loaded
            logger.info("TaskStore loaded key=%s total=%s", self._tasks_key, len(loaded))
            return tuple(loaded)

    async def save(self, tasks: Sequence[Task] | None = None) -> None:
        """
        Write a collection as a single blob, replacing the previous value.

        With `tasks`, that collection becomes authoritative once written;
        without it the current collection is (re)written.
        A collection that repeats an id raises PreconditionViolation.
        """
        async with self._lock:
            new_tasks = list(self._tasks if tasks is None else tasks)
            dupes = self._duplicate_ids(new_tasks)
            if dupes:
                raise PreconditionViolation(f"duplicate task ids: {', '.join(dupes)}")
            await self._persist_and_commit(new_tasks)
            logger.debug("TaskStore saved total=%s", len(new_tasks))

    # ---- mutators (write-through) ----

    async def add(self, task: Task) -> Task:
        async with self._lock:
            if self._index_of(task.id) != -1:
                raise PreconditionViolation(f"task id already exists: {task.id}")
            await self._persist_and_commit([*self._tasks, task])
            logger.debug("Task added id=%s due=%s", task.id, task.due_date.date())
            return task

    async def update(self, task: Task) -> bool:
        """
        Replace the task with the same id.

        Unknown id: no-op (returns False, nothing is written, nothing is inserted).
        """
        async with self._lock:
            idx = self._index_of(task.id)
            if idx == -1:
                logger.debug("Task update ignored: unknown id=%s", task.id)
                return False
            new_tasks = list(self._tasks)
            new_tasks[idx] = task
            await self._persist_and_commit(new_tasks)
            logger.debug("Task updated id=%s completed=%s", task.id, task.is_completed)
            return True

    async def modify(self, task_id: str, change: Callable[[Task], Task]) -> Task | None:
        """
        Read-modify-write of one task under the store lock.

        `change` receives the current record and returns its replacement, so
        concurrent modifications each see the result of the previous one.
        Unknown id -> None, nothing written.
        """
        async with self._lock:
            idx = self._index_of(task_id)
            if idx == -1:
                logger.debug("Task modify ignored: unknown id=%s", task_id)
                return None
            updated = change(self._tasks[idx])
            if updated.id != task_id:
                raise PreconditionViolation("task id is immutable")
            new_tasks = list(self._tasks)
            new_tasks[idx] = updated
            await self._persist_and_commit(new_tasks)
            logger.debug("Task modified id=%s completed=%s", task_id, updated.is_completed)
            return updated

    async def remove(self, task_id: str) -> bool:
        """Delete the task with `task_id`. Unknown id: no-op, returns False."""
        async with self._lock:
            idx = self._index_of(task_id)
            if idx == -1:
                logger.debug("Task remove ignored: unknown id=%s", task_id)
                return False
            new_tasks = self._tasks[:idx] + self._tasks[idx + 1 :]
            await self._persist_and_commit(new_tasks)
            logger.debug("Task removed id=%s", task_id)
            return True

    # ---- preferences ----

    async def set_reminder_enabled(self, enabled: bool) -> None:
        async with self._lock:
            try:
                await self._blob.set_bool(self._reminder_key, bool(enabled))
            except StorageIOError:
                raise
            except OSError as exc:
                raise StorageIOError(f"write failed key={self._reminder_key}") from exc
            logger.debug("Reminder preference set enabled=%s", bool(enabled))

    async def is_reminder_enabled(self) -> bool:
        async with self._lock:
            try:
                value = await self._blob.get_bool(self._reminder_key)
            except StorageIOError:
                raise
            except OSError as exc:
                raise StorageIOError(f"read failed key={self._reminder_key}") from exc
            return True if value is None else bool(value)
