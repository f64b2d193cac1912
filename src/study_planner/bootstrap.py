# src/study_planner/bootstrap.py

"""
Bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the configured blob store into a TaskStore,
- offers one-call startup (load tasks, tolerate a corrupt blob if asked to).
"""

from __future__ import annotations

import logging
from datetime import datetime

from .config import Settings, get_settings
from .core.ports import BlobStore
from .core.state import PlannerState
from .errors import StorageCorruptionError
from .logging_setup import setup_logging
from .storage.json_blob_store import JsonFileBlobStore
from .storage.memory_blob_store import MemoryBlobStore
from .storage.sqlite_blob_store import SqliteBlobStore
from .tasks.task_api import check_reminders
from .tasks.task_models import Task
from .tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    if settings.storage_backend == "memory":
        return
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.json_path.parent.mkdir(parents=True, exist_ok=True)


def init_logging(settings: Settings | None = None) -> None:
    if settings is None:
        settings = get_settings()
    console_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if not isinstance(console_level, int):
        console_level = logging.INFO
    setup_logging(log_dir=settings.data_dir, console_level=console_level)


def create_blob_store(settings: Settings) -> BlobStore:
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryBlobStore()
    if backend == "json":
        return JsonFileBlobStore(settings.json_path)
    return SqliteBlobStore(settings.db_path)


def create_initial_state(*, settings: Settings | None = None) -> PlannerState:
    """
    Create PlannerState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    blob_store = create_blob_store(settings)
    state = PlannerState(
        settings=settings,
        blob_store=blob_store,
        task_store=TaskStore(blob_store),
    )
    logger.info("Planner state ready app=%s backend=%s", settings.app_name, settings.storage_backend)
    return state


async def start(state: PlannerState, *, empty_on_corruption: bool = False) -> tuple[Task, ...]:
    """
    Load tasks at startup.

    A corrupt blob propagates as StorageCorruptionError unless the caller opts into
    starting with an empty list. The corrupt blob is not overwritten until the next mutation.
    """
    try:
        return await state.task_store.load()
    except StorageCorruptionError:
        if not empty_on_corruption:
            raise
        logger.warning("Starting with an empty task list: stored tasks could not be decoded.")
        return ()


async def due_reminder(state: PlannerState, *, now: datetime | None = None) -> Task | None:
    """check_reminders() with the configured window."""
    return await check_reminders(
        state.task_store,
        now=now,
        window_minutes=state.settings.reminder_window_minutes,
    )
