# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from study_planner.storage.memory_blob_store import MemoryBlobStore
from study_planner.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="study-planner-test",
        log_level="DEBUG",
        storage_backend="sqlite",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "planner.sqlite3",
        json_path=tmp_path / "data" / "planner.json",
        reminder_window_minutes=5,
    )


@pytest.fixture()
def blob() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def store(blob: MemoryBlobStore) -> TaskStore:
    return TaskStore(blob)
