# tests/test_bootstrap.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from study_planner.bootstrap import create_initial_state, due_reminder, init_logging, start
from study_planner.config import Settings
from study_planner.errors import StorageCorruptionError
from study_planner.logging_setup import LOG_FILE_NAME, _PlannerConsoleFilter, setup_logging
from study_planner.storage.json_blob_store import JsonFileBlobStore
from study_planner.storage.memory_blob_store import MemoryBlobStore
from study_planner.storage.sqlite_blob_store import SqliteBlobStore
from study_planner.tasks.task_store import TASKS_KEY

from .fakes import make_task


@pytest.fixture()
def real_settings(settings) -> Settings:
    return Settings(**vars(settings))


@pytest.mark.parametrize(
    "backend,cls",
    [("sqlite", SqliteBlobStore), ("json", JsonFileBlobStore), ("memory", MemoryBlobStore)],
)
def test_create_initial_state_wires_backend(real_settings: Settings, backend: str, cls) -> None:
    state = create_initial_state(settings=replace(real_settings, storage_backend=backend))
    assert isinstance(state.blob_store, cls)
    assert state.task_store.tasks == ()


def test_create_initial_state_makes_data_dir(real_settings: Settings) -> None:
    assert not real_settings.data_dir.exists()
    create_initial_state(settings=real_settings)
    assert real_settings.data_dir.is_dir()


@pytest.mark.asyncio
async def test_start_loads_persisted_tasks(real_settings: Settings) -> None:
    state = create_initial_state(settings=real_settings)
    task = make_task("a")
    await state.task_store.add(task)

    fresh = create_initial_state(settings=real_settings)
    assert await start(fresh) == (task,)


@pytest.mark.asyncio
async def test_start_corruption_policy(real_settings: Settings) -> None:
    state = create_initial_state(settings=replace(real_settings, storage_backend="memory"))
    await state.blob_store.set_string(TASKS_KEY, "garbage")

    with pytest.raises(StorageCorruptionError):
        await start(state)
    assert await start(state, empty_on_corruption=True) == ()
    # The corrupt blob is left in place for inspection.
    assert await state.blob_store.get_string(TASKS_KEY) == "garbage"


@pytest.mark.asyncio
async def test_due_reminder_uses_configured_window(real_settings: Settings) -> None:
    now = datetime(2024, 3, 1, 10, 0)
    state = create_initial_state(
        settings=replace(real_settings, storage_backend="memory", reminder_window_minutes=15)
    )
    await state.task_store.add(make_task("a", reminder_time=now + timedelta(minutes=12)))
    assert (await due_reminder(state, now=now)).id == "a"

    await state.task_store.set_reminder_enabled(False)
    assert await due_reminder(state, now=now) is None


def test_setup_logging_writes_file(tmp_path) -> None:
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)
        assert log_file == tmp_path / "logs" / LOG_FILE_NAME
        logging.getLogger("study_planner.tests").debug("hello from tests")
        for h in root.handlers:
            h.flush()
        assert "hello from tests" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)


def test_init_logging_uses_settings_level(real_settings: Settings) -> None:
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    try:
        init_logging(replace(real_settings, log_level="WARNING"))
        console = [h for h in root.handlers if type(h) is logging.StreamHandler]
        assert console and console[0].level == logging.WARNING
        assert (real_settings.data_dir / LOG_FILE_NAME).exists()
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)


def test_console_filter_passes_planner_records_and_gates_the_rest() -> None:
    gate = _PlannerConsoleFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert gate.filter(rec("study_planner", logging.DEBUG))
    assert gate.filter(rec("study_planner.tasks.task_store", logging.INFO))
    assert not gate.filter(rec("study_planner_other", logging.INFO))
    assert not gate.filter(rec("asyncio", logging.WARNING))
    assert not gate.filter(rec("py.warnings", logging.WARNING))
    assert gate.filter(rec("asyncio", logging.ERROR))
