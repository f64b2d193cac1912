# tests/test_blob_stores.py

from __future__ import annotations

import json
import os
import sqlite3
import stat
from datetime import datetime
from pathlib import Path

import pytest

from study_planner.errors import StorageIOError
from study_planner.storage.json_blob_store import JsonFileBlobStore
from study_planner.storage.memory_blob_store import MemoryBlobStore
from study_planner.storage.sqlite_blob_store import SqliteBlobStore
from study_planner.tasks.task_store import TaskStore

from .fakes import make_task


@pytest.fixture(params=["memory", "json", "sqlite"])
def any_blob(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryBlobStore()
    if request.param == "json":
        return JsonFileBlobStore(tmp_path / "prefs" / "planner.json")
    return SqliteBlobStore(tmp_path / "db" / "planner.sqlite3")


@pytest.mark.asyncio
async def test_string_and_bool_keys(any_blob) -> None:
    assert await any_blob.get_string("tasks") is None
    assert await any_blob.get_bool("reminder_enabled") is None

    await any_blob.set_string("tasks", "[]")
    await any_blob.set_bool("reminder_enabled", False)
    assert await any_blob.get_string("tasks") == "[]"
    assert await any_blob.get_bool("reminder_enabled") is False

    await any_blob.set_string("tasks", "[1]")
    await any_blob.set_bool("reminder_enabled", True)
    assert await any_blob.get_string("tasks") == "[1]"
    assert await any_blob.get_bool("reminder_enabled") is True


@pytest.mark.asyncio
async def test_type_mismatch_reads_as_absent(any_blob) -> None:
    await any_blob.set_bool("flag", True)
    await any_blob.set_string("text", "hello")
    assert await any_blob.get_string("flag") is None
    assert await any_blob.get_bool("text") is None


@pytest.mark.asyncio
async def test_store_round_trip_on_each_backend(any_blob) -> None:
    task = make_task("a", reminder_time=datetime(2024, 3, 1, 8, 0), description="ch. 4")
    await TaskStore(any_blob).add(task)
    assert await TaskStore(any_blob).load() == (task,)


@pytest.mark.asyncio
async def test_sqlite_persists_across_instances(tmp_path: Path) -> None:
    db = tmp_path / "planner.sqlite3"
    first = SqliteBlobStore(db)
    await first.set_string("tasks", "[]")
    await first.set_bool("reminder_enabled", False)

    second = SqliteBlobStore(db)
    assert second.count_keys() == 2
    assert await second.get_string("tasks") == "[]"
    assert await second.get_bool("reminder_enabled") is False


@pytest.mark.asyncio
async def test_sqlite_errors_become_storage_io_error(tmp_path: Path) -> None:
    db = tmp_path / "planner.sqlite3"
    blob = SqliteBlobStore(db)

    conn = sqlite3.connect(str(db))
    conn.execute("DROP TABLE kv")
    conn.commit()
    conn.close()

    with pytest.raises(StorageIOError):
        await blob.get_string("tasks")
    with pytest.raises(StorageIOError):
        await blob.set_string("tasks", "[]")


@pytest.mark.asyncio
async def test_json_file_layout_and_permissions(tmp_path: Path) -> None:
    path = tmp_path / "planner.json"
    blob = JsonFileBlobStore(path)
    await blob.set_string("tasks", "[]")
    await blob.set_bool("reminder_enabled", True)

    data = json.loads(path.read_text("utf-8"))
    assert data == {"tasks": "[]", "reminder_enabled": True}
    assert not path.with_suffix(".json.tmp").exists()
    if os.name == "posix":
        assert stat.S_IMODE(path.stat().st_mode) == 0o600


@pytest.mark.asyncio
async def test_json_file_unreadable_raises_storage_io_error(tmp_path: Path) -> None:
    path = tmp_path / "planner.json"
    path.write_text("not json at all", "utf-8")
    blob = JsonFileBlobStore(path)
    with pytest.raises(StorageIOError):
        await blob.get_string("tasks")

    path.write_text("[1, 2]", "utf-8")
    with pytest.raises(StorageIOError):
        await blob.get_bool("reminder_enabled")


@pytest.mark.asyncio
async def test_json_failed_replace_leaves_no_tmp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "planner.json"
    blob = JsonFileBlobStore(path)
    await blob.set_string("tasks", "[]")

    def fail_replace(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail_replace)
    with pytest.raises(StorageIOError):
        await blob.set_string("tasks", "[1]")

    assert not path.with_suffix(".json.tmp").exists()
    assert json.loads(path.read_text("utf-8")) == {"tasks": "[]"}


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
@pytest.mark.asyncio
async def test_json_tmp_file_is_private_before_swap(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "planner.json"
    blob = JsonFileBlobStore(path)
    real_replace = os.replace
    modes: list[int] = []

    def recording_replace(src, dst) -> None:
        modes.append(stat.S_IMODE(os.stat(src).st_mode))
        real_replace(src, dst)

    monkeypatch.setattr(os, "replace", recording_replace)
    await blob.set_bool("reminder_enabled", False)

    assert modes == [0o600]
    assert await blob.get_bool("reminder_enabled") is False
