# src/study_planner/storage/json_blob_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..errors import StorageIOError

logger = logging.getLogger(__name__)


class JsonFileBlobStore:
    """
    BlobStore kept in a single JSON object file (a local "preferences" file).

    Writes go to a .tmp sibling and are swapped in with os.replace, so a reader
    sees either the old or the new file. File I/O runs in a worker thread.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileBlobStore ready path=%s exists=%s", self._path, self._path.exists())

    # ---- low-level helpers ----

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except OSError as exc:
            raise StorageIOError(f"cannot read {self._path}") from exc
        except ValueError as exc:
            raise StorageIOError(f"{self._path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise StorageIOError(f"{self._path} must contain a JSON object")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            with contextlib.suppress(OSError):
                # Task titles can be personal; the file is private before it is visible.
                os.chmod(tmp, 0o600)
            os.replace(tmp, self._path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageIOError(f"cannot write {self._path}") from exc

    def _get(self, key: str, kind: type) -> Any:
        value = self._read_all().get(key)
        if value is None:
            return None
        if not isinstance(value, kind):
            logger.warning("Key %s holds %s, not %s", key, type(value).__name__, kind.__name__)
            return None
        return value

    def _set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    # ---- BlobStore ----

    async def get_string(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get, key, str)

    async def set_string(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, str(value))

    async def get_bool(self, key: str) -> bool | None:
        return await asyncio.to_thread(self._get, key, bool)

    async def set_bool(self, key: str, value: bool) -> None:
        await asyncio.to_thread(self._set, key, bool(value))
