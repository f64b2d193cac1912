# src/study_planner/storage/memory_blob_store.py

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class MemoryBlobStore:
    """Dict-backed BlobStore. Nothing survives the process; used by tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def snapshot(self) -> dict[str, Any]:
        return dict(self._data)

    async def get_string(self, key: str) -> str | None:
        value = self._data.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            logger.warning("Key %s holds %s, not a string", key, type(value).__name__)
            return None
        return value

    async def set_string(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    async def get_bool(self, key: str) -> bool | None:
        value = self._data.get(key)
        if value is None:
            return None
        if not isinstance(value, bool):
            logger.warning("Key %s holds %s, not a bool", key, type(value).__name__)
            return None
        return value

    async def set_bool(self, key: str, value: bool) -> None:
        self._data[key] = bool(value)
