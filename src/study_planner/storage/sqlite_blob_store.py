# src/study_planner/storage/sqlite_blob_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..errors import StorageIOError

logger = logging.getLogger(__name__)

KIND_STRING = "string"
KIND_BOOL = "bool"


class SqliteBlobStore:
    """
    SQLite key-value BlobStore.

    Schema: kv(key TEXT PRIMARY KEY, kind TEXT, value TEXT, updated_at REAL).
    Bools are stored as "1"/"0" with kind="bool".

    Thread-safety:
    - each call opens its own SQLite connection
    - calls run in a worker thread via asyncio.to_thread
    """

    def __init__(self, db_path: str | Path = "planner.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_keys()
        except StorageIOError:
            total = -1
        logger.info("SqliteBlobStore ready db=%s keys=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as exc:
            raise StorageIOError(f"cannot open {self._db_path}") from exc
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    kind TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageIOError(f"cannot create schema in {self._db_path}") from exc
        finally:
            conn.close()

    def _read(self, key: str, kind: str) -> str | None:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT kind, value FROM kv WHERE key = ?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StorageIOError(f"read failed key={key}") from exc
        finally:
            conn.close()

        if row is None:
            return None
        if row["kind"] != kind:
            logger.warning("Key %s holds %s, not %s", key, row["kind"], kind)
            return None
        return str(row["value"])

    def _write(self, key: str, kind: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, kind, value, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    kind = excluded.kind,
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, kind, value, time.time()),
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageIOError(f"write failed key={key}") from exc
        finally:
            conn.close()
        logger.debug("kv write key=%s kind=%s bytes=%s", key, kind, len(value))

    # ---- public API ----

    def count_keys(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM kv").fetchone()
            return int(n)
        except sqlite3.Error as exc:
            raise StorageIOError("count failed") from exc
        finally:
            conn.close()

    async def get_string(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, key, KIND_STRING)

    async def set_string(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, KIND_STRING, str(value))

    async def get_bool(self, key: str) -> bool | None:
        raw = await asyncio.to_thread(self._read, key, KIND_BOOL)
        if raw is None:
            return None
        return raw == "1"

    async def set_bool(self, key: str, value: bool) -> None:
        await asyncio.to_thread(self._write, key, KIND_BOOL, "1" if value else "0")
