# src/todo_memory/storage/local_storage.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    SQLite key-value store playing the role of a browser's localStorage.

    One table, one row per key. Values are opaque strings: this class never
    inspects or validates them.

    Thread-safety:
    - each call opens its own SQLite connection
    - blocking work runs in a worker thread (asyncio.to_thread)
    """

    def __init__(self, db_path: str | Path = "local_storage.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("LocalStorage ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _set_item_sync(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO local_storage(key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("LocalStorage set key=%s bytes=%d", key, len(value))

    def _get_item_sync(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ?", (key,)
            ).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def _remove_item_sync(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def _clear_sync(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM local_storage")
            conn.commit()
        finally:
            conn.close()
        logger.info("LocalStorage cleared db=%s", self._db_path)

    # ---- public API (KeyValueStore) ----

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set_item_sync, key, value)

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_item_sync, key)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove_item_sync, key)

    async def clear(self) -> None:
        await asyncio.to_thread(self._clear_sync)


class InMemoryLocalStorage:
    """Dict-backed store for ephemeral sessions (nothing survives the process)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()
