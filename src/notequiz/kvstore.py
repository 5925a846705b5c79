"""Asynchronous key-value persistence used by the review store."""
import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import Any

from notequiz.db import get_connection, init_db
from notequiz.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Point get/set plus prefix enumeration over JSON-compatible values."""

    @abstractmethod
    async def get(self, key: str) -> Any:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Insert or overwrite the value stored under key."""

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        """Return every stored key starting with prefix."""


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store; values are copied through JSON like the durable one."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


class SqliteKeyValueStore(KeyValueStore):
    """Durable store in the kv_store table of a SQLite database."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        init_db(db_path)

    async def get(self, key: str) -> Any:
        try:
            conn = get_connection(self.db_path)
            try:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Could not read {key!r}: {e}") from e
        return json.loads(row["value"]) if row else None

    async def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute(
                    "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    (key, payload),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Could not write {key!r}: {e}") from e
        logger.debug("Stored %s", key)

    async def keys(self, prefix: str = "") -> list[str]:
        try:
            conn = get_connection(self.db_path)
            try:
                rows = conn.execute(
                    "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
                    (len(prefix), prefix),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Could not list keys with prefix {prefix!r}: {e}") from e
        return [row["key"] for row in rows]
