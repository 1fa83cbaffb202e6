"""Durable key/value store backed by SQLite."""

import asyncio
import contextlib
import logging
from pathlib import Path

import aiosqlite

from src.core.errors import CacheUnavailableError


logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
)
"""


class SQLiteKeyValueStore:
    """Async key/value store persisting string values in a single SQLite table.

    Every write replaces the whole value for a key inside one transaction, so a
    reader never observes a partially written value.
    """

    def __init__(self, db_path: str | Path) -> None:
        """Initialize the store. The database file is opened lazily."""
        self._db_path = Path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def _get_connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn

        async with self._lock:
            if self._conn is not None:
                return self._conn
            try:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = await aiosqlite.connect(str(self._db_path))
                await conn.execute("PRAGMA journal_mode = WAL")
                await conn.execute(_SCHEMA)
                await conn.commit()
            except (aiosqlite.Error, OSError) as e:
                msg = f"Cannot open key/value store at {self._db_path}: {e}"
                raise CacheUnavailableError(msg) from e

            self._conn = conn
            logger.info("Opened key/value store", extra={"db_path": str(self._db_path)})
            return conn

    async def get(self, key: str) -> str | None:
        """Get the value stored under key.

        Args:
            key: Store key

        Returns:
            Stored value or None if the key is absent

        Raises:
            CacheUnavailableError: If the database cannot be read
        """
        conn = await self._get_connection()
        try:
            cursor = await conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            msg = f"Failed to read key {key!r}: {e}"
            raise CacheUnavailableError(msg) from e

        if row is None:
            return None
        logger.debug("Store hit for key: %s", key)
        return row[0]

    async def set(self, key: str, value: str) -> None:
        """Replace the value stored under key in a single transaction.

        Raises:
            CacheUnavailableError: If the write fails; the previous value is kept
        """
        conn = await self._get_connection()
        try:
            await conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value, updated_at) "
                "VALUES (?, ?, strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))",
                (key, value),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            with contextlib.suppress(aiosqlite.Error):
                await conn.rollback()
            msg = f"Failed to write key {key!r}: {e}"
            raise CacheUnavailableError(msg) from e
        logger.debug("Stored key: %s (%d bytes)", key, len(value))

    async def delete(self, key: str) -> None:
        """Delete a key. Deleting a missing key is not an error."""
        conn = await self._get_connection()
        try:
            await conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await conn.commit()
        except aiosqlite.Error as e:
            msg = f"Failed to delete key {key!r}: {e}"
            raise CacheUnavailableError(msg) from e

    async def close(self) -> None:
        """Close the underlying connection if it was opened."""
        if self._conn is None:
            return
        try:
            await self._conn.close()
        except aiosqlite.Error as e:
            logger.warning("Error closing key/value store: %s", e)
        finally:
            self._conn = None
        logger.info("Key/value store closed")
