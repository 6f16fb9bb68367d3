"""SQLite storage driver - transactional persistent storage.

SQLite is the larger transactional store, selected by ``"indexeddb"``
(or ``"sqlite"``). Values are stored as JSON text in a single key/value
table that is created automatically on first use.

Example:
    >>> import asyncio
    >>> from queuespine.storage.sqlite import SQLiteStorageDriver
    >>> async def example():
    ...     driver = SQLiteStorageDriver(":memory:")
    ...     await driver.save("queue-1", {"queueId": "1"})
    ...     value = await driver.load("queue-1")
    ...     await driver.close()
    ...     return value
    >>> asyncio.run(example())
    {'queueId': '1'}
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from queuespine.core.exceptions import ConfigurationError, StorageError

DEFAULT_TABLE = "queue_store"


class SQLiteStorageDriver:
    """SQLite key-value storage with auto-schema creation.

    Args:
        path: Database file path, or ":memory:" for in-memory.
        table_name: Table holding the key/value rows.
        timeout: Lock timeout in seconds (default 30).

    Raises:
        ConfigurationError: If table_name is not a plain identifier.
    """

    def __init__(
        self,
        path: str | Path = ":memory:",
        *,
        table_name: str = DEFAULT_TABLE,
        timeout: float = 30.0,
    ) -> None:
        if not table_name.isidentifier():
            raise ConfigurationError(f"Invalid table name: {table_name!r}")
        self._path = str(path)
        self._table = table_name
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None

    async def initialize(self) -> None:
        """Open the database and create the table. Idempotent."""
        self.connect()

    async def close(self) -> None:
        """Close the connection. Idempotent."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def connect(self) -> sqlite3.Connection:
        """Open the connection and create the table if needed.

        Raises:
            StorageError: If the database cannot be opened.
        """
        if self._conn is not None:
            return self._conn
        try:
            if self._path != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._path, timeout=self._timeout)
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS {self._table} ("
                "  key TEXT PRIMARY KEY,"
                "  value TEXT NOT NULL,"
                "  updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
                ")"
            )
            conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Failed to open SQLite database {self._path}: {e}") from e
        self._conn = conn
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Get a cursor with automatic commit/rollback."""
        conn = self.connect()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"SQLite operation failed: {e}") from e
        finally:
            cursor.close()

    async def save(self, key: str, value: Any) -> None:
        """Upsert the JSON-encoded value."""
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable: {e}") from e
        with self._cursor() as cursor:
            cursor.execute(
                f"INSERT INTO {self._table} (key, value, updated_at)"
                " VALUES (?, ?, CURRENT_TIMESTAMP)"
                " ON CONFLICT(key) DO UPDATE SET"
                " value = excluded.value, updated_at = excluded.updated_at",
                (key, encoded),
            )

    async def load(self, key: str) -> Any | None:
        """Load and decode the value, or None if missing or corrupt."""
        with self._cursor() as cursor:
            cursor.execute(f"SELECT value FROM {self._table} WHERE key = ?", (key,))
            row = cursor.fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            return None

    async def delete(self, key: str) -> None:
        """Delete a key."""
        with self._cursor() as cursor:
            cursor.execute(f"DELETE FROM {self._table} WHERE key = ?", (key,))

    async def clear(self) -> None:
        """Delete every row in the table."""
        with self._cursor() as cursor:
            cursor.execute(f"DELETE FROM {self._table}")

    async def keys(self) -> list[str]:
        """List stored keys."""
        with self._cursor() as cursor:
            cursor.execute(f"SELECT key FROM {self._table} ORDER BY key")
            return [row[0] for row in cursor.fetchall()]
