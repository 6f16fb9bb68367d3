"""Snapshot persistence for queues.

The persistence adapter saves and restores a queue's entire state as one
snapshot through any ``StorageDriver``. Persistence is best-effort: driver
failures are logged, recorded, and swallowed so they never affect queue
operations, and a malformed snapshot is treated as if none existed.

Example:
    >>> import asyncio
    >>> from queuespine.core.persistence import SnapshotPersistence
    >>> from queuespine.models.snapshot import QueueSnapshot
    >>> from queuespine.storage.memory import MemoryStorageDriver
    >>> async def example():
    ...     persistence = SnapshotPersistence(MemoryStorageDriver(), "q1")
    ...     await persistence.save(QueueSnapshot(queue_id="q1"))
    ...     loaded = await persistence.load()
    ...     return loaded.queue_id if loaded else None
    >>> asyncio.run(example())
    'q1'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from queuespine.core.exceptions import SnapshotError
from queuespine.models.snapshot import QueueSnapshot
from queuespine.protocols.storage import StorageDriver

KEY_PREFIX = "queue-"


def snapshot_key(queue_id: str) -> str:
    """Storage key for a queue's snapshot.

    Example:
        >>> from queuespine.core.persistence import snapshot_key
        >>> snapshot_key("abc")
        'queue-abc'
    """
    return f"{KEY_PREFIX}{queue_id}"


def decode_snapshot(data: Any) -> QueueSnapshot:
    """Validate a stored record as a snapshot.

    Raises:
        SnapshotError: If the record is not a valid snapshot.
    """
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot must be an object, got {type(data).__name__}")
    try:
        return QueueSnapshot.from_record(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e.error_count()} error(s)") from e


@dataclass
class PersistenceStats:
    """Diagnostics for a persistence adapter.

    Attributes:
        saves: Successful saves.
        loads: Successful loads that restored a snapshot.
        failures: Failed saves or loads.
        last_error: Description of the most recent failure.
        last_error_at: When the most recent failure happened.
        last_saved_at: When the most recent successful save happened.
    """

    saves: int = 0
    loads: int = 0
    failures: int = 0
    last_error: str | None = None
    last_error_at: datetime | None = None
    last_saved_at: datetime | None = None
    history: list[str] = field(default_factory=list)

    def record_failure(self, message: str) -> None:
        self.failures += 1
        self.last_error = message
        self.last_error_at = datetime.now(UTC)
        self.history.append(message)
        # Keep only recent failures
        del self.history[:-20]


class SnapshotPersistence:
    """Save and load queue snapshots through a storage driver.

    Args:
        driver: Key-value storage driver.
        queue_id: Queue whose snapshot is stored under ``"queue-" + queue_id``.
        logger: Logger for failures (default: module logger).
    """

    def __init__(
        self,
        driver: StorageDriver,
        queue_id: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self._driver = driver
        self._queue_id = queue_id
        self._logger = logger or logging.getLogger(__name__)
        self.stats = PersistenceStats()

    @property
    def driver(self) -> StorageDriver:
        """The underlying storage driver."""
        return self._driver

    @property
    def key(self) -> str:
        """Storage key for this queue's snapshot."""
        return snapshot_key(self._queue_id)

    async def save(self, snapshot: QueueSnapshot) -> bool:
        """Persist a snapshot.

        Returns:
            True if saved, False if the driver failed (failure is logged).
        """
        try:
            await self._driver.save(self.key, snapshot.to_record())
        except Exception as e:
            message = f"Failed to save queue state: {e}"
            self._logger.error(message)
            self.stats.record_failure(message)
            return False
        self.stats.saves += 1
        self.stats.last_saved_at = datetime.now(UTC)
        return True

    async def load(self) -> QueueSnapshot | None:
        """Load the last snapshot.

        Returns:
            The snapshot, or None if absent, unreadable or malformed.
        """
        try:
            data = await self._driver.load(self.key)
        except Exception as e:
            message = f"Failed to load queue state: {e}"
            self._logger.error(message)
            self.stats.record_failure(message)
            return None

        if data is None:
            return None

        try:
            snapshot = decode_snapshot(data)
        except SnapshotError as e:
            self._logger.warning(f"Ignoring stored snapshot for {self.key!r}: {e}")
            return None

        self.stats.loads += 1
        return snapshot

    async def delete(self) -> bool:
        """Remove the stored snapshot. Returns False if the driver failed."""
        try:
            await self._driver.delete(self.key)
        except Exception as e:
            message = f"Failed to delete queue state: {e}"
            self._logger.error(message)
            self.stats.record_failure(message)
            return False
        return True
