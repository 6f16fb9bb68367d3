"""Tests for queuespine.core.persistence."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import pytest

from queuespine.core.exceptions import SnapshotError, StorageError
from queuespine.core.persistence import (
    PersistenceStats,
    SnapshotPersistence,
    decode_snapshot,
    snapshot_key,
)
from queuespine.models.message import QueueMessage
from queuespine.models.snapshot import QueueSnapshot
from queuespine.storage.memory import MemoryStorageDriver

T0 = datetime(2024, 1, 1, tzinfo=UTC)


class FlakyDriver(MemoryStorageDriver):
    """Memory driver that can be told to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    async def save(self, key: str, value: Any) -> None:
        if self.failing:
            raise StorageError("quota exceeded")
        await super().save(key, value)

    async def load(self, key: str) -> Any | None:
        if self.failing:
            raise StorageError("io error")
        return await super().load(key)


def snapshot(queue_id: str = "q1") -> QueueSnapshot:
    msg = QueueMessage(id="m1", payload={"x": 1}, created_at=T0, updated_at=T0)
    return QueueSnapshot(queue_id=queue_id, messages=[msg])


class TestDecodeSnapshot:
    """Snapshot decoding."""

    def test_snapshot_key(self) -> None:
        """Keys are 'queue-' plus the queue id."""
        assert snapshot_key("abc") == "queue-abc"

    def test_decode_valid(self) -> None:
        """Valid records decode."""
        assert decode_snapshot(snapshot().to_record()).message_count() == 1

    @pytest.mark.parametrize("data", [[], "text", 42, {"queueId": "q", "messages": [{}]}])
    def test_decode_invalid(self, data: Any) -> None:
        """Invalid records raise SnapshotError."""
        with pytest.raises(SnapshotError):
            decode_snapshot(data)


class TestSnapshotPersistence:
    """SnapshotPersistence adapter."""

    async def test_save_and_load(self) -> None:
        """Saved snapshots load back equal."""
        persistence = SnapshotPersistence(MemoryStorageDriver(), "q1")

        assert await persistence.save(snapshot()) is True
        loaded = await persistence.load()

        assert loaded == snapshot()
        assert persistence.stats.saves == 1
        assert persistence.stats.loads == 1
        assert persistence.stats.last_saved_at is not None

    async def test_load_missing(self) -> None:
        """A missing snapshot loads as None."""
        assert await SnapshotPersistence(MemoryStorageDriver(), "q1").load() is None

    async def test_failures_swallowed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Driver errors are logged and recorded, not raised."""
        driver = FlakyDriver()
        driver.failing = True
        persistence = SnapshotPersistence(driver, "q1")

        with caplog.at_level(logging.ERROR):
            assert await persistence.save(snapshot()) is False
            assert await persistence.load() is None

        assert persistence.stats.failures == 2
        assert "io error" in persistence.stats.last_error
        assert "quota exceeded" in caplog.text

    async def test_malformed_snapshot(self, caplog: pytest.LogCaptureFixture) -> None:
        """A malformed stored record is ignored with a warning."""
        driver = MemoryStorageDriver()
        await driver.save("queue-q1", {"bogus": True})
        persistence = SnapshotPersistence(driver, "q1")

        with caplog.at_level(logging.WARNING):
            assert await persistence.load() is None

        assert "Ignoring stored snapshot" in caplog.text
        assert persistence.stats.failures == 0

    async def test_delete(self) -> None:
        """Delete removes the stored snapshot."""
        driver = MemoryStorageDriver()
        persistence = SnapshotPersistence(driver, "q1")
        await persistence.save(snapshot())

        assert await persistence.delete() is True
        assert await driver.keys() == []

    def test_history_bounded(self) -> None:
        """Only the most recent failures are kept."""
        stats = PersistenceStats()
        for i in range(30):
            stats.record_failure(f"error {i}")
        assert stats.failures == 30
        assert len(stats.history) == 20
        assert stats.history[-1] == "error 29"
        assert stats.last_error_at is not None
