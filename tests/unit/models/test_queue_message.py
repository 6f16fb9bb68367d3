"""Tests for queuespine.models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from queuespine.core.config import get_settings
from queuespine.models import MessageStatus, QueueMessage, QueueOptions, QueueSnapshot

T0 = datetime(2024, 1, 1, tzinfo=UTC)


def make_message(**kwargs) -> QueueMessage:
    values = {"id": "m1", "payload": {"n": 1}, "created_at": T0, "updated_at": T0}
    values.update(kwargs)
    return QueueMessage(**values)


class TestQueueMessage:
    """QueueMessage model tests."""

    def test_defaults(self) -> None:
        """A new message is Pending with no metadata."""
        msg = make_message()
        assert msg.status == MessageStatus.PENDING
        assert msg.priority == 0
        assert msg.processing_attempts == 0
        assert msg.delay_until is None
        assert msg.failure_reason is None
        assert msg.is_pending is True
        assert msg.is_delayed is False

    def test_empty_id_rejected(self) -> None:
        """Ids must be non-empty."""
        with pytest.raises(ValidationError):
            make_message(id="")

    def test_negative_attempts_rejected(self) -> None:
        """Attempt counts cannot go below zero."""
        with pytest.raises(ValidationError):
            make_message(processing_attempts=-1)

    def test_snapshot_is_deep(self) -> None:
        """Mutating a snapshot's payload leaves the original alone."""
        msg = make_message()
        copy = msg.snapshot()
        copy.payload["n"] = 42
        copy.priority = 9
        assert msg.payload == {"n": 1}
        assert msg.priority == 0

    def test_record_uses_camel_case(self) -> None:
        """Serialized records use camelCase field names."""
        msg = make_message(delay_until=T0 + timedelta(seconds=1))
        record = msg.to_record()
        assert record["createdAt"].startswith("2024-01-01")
        assert "delayUntil" in record
        assert "processingAttempts" in record
        assert record["status"] == "pending"

    def test_record_round_trip(self) -> None:
        """A record validates back into an equal message."""
        msg = make_message(status=MessageStatus.DELAYED, priority=3)
        restored = QueueMessage.model_validate(msg.to_record())
        assert restored == msg


class TestQueueOptions:
    """QueueOptions tests."""

    def test_defaults(self) -> None:
        """Defaults match the documented values."""
        opts = QueueOptions()
        assert opts.max_retries == 3
        assert opts.retry_delay == 1.0
        assert opts.persistence_enabled is False
        assert opts.persistence_driver == "memory"
        assert opts.persistence_interval == 5.0
        assert opts.dead_letter_enabled is True
        assert opts.auto_check_delayed is False
        assert opts.delayed_check_interval == 0.1

    def test_invalid_values_rejected(self) -> None:
        """Negative retries and non-positive intervals are rejected."""
        with pytest.raises(ValidationError):
            QueueOptions(max_retries=-1)
        with pytest.raises(ValidationError):
            QueueOptions(persistence_interval=0)

    def test_unknown_option_rejected(self) -> None:
        """Typos in option names fail loudly."""
        with pytest.raises(ValidationError):
            QueueOptions(max_retry=3)

    def test_camel_case_input(self) -> None:
        """Options accept camelCase names."""
        opts = QueueOptions.model_validate({"maxRetries": 5, "deadLetterEnabled": False})
        assert opts.max_retries == 5
        assert opts.dead_letter_enabled is False

    def test_from_settings(self) -> None:
        """Options pick up settings and explicit overrides."""
        settings = get_settings(max_retries=9, storage_driver="indexeddb")
        opts = QueueOptions.from_settings(settings, persistence_enabled=True)
        assert opts.max_retries == 9
        assert opts.persistence_driver == "indexeddb"
        assert opts.persistence_enabled is True


class TestQueueSnapshot:
    """QueueSnapshot tests."""

    def test_record_layout(self) -> None:
        """Records carry the three collections and the queue id."""
        snap = QueueSnapshot(queue_id="q1", messages=[make_message()])
        record = snap.to_record()
        assert record["queueId"] == "q1"
        assert len(record["messages"]) == 1
        assert record["delayedMessages"] == []
        assert record["deadLetterMessages"] == []

    def test_from_record(self) -> None:
        """Records validate back into snapshots."""
        snap = QueueSnapshot(
            queue_id="q1",
            messages=[make_message(id="a")],
            dead_letter_messages=[make_message(id="b", status=MessageStatus.DEAD_LETTER)],
        )
        restored = QueueSnapshot.from_record(snap.to_record())
        assert restored.message_count() == 2
        assert restored.dead_letter_messages[0].status == MessageStatus.DEAD_LETTER

    def test_missing_queue_id_rejected(self) -> None:
        """A record without a queue id is invalid."""
        with pytest.raises(ValidationError):
            QueueSnapshot.from_record({"messages": []})
