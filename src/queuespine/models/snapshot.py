"""Persisted queue snapshot.

The engine persists its entire state as one unit, never incrementally.

Example:
    >>> from queuespine.models.snapshot import QueueSnapshot
    >>> snap = QueueSnapshot(queue_id="q1")
    >>> sorted(snap.to_record())
    ['deadLetterMessages', 'delayedMessages', 'messages', 'queueId']
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from queuespine.models.base import QueueSpineModel
from queuespine.models.message import QueueMessage


class QueueSnapshot(QueueSpineModel):
    """Full serialized state of the three message collections."""

    messages: list[QueueMessage] = Field(default_factory=list)
    delayed_messages: list[QueueMessage] = Field(default_factory=list)
    dead_letter_messages: list[QueueMessage] = Field(default_factory=list)
    queue_id: str

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, data: Any) -> QueueSnapshot:
        """Validate a stored record.

        Raises:
            pydantic.ValidationError: If the record is malformed.
        """
        return cls.model_validate(data)

    def message_count(self) -> int:
        """Total messages across all collections."""
        return len(self.messages) + len(self.delayed_messages) + len(self.dead_letter_messages)
