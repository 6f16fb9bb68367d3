"""Queue message model.

A message is the only entity the queue engine manages. It wraps an opaque
payload with the metadata the engine needs for ordering, delays, retries
and dead-lettering.

Example:
    >>> from queuespine.models.message import MessageStatus, QueueMessage
    >>> from datetime import datetime, UTC
    >>> now = datetime(2024, 1, 1, tzinfo=UTC)
    >>> msg = QueueMessage(id="m1", payload={"task": "send"}, created_at=now, updated_at=now)
    >>> msg.status
    <MessageStatus.PENDING: 'pending'>
    >>> msg.priority
    0
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import Field

from queuespine.models.base import QueueSpineModel

T = TypeVar("T")


class MessageStatus(str, Enum):
    """Message lifecycle states.

    Example:
        >>> from queuespine.models.message import MessageStatus
        >>> MessageStatus.DEAD_LETTER.value
        'dead_letter'
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    DELAYED = "delayed"
    DEAD_LETTER = "dead_letter"


class QueueMessage(QueueSpineModel, Generic[T]):
    """A message with queue metadata.

    Attributes:
        id: Unique within one queue instance; caller-assignable.
        payload: Opaque caller data, never inspected by the engine.
        status: Current lifecycle state.
        priority: Higher sorts earlier.
        created_at: When the message was enqueued.
        updated_at: Refreshed on every mutation.
        delay_until: When a delayed message becomes eligible.
        processing_started_at: Set on dequeue.
        processing_attempts: Incremented once per failure.
        failure_reason: Last failure reason, if any.
    """

    id: str = Field(..., min_length=1)
    payload: T
    status: MessageStatus = Field(default=MessageStatus.PENDING)
    priority: int = Field(default=0, description="Higher = dequeued first")
    created_at: datetime
    updated_at: datetime
    delay_until: datetime | None = Field(default=None)
    processing_started_at: datetime | None = Field(default=None)
    processing_attempts: int = Field(default=0, ge=0)
    failure_reason: str | None = Field(default=None)

    @property
    def is_pending(self) -> bool:
        """Check if the message can be dequeued."""
        return self.status == MessageStatus.PENDING

    @property
    def is_delayed(self) -> bool:
        """Check if the message is waiting for its delay to elapse."""
        return self.status == MessageStatus.DELAYED

    def snapshot(self) -> QueueMessage[T]:
        """Return a deep copy that shares no state with this message.

        Example:
            >>> from queuespine.models.message import QueueMessage
            >>> from datetime import datetime, UTC
            >>> now = datetime(2024, 1, 1, tzinfo=UTC)
            >>> msg = QueueMessage(id="m1", payload={"n": 1}, created_at=now, updated_at=now)
            >>> copy = msg.snapshot()
            >>> copy.payload["n"] = 2
            >>> msg.payload["n"]
            1
        """
        return self.model_copy(deep=True)

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
