"""Delay scheduler: promotes delayed messages whose wait has elapsed."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from queuespine.models.message import MessageStatus, QueueMessage
from queuespine.queue.store import Collection, MessageStore


class DelayScheduler:
    """Moves elapsed delayed messages into the ready collection.

    Promotion is monotonic: a promoted message only returns to the delayed
    collection through a later failure.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> from queuespine.models.message import MessageStatus, QueueMessage
        >>> from queuespine.queue.store import Collection, MessageStore
        >>> from queuespine.queue.scheduler import DelayScheduler
        >>> t = datetime(2024, 1, 1, tzinfo=UTC)
        >>> store = MessageStore()
        >>> store.insert(Collection.DELAYED, QueueMessage(
        ...     id="d", payload=None, status=MessageStatus.DELAYED,
        ...     created_at=t, updated_at=t, delay_until=t + timedelta(seconds=1)))
        >>> DelayScheduler().sweep(store, t)
        []
        >>> [m.id for m in DelayScheduler().sweep(store, t + timedelta(seconds=1))]
        ['d']
    """

    @staticmethod
    def is_elapsed(message: QueueMessage[Any], now: datetime) -> bool:
        """Check whether a delayed message may be promoted at ``now``."""
        return message.delay_until is not None and message.delay_until <= now

    def sweep(self, store: MessageStore, now: datetime) -> list[QueueMessage[Any]]:
        """Promote every elapsed delayed message.

        Args:
            store: Store to sweep.
            now: Current time.

        Returns:
            The promoted messages, now Pending in the ready collection.
        """
        ready = store.take_delayed(lambda m: self.is_elapsed(m, now))
        if not ready:
            return []

        for message in ready:
            message.status = MessageStatus.PENDING
            message.updated_at = now
        store.extend(Collection.READY, ready)
        return ready

