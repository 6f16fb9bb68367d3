"""Sort keys for the queue collections.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> from queuespine.models.message import QueueMessage
    >>> from queuespine.utils.ordering import priority_key, sort_messages
    >>> t = datetime(2024, 1, 1, tzinfo=UTC)
    >>> msgs = [
    ...     QueueMessage(id="old-low", payload=1, priority=1, created_at=t, updated_at=t),
    ...     QueueMessage(id="high", payload=2, priority=5, created_at=t, updated_at=t),
    ...     QueueMessage(id="new-low", payload=3, priority=1,
    ...                  created_at=t + timedelta(seconds=1), updated_at=t),
    ... ]
    >>> sort_messages(msgs, priority_key)
    >>> [m.id for m in msgs]
    ['high', 'old-low', 'new-low']
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from queuespine.models.message import QueueMessage

SortKey = Callable[[QueueMessage[Any]], tuple[Any, ...]]


def priority_key(message: QueueMessage[Any]) -> tuple[int, datetime]:
    """Higher priority first, then older first."""
    return (-message.priority, message.created_at)


def delay_key(message: QueueMessage[Any]) -> tuple[datetime, int, datetime]:
    """Earliest delay_until first; ties fall back to priority order."""
    due = message.delay_until or message.created_at
    return (due, -message.priority, message.created_at)


def sort_messages(messages: list[QueueMessage[Any]], key: SortKey) -> None:
    """Sort in place. Stable, so equal keys keep insertion order."""
    messages.sort(key=key)


__all__ = ["SortKey", "delay_key", "priority_key", "sort_messages"]
