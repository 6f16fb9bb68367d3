"""Broadcast channel protocol.

A broadcast channel lets independent queue instances that share a channel
name observe each other's enqueues. Delivery is best-effort, unordered
across instances, and lossy for subscribers registered after a post.

Example:
    >>> from queuespine.protocols.broadcast import BroadcastChannel
    >>> from queuespine.broadcast.memory import NullBroadcastChannel
    >>> isinstance(NullBroadcastChannel(), BroadcastChannel)
    True
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from queuespine.models.message import QueueMessage

MessageHandler = Callable[[QueueMessage[Any]], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class BroadcastChannel(Protocol):
    """Fan-out channel protocol."""

    @property
    def name(self) -> str | None:
        """Channel name, or None for a disconnected channel."""
        ...

    def post(self, message: QueueMessage[Any]) -> None:
        """Publish a message record to other instances on the channel."""
        ...

    def subscribe(self, handler: MessageHandler) -> Unsubscribe:
        """Register a handler. Returns a function that removes it."""
        ...

    def close(self) -> None:
        """Leave the channel. Idempotent."""
        ...
