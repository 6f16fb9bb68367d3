"""In-process broadcast channels.

``MemoryBroadcastChannel`` objects that share a name form one channel. A
post is delivered synchronously to the subscribers of every *other* open
channel object with that name; the sender does not receive its own posts.
Each subscriber gets its own deep copy of the message record.

Example:
    >>> from datetime import datetime, UTC
    >>> from queuespine.broadcast.memory import MemoryBroadcastChannel
    >>> from queuespine.models.message import QueueMessage
    >>> t = datetime(2024, 1, 1, tzinfo=UTC)
    >>> sender = MemoryBroadcastChannel("orders")
    >>> receiver = MemoryBroadcastChannel("orders")
    >>> received = []
    >>> _ = receiver.subscribe(received.append)
    >>> sender.post(QueueMessage(id="m1", payload="hi", created_at=t, updated_at=t))
    >>> [m.id for m in received]
    ['m1']
    >>> sender.close(); receiver.close()
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Any, ClassVar

from queuespine.core.exceptions import BroadcastError
from queuespine.models.message import QueueMessage
from queuespine.protocols.broadcast import MessageHandler, Unsubscribe

logger = logging.getLogger(__name__)


def _noop() -> None:
    pass


class MemoryBroadcastChannel:
    """Named fan-out channel shared by every instance in this process.

    Args:
        name: Channel name. Instances with equal names see each other's posts.
        log: Logger for handler failures (default: module logger).
    """

    _registry: ClassVar[dict[str, list[MemoryBroadcastChannel]]] = defaultdict(list)
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, name: str, log: logging.Logger | None = None) -> None:
        if not name:
            raise BroadcastError("Channel name cannot be empty")
        self._name = name
        self._handlers: list[MessageHandler] = []
        self._logger = log or logger
        self._closed = False
        with self._registry_lock:
            self._registry[name].append(self)

    @property
    def name(self) -> str:
        """Channel name."""
        return self._name

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def post(self, message: QueueMessage[Any]) -> None:
        """Deliver a message to subscribers of the other channel instances.

        Raises:
            BroadcastError: If this channel is closed.
        """
        if self._closed:
            raise BroadcastError(f"Channel {self._name!r} is closed")

        with self._registry_lock:
            peers = [c for c in self._registry.get(self._name, []) if c is not self]
        for peer in peers:
            peer._dispatch(message)

    def _dispatch(self, message: QueueMessage[Any]) -> None:
        for handler in list(self._handlers):
            try:
                handler(message.snapshot())
            except Exception as e:
                self._logger.error(f"Error in subscriber for channel '{self._name}': {e}")

    def subscribe(self, handler: MessageHandler) -> Unsubscribe:
        """Register a handler for messages posted by other instances.

        Raises:
            TypeError: If handler is not callable.
        """
        if not callable(handler):
            raise TypeError(f"Handler must be callable, got {type(handler)}")
        if self._closed:
            self._logger.warning(f"Channel '{self._name}' is closed; subscription ignored")
            return _noop
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def subscriber_count(self) -> int:
        """Number of handlers registered on this instance."""
        return len(self._handlers)

    def close(self) -> None:
        """Leave the channel and drop all handlers. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._handlers.clear()
        with self._registry_lock:
            peers = self._registry.get(self._name, [])
            if self in peers:
                peers.remove(self)
            if not peers:
                self._registry.pop(self._name, None)

    @classmethod
    def open_channels(cls, name: str) -> int:
        """Number of open instances for a channel name."""
        with cls._registry_lock:
            return len(cls._registry.get(name, []))


class NullBroadcastChannel:
    """Channel used when broadcasting is unavailable. Every call is a no-op."""

    @property
    def name(self) -> str | None:
        return None

    def post(self, message: QueueMessage[Any]) -> None:
        pass

    def subscribe(self, handler: MessageHandler) -> Unsubscribe:
        logger.warning("Broadcast channel not available, subscription will not receive messages")
        return _noop

    def close(self) -> None:
        pass
