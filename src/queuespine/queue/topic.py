"""Topic queue: an AdvancedQueue that broadcasts its enqueues.

``TopicQueue`` wraps an engine rather than extending it. It observes the
engine's newly created messages and posts each non-delayed one to a
broadcast channel exactly once. Idempotent re-enqueues and messages later
promoted out of the delayed collection are never broadcast.

Example:
    >>> from queuespine.queue.topic import TopicQueue
    >>> producer = TopicQueue("jobs")
    >>> consumer = TopicQueue("jobs")
    >>> seen = []
    >>> _ = consumer.subscribe(lambda m: seen.append(m.payload))
    >>> _ = producer.enqueue("resize-image")
    >>> seen
    ['resize-image']
    >>> producer.close(); consumer.close()
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from queuespine.broadcast import create_broadcast_channel
from queuespine.broadcast.memory import NullBroadcastChannel
from queuespine.models.message import QueueMessage
from queuespine.models.options import QueueOptions
from queuespine.protocols.broadcast import BroadcastChannel, MessageHandler, Unsubscribe
from queuespine.queue.advanced import AdvancedQueue

T = TypeVar("T")


class TopicQueue(Generic[T]):
    """Broadcasting decorator around an AdvancedQueue.

    Args:
        topic: Channel name shared with other instances. None disables
            broadcasting (subscribe becomes a no-op).
        options: Options for a new engine (ignored if ``queue`` is given).
        queue: Existing engine to wrap.
        channel: Explicit channel (default: opened from ``topic``).
        logger: Logger for diagnostics.
        **overrides: Option overrides for a new engine.
    """

    def __init__(
        self,
        topic: str | None = None,
        options: QueueOptions | None = None,
        *,
        queue: AdvancedQueue[T] | None = None,
        channel: BroadcastChannel | None = None,
        logger: logging.Logger | None = None,
        **overrides: Any,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._queue: AdvancedQueue[T] = queue or AdvancedQueue(
            options, logger=self._logger, **overrides
        )
        self._channel: BroadcastChannel = channel or create_broadcast_channel(
            topic, log=self._logger
        )
        self._remove_listener = self._queue.add_enqueue_listener(self._on_enqueue)

    @property
    def queue(self) -> AdvancedQueue[T]:
        """The wrapped engine."""
        return self._queue

    @property
    def channel(self) -> BroadcastChannel:
        """The broadcast channel."""
        return self._channel

    @property
    def topic(self) -> str | None:
        """Channel name, or None when broadcasting is disabled."""
        return self._channel.name

    def _on_enqueue(self, message: QueueMessage[Any]) -> None:
        if message.delay_until is not None:
            return
        self._channel.post(message)

    # --- Broadcast API ---

    def subscribe(self, handler: MessageHandler) -> Unsubscribe:
        """Receive messages enqueued by other instances on this topic.

        Handlers get the full message record including metadata.

        Returns:
            A function that removes the handler.
        """
        return self._channel.subscribe(handler)

    def _detach(self) -> None:
        self._remove_listener()
        self._channel.close()
        self._channel = NullBroadcastChannel()

    def close(self) -> None:
        """Close the channel, then dispose the engine."""
        self.dispose()

    async def aclose(self) -> None:
        """Close the channel, then close the engine and wait for its tasks."""
        self._detach()
        await self._queue.close()

    async def __aenter__(self) -> TopicQueue[T]:
        await self._queue.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- Engine API ---

    def enqueue(
        self,
        payload: T,
        *,
        priority: int = 0,
        delay: float = 0,
        id: str | None = None,
    ) -> QueueMessage[T]:
        """Enqueue on the engine; new non-delayed messages are broadcast."""
        return self._queue.enqueue(payload, priority=priority, delay=delay, id=id)

    def dequeue(self) -> QueueMessage[T] | None:
        return self._queue.dequeue()

    def peek(self) -> QueueMessage[T] | None:
        return self._queue.peek()

    def complete(self, message_id: str) -> bool:
        return self._queue.complete(message_id)

    def fail(self, message_id: str, reason: str | None = None) -> bool:
        return self._queue.fail(message_id, reason)

    def find_message_by_id(self, message_id: str) -> QueueMessage[T] | None:
        return self._queue.find_message_by_id(message_id)

    def cancel_delayed(self, message_id: str) -> bool:
        return self._queue.cancel_delayed(message_id)

    def retry_dead_letter(self, message_id: str) -> bool:
        return self._queue.retry_dead_letter(message_id)

    def get_delayed_messages(self) -> list[QueueMessage[T]]:
        return self._queue.get_delayed_messages()

    def get_dead_letter_messages(self) -> list[QueueMessage[T]]:
        return self._queue.get_dead_letter_messages()

    def get_all_messages(self) -> list[QueueMessage[T]]:
        return self._queue.get_all_messages()

    def to_array(self) -> list[QueueMessage[T]]:
        return self._queue.to_array()

    def size(self) -> int:
        return self._queue.size()

    def total_size(self) -> int:
        return self._queue.total_size()

    def is_empty(self) -> bool:
        return self._queue.is_empty()

    def clear(self) -> None:
        self._queue.clear()

    def dispose(self) -> None:
        """Leave the channel and dispose the engine. Idempotent."""
        self._detach()
        self._queue.dispose()
