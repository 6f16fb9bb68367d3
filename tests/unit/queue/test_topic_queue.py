"""Tests for TopicQueue."""

from __future__ import annotations

import pytest

from queuespine.broadcast.memory import MemoryBroadcastChannel
from queuespine.models.message import MessageStatus
from queuespine.queue.advanced import AdvancedQueue
from queuespine.queue.topic import TopicQueue
from queuespine.testing import ManualClock


@pytest.fixture
def topic(request: pytest.FixtureRequest) -> str:
    """Channel name unique to the test."""
    return f"topic-{request.node.name}"


class TestTopicQueue:
    """Broadcast of enqueued messages."""

    def test_peer_receives_enqueue(self, topic: str) -> None:
        """Other instances on the topic receive new messages with metadata."""
        producer, consumer = TopicQueue(topic), TopicQueue(topic)
        received = []
        consumer.subscribe(received.append)

        msg = producer.enqueue({"job": 1}, priority=7)

        assert len(received) == 1
        assert received[0].id == msg.id
        assert received[0].priority == 7
        assert received[0].status == MessageStatus.PENDING
        assert received[0] is not msg
        producer.close()
        consumer.close()

    def test_broadcast_does_not_enqueue_on_peer(self, topic: str) -> None:
        """Receiving a broadcast leaves the peer's own queue alone."""
        producer, consumer = TopicQueue(topic), TopicQueue(topic)

        producer.enqueue("a")

        assert consumer.total_size() == 0
        assert producer.size() == 1
        producer.close()
        consumer.close()

    def test_no_echo(self, topic: str) -> None:
        """A queue does not receive its own broadcasts."""
        producer = TopicQueue(topic)
        received = []
        producer.subscribe(received.append)

        producer.enqueue("a")

        assert received == []
        producer.close()

    def test_delayed_not_broadcast(self, topic: str) -> None:
        """Delayed messages are not broadcast, even after promotion."""
        clock = ManualClock()
        producer = TopicQueue(topic, queue=AdvancedQueue(clock=clock))
        consumer = TopicQueue(topic)
        received = []
        consumer.subscribe(received.append)

        producer.enqueue("later", delay=1)
        clock.advance(1)
        assert producer.dequeue().payload == "later"

        assert received == []
        producer.close()
        consumer.close()

    def test_idempotent_enqueue_broadcast_once(self, topic: str) -> None:
        """Re-enqueueing a known id is not broadcast again."""
        producer, consumer = TopicQueue(topic), TopicQueue(topic)
        received = []
        consumer.subscribe(received.append)

        producer.enqueue("a", id="same")
        producer.enqueue("a", id="same")

        assert len(received) == 1
        producer.close()
        consumer.close()

    def test_engine_delegation(self, topic: str) -> None:
        """The full engine API is available on the topic queue."""
        queue = TopicQueue(topic, max_retries=1)
        msg = queue.enqueue("a")
        assert queue.peek().id == msg.id
        assert queue.dequeue().id == msg.id
        assert queue.fail(msg.id, "x") is True
        assert [m.id for m in queue.get_dead_letter_messages()] == [msg.id]
        assert queue.retry_dead_letter(msg.id) is True
        assert queue.to_array()[0].id == msg.id
        queue.dequeue()
        assert queue.complete(msg.id) is True
        assert queue.find_message_by_id(msg.id).status == MessageStatus.COMPLETED
        assert queue.is_empty() is True
        assert queue.total_size() == 1
        queue.clear()
        assert queue.get_all_messages() == []
        queue.close()

    def test_close(self, topic: str) -> None:
        """Close leaves the channel and disposes the engine."""
        producer, consumer = TopicQueue(topic), TopicQueue(topic)
        received = []
        consumer.subscribe(received.append)
        consumer.enqueue("kept")

        consumer.close()
        producer.enqueue("after-close")

        assert received == []
        assert consumer.total_size() == 0
        assert consumer.topic is None
        assert MemoryBroadcastChannel.open_channels(topic) == 1
        producer.close()
        assert MemoryBroadcastChannel.open_channels(topic) == 0

    def test_dispose_leaves_channel(self, topic: str) -> None:
        """Dispose detaches from the channel like close does."""
        producer, consumer = TopicQueue(topic), TopicQueue(topic)
        received = []
        consumer.subscribe(received.append)

        consumer.dispose()
        producer.enqueue("after-dispose")

        assert received == []
        assert consumer.topic is None
        assert MemoryBroadcastChannel.open_channels(topic) == 1
        consumer.dispose()
        producer.dispose()
        assert MemoryBroadcastChannel.open_channels(topic) == 0

    def test_disposed_queue_does_not_broadcast(self, topic: str) -> None:
        """Enqueues after dispose are not posted to peers."""
        producer, consumer = TopicQueue(topic), TopicQueue(topic)
        received = []
        consumer.subscribe(received.append)

        producer.dispose()
        producer.enqueue("quiet")

        assert received == []
        consumer.close()

    def test_no_topic(self) -> None:
        """Without a topic the queue works but never broadcasts."""
        queue = TopicQueue()
        queue.subscribe(print)()
        queue.enqueue("a")
        assert queue.topic is None
        assert queue.size() == 1
        queue.close()

    async def test_async_lifecycle(self, topic: str) -> None:
        """The async context manager initializes and closes the engine."""
        async with TopicQueue(topic, auto_check_delayed=True) as queue:
            queue.enqueue("a")
            assert queue.size() == 1
        assert queue.total_size() == 0
        assert MemoryBroadcastChannel.open_channels(topic) == 0
