"""Tests for SimpleQueue."""

from __future__ import annotations

from queuespine.queue.simple import SimpleQueue


class TestSimpleQueue:
    """Plain FIFO behavior."""

    def test_fifo(self) -> None:
        """Items come out in insertion order."""
        queue: SimpleQueue[int] = SimpleQueue()
        for i in range(3):
            queue.enqueue(i)
        assert [queue.dequeue() for _ in range(3)] == [0, 1, 2]

    def test_empty(self) -> None:
        """Empty queues return None."""
        queue: SimpleQueue[str] = SimpleQueue()
        assert queue.dequeue() is None
        assert queue.peek() is None
        assert queue.is_empty() is True
        assert queue.size() == 0

    def test_peek_and_size(self) -> None:
        """Peek does not remove."""
        queue: SimpleQueue[str] = SimpleQueue()
        queue.enqueue("a")
        queue.enqueue("b")
        assert queue.peek() == "a"
        assert queue.size() == 2

    def test_to_array_is_copy(self) -> None:
        """to_array returns a separate list."""
        queue: SimpleQueue[str] = SimpleQueue()
        queue.enqueue("a")
        items = queue.to_array()
        items.append("b")
        assert queue.to_array() == ["a"]

    def test_clear(self) -> None:
        """Clear empties the queue."""
        queue: SimpleQueue[str] = SimpleQueue()
        queue.enqueue("a")
        queue.clear()
        assert queue.is_empty() is True
