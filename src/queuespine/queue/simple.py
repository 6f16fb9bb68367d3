"""Plain FIFO queue with no metadata.

The minimal building block: no priorities, delays or retries.

Example:
    >>> from queuespine.queue.simple import SimpleQueue
    >>> q = SimpleQueue()
    >>> q.enqueue(1); q.enqueue(2)
    >>> q.dequeue()
    1
    >>> q.to_array()
    [2]
"""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class SimpleQueue(Generic[T]):
    """First-in, first-out queue."""

    def __init__(self) -> None:
        self._items: deque[T] = deque()

    def enqueue(self, item: T) -> None:
        """Add an item to the back."""
        self._items.append(item)

    def dequeue(self) -> T | None:
        """Remove and return the front item, or None if empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def peek(self) -> T | None:
        """Return the front item without removing it."""
        return self._items[0] if self._items else None

    def size(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def to_array(self) -> list[T]:
        """Shallow copy of the items, front first."""
        return list(self._items)
