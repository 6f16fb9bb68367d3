"""Queue implementations.

Example:
    >>> from queuespine.queue import AdvancedQueue
    >>> queue = AdvancedQueue()
    >>> queue.is_empty()
    True
"""

from queuespine.queue.advanced import AdvancedQueue
from queuespine.queue.scheduler import DelayScheduler
from queuespine.queue.simple import SimpleQueue
from queuespine.queue.store import Collection, MessageStore
from queuespine.queue.topic import TopicQueue

__all__ = [
    "AdvancedQueue",
    "Collection",
    "DelayScheduler",
    "MessageStore",
    "SimpleQueue",
    "TopicQueue",
]
