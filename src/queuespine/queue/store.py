"""Message store: the three ordered collections behind a queue.

Every message lives in exactly one of the ready, delayed or dead-letter
collections. A hash index keyed by message id makes lookups O(1) and is
updated on every move, so a move is always remove-then-insert.

Example:
    >>> from datetime import datetime, UTC
    >>> from queuespine.models.message import QueueMessage
    >>> from queuespine.queue.store import Collection, MessageStore
    >>> t = datetime(2024, 1, 1, tzinfo=UTC)
    >>> store = MessageStore()
    >>> store.insert(Collection.READY, QueueMessage(id="a", payload=1, created_at=t, updated_at=t))
    >>> store.locate("a")[0]
    <Collection.READY: 'ready'>
    >>> store.total()
    1
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import Any

from queuespine.models.message import QueueMessage
from queuespine.utils.ordering import SortKey, delay_key, priority_key, sort_messages


class Collection(str, Enum):
    """Names of the store's collections."""

    READY = "ready"
    DELAYED = "delayed"
    DEAD_LETTER = "dead_letter"


class MessageStore:
    """Ready, delayed and dead-letter collections with an id index.

    The ready collection is kept sorted by priority then age, the delayed
    collection by delay_until. The dead-letter collection keeps arrival
    order.
    """

    _SORT_KEYS: dict[Collection, SortKey | None] = {
        Collection.READY: priority_key,
        Collection.DELAYED: delay_key,
        Collection.DEAD_LETTER: None,
    }

    def __init__(self) -> None:
        self._collections: dict[Collection, list[QueueMessage[Any]]] = {c: [] for c in Collection}
        self._index: dict[str, tuple[Collection, QueueMessage[Any]]] = {}

    # --- Lookup ---

    def find(self, message_id: str) -> QueueMessage[Any] | None:
        """Return the message with this id from any collection."""
        entry = self._index.get(message_id)
        return entry[1] if entry else None

    def locate(self, message_id: str) -> tuple[Collection, QueueMessage[Any]] | None:
        """Return the collection holding a message along with the message."""
        return self._index.get(message_id)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._index

    # --- Mutation ---

    def insert(self, collection: Collection, message: QueueMessage[Any]) -> None:
        """Add a message to a collection and re-sort it.

        Raises:
            ValueError: If the id is already stored. Callers move messages
                with remove() first.
        """
        if message.id in self._index:
            raise ValueError(f"Message {message.id!r} is already stored")
        self._collections[collection].append(message)
        self._index[message.id] = (collection, message)
        self.resort(collection)

    def extend(self, collection: Collection, messages: Iterable[QueueMessage[Any]]) -> None:
        """Add several messages and re-sort once."""
        added = False
        for message in messages:
            if message.id in self._index:
                raise ValueError(f"Message {message.id!r} is already stored")
            self._collections[collection].append(message)
            self._index[message.id] = (collection, message)
            added = True
        if added:
            self.resort(collection)

    def remove(self, message_id: str) -> tuple[Collection, QueueMessage[Any]] | None:
        """Remove a message from whichever collection holds it."""
        entry = self._index.pop(message_id, None)
        if entry is None:
            return None
        collection, message = entry
        items = self._collections[collection]
        for i, item in enumerate(items):
            if item is message:
                del items[i]
                break
        return entry

    def move(self, message_id: str, collection: Collection) -> QueueMessage[Any] | None:
        """Move a message into a collection (remove-then-insert)."""
        entry = self.remove(message_id)
        if entry is None:
            return None
        self.insert(collection, entry[1])
        return entry[1]

    def take_delayed(
        self, predicate: Callable[[QueueMessage[Any]], bool]
    ) -> list[QueueMessage[Any]]:
        """Remove and return delayed messages matching a predicate."""
        delayed = self._collections[Collection.DELAYED]
        taken = [m for m in delayed if predicate(m)]
        if taken:
            self._collections[Collection.DELAYED] = [m for m in delayed if not predicate(m)]
            for message in taken:
                del self._index[message.id]
        return taken

    def resort(self, collection: Collection) -> None:
        """Re-apply the collection's ordering."""
        key = self._SORT_KEYS[collection]
        if key is not None:
            sort_messages(self._collections[collection], key)

    def replace(
        self,
        ready: Iterable[QueueMessage[Any]],
        delayed: Iterable[QueueMessage[Any]],
        dead_letter: Iterable[QueueMessage[Any]],
    ) -> int:
        """Replace all collections wholesale.

        Duplicate ids are dropped (first occurrence wins, in ready, delayed,
        dead-letter order) so the uniqueness invariant survives a corrupt
        snapshot.

        Returns:
            Number of duplicates dropped.
        """
        self.clear()
        dropped = 0
        for collection, messages in (
            (Collection.READY, ready),
            (Collection.DELAYED, delayed),
            (Collection.DEAD_LETTER, dead_letter),
        ):
            for message in messages:
                if message.id in self._index:
                    dropped += 1
                    continue
                self._collections[collection].append(message)
                self._index[message.id] = (collection, message)
            self.resort(collection)
        return dropped

    def clear(self) -> None:
        """Drop every message."""
        for items in self._collections.values():
            items.clear()
        self._index.clear()

    # --- Views ---

    def messages(self, collection: Collection) -> list[QueueMessage[Any]]:
        """Live list for a collection. Do not mutate."""
        return self._collections[collection]

    def iter_all(self) -> Iterator[QueueMessage[Any]]:
        """Iterate ready, then delayed, then dead-letter messages."""
        for collection in Collection:
            yield from self._collections[collection]

    def count(self, collection: Collection) -> int:
        """Number of messages in a collection."""
        return len(self._collections[collection])

    def total(self) -> int:
        """Number of messages across all collections."""
        return len(self._index)
