"""Storage driver protocol.

Defines the key-value capability the persistence adapter needs from any
storage backend. Values are JSON-compatible objects.

Example:
    >>> from queuespine.protocols.storage import StorageDriver
    >>> from queuespine.storage.memory import MemoryStorageDriver
    >>> isinstance(MemoryStorageDriver(), StorageDriver)
    True
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StorageDriver(Protocol):
    """Async key-value storage protocol.

    Implementations raise ``StorageError`` on I/O failure. ``load`` returns
    ``None`` for a missing key.
    """

    async def save(self, key: str, value: Any) -> None:
        """Store a value under a key, replacing any previous value."""
        ...

    async def load(self, key: str) -> Any | None:
        """Load the value for a key, or None if absent."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        ...

    async def clear(self) -> None:
        """Remove every key owned by this driver."""
        ...
