"""In-memory storage driver.

Volatile key-value storage. State lives only as long as the driver object,
which makes it the default for tests and for queues that do not need to
survive a restart.

Example:
    >>> import asyncio
    >>> from queuespine.storage.memory import MemoryStorageDriver
    >>> driver = MemoryStorageDriver()
    >>> asyncio.run(driver.save("k", {"n": 1}))
    >>> asyncio.run(driver.load("k"))
    {'n': 1}
    >>> asyncio.run(driver.load("missing")) is None
    True
"""

from __future__ import annotations

import copy
from typing import Any


class MemoryStorageDriver:
    """Dict-backed storage driver.

    Values are deep-copied on save and load so callers never share state
    with the stored record.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._data: dict[str, Any] = {}

    async def save(self, key: str, value: Any) -> None:
        """Store a copy of the value."""
        self._data[key] = copy.deepcopy(value)

    async def load(self, key: str) -> Any | None:
        """Load a copy of the value, or None."""
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    async def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._data.pop(key, None)

    async def clear(self) -> None:
        """Remove all keys."""
        self._data.clear()

    async def keys(self) -> list[str]:
        """Return stored keys.

        Example:
            >>> import asyncio
            >>> from queuespine.storage.memory import MemoryStorageDriver
            >>> asyncio.run(MemoryStorageDriver().keys())
            []
        """
        return list(self._data)
