"""File-backed storage driver.

Stores each key as a JSON file in a directory. Keys are prefixed so several
applications can share a directory and ``clear()`` only touches this
driver's files. This is the durable, browser-storage-like backend selected
by ``"localstorage"``.

Example:
    >>> import asyncio
    >>> import tempfile
    >>> from pathlib import Path
    >>> from queuespine.storage.file import FileStorageDriver
    >>> async def example():
    ...     with tempfile.TemporaryDirectory() as tmpdir:
    ...         driver = FileStorageDriver(Path(tmpdir))
    ...         await driver.save("queue-1", {"queueId": "1"})
    ...         return await driver.load("queue-1")
    >>> asyncio.run(example())
    {'queueId': '1'}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from queuespine.core.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "queuespine-"


class FileStorageDriver:
    """JSON-file key-value storage.

    Args:
        directory: Directory holding the files (created if missing).
        prefix: Filename prefix for keys owned by this driver.
    """

    def __init__(self, directory: Path | str, prefix: str = DEFAULT_PREFIX) -> None:
        self._directory = Path(directory)
        self._prefix = prefix
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self._directory}: {e}") from e

    @property
    def directory(self) -> Path:
        """Directory holding the stored files."""
        return self._directory

    def _path(self, key: str) -> Path:
        """Get the file path for a key."""
        # Sanitize key for filename
        safe_key = "".join(c if c.isalnum() or c in "-_." else "_" for c in key)
        return self._directory / f"{self._prefix}{safe_key}.json"

    async def save(self, key: str, value: Any) -> None:
        """Write the value as JSON, replacing the file atomically."""
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(json.dumps(value), encoding="utf-8")
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to save {key!r}: {e}") from e

    async def load(self, key: str) -> Any | None:
        """Read the JSON value, or None if missing or unreadable."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load {key!r} from {path}: {e}")
            return None

    async def delete(self, key: str) -> None:
        """Remove the file for a key."""
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {key!r}: {e}") from e

    async def clear(self) -> None:
        """Remove every file carrying this driver's prefix."""
        try:
            for path in self._directory.glob(f"{self._prefix}*.json"):
                path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to clear {self._directory}: {e}") from e

    async def keys(self) -> list[str]:
        """List stored keys (sanitized as they appear on disk)."""
        start = len(self._prefix)
        paths = self._directory.glob(f"{self._prefix}*.json")
        return sorted(path.name[start : -len(".json")] for path in paths)
