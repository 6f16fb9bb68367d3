"""Tests for create_storage_driver."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from queuespine.storage.factory import (
    StorageOptions,
    available_selectors,
    create_storage_driver,
    detect_driver_type,
)
from queuespine.storage.file import FileStorageDriver
from queuespine.storage.memory import MemoryStorageDriver
from queuespine.storage.sqlite import SQLiteStorageDriver


class TestDetectDriverType:
    """Selector resolution."""

    @pytest.mark.parametrize(
        ("selector", "expected"),
        [
            ("memory", "memory"),
            ("localstorage", "file"),
            ("localStorage", "file"),
            ("file", "file"),
            ("indexeddb", "sqlite"),
            ("IndexedDB", "sqlite"),
            ("sqlite", "sqlite"),
            ("redis", None),
            ("", None),
            (None, None),
        ],
    )
    def test_selectors(self, selector: str | None, expected: str | None) -> None:
        """Selectors are case-insensitive aliases."""
        assert detect_driver_type(selector) == expected

    def test_available_selectors(self) -> None:
        """All accepted selectors are listed."""
        assert available_selectors() == ["file", "indexeddb", "localstorage", "memory", "sqlite"]


class TestCreateStorageDriver:
    """Driver construction and degradation."""

    def test_memory_default(self) -> None:
        """The default selector is memory."""
        assert isinstance(create_storage_driver(), MemoryStorageDriver)

    def test_localstorage(self, tmp_path: Path) -> None:
        """'localstorage' creates a file driver in data_dir."""
        driver = create_storage_driver("localstorage", StorageOptions.for_testing(tmp_path))
        assert isinstance(driver, FileStorageDriver)
        assert driver.directory == tmp_path

    async def test_indexeddb(self, tmp_path: Path) -> None:
        """'indexeddb' creates a connected SQLite driver."""
        driver = create_storage_driver("indexeddb", StorageOptions.for_testing(tmp_path))
        assert isinstance(driver, SQLiteStorageDriver)
        assert (tmp_path / "test.db").exists()
        await driver.close()

    def test_unknown_selector_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """Unknown selectors degrade to memory with a warning."""
        with caplog.at_level(logging.WARNING):
            driver = create_storage_driver("redis")
        assert isinstance(driver, MemoryStorageDriver)
        assert "redis" in caplog.text

    def test_unavailable_backend_falls_back(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A durable driver that cannot start degrades to memory."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        with caplog.at_level(logging.WARNING):
            driver = create_storage_driver("indexeddb", StorageOptions(data_dir=blocker / "sub"))
        assert isinstance(driver, MemoryStorageDriver)
        assert "unavailable" in caplog.text

    def test_injected_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        """Warnings go to the logger passed in."""
        log = logging.getLogger("queuespine.test.factory")
        with caplog.at_level(logging.WARNING, logger="queuespine.test.factory"):
            create_storage_driver("bogus", log=log)
        assert any(r.name == "queuespine.test.factory" for r in caplog.records)
