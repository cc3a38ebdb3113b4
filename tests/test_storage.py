# tests/test_storage.py

"""Tests for the key/value backends and the persistence writer."""

import tempfile
import threading
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from storefront.storage.backends import JsonFileStorage, MemoryStorage, StorageBackend
from storefront.storage.persistence import PersistenceWriter, create_backend
from storefront.storage.sqlite_storage import SqliteStorage


class _BackendContract:
    """Behaviour every backend must share."""

    backend: StorageBackend

    def test_missing_key_is_none(self) -> None:
        """An unknown key reads as None."""
        self.assertIsNone(self.backend.get_item("nope"))  # type: ignore[attr-defined]

    def test_set_then_get(self) -> None:
        """A stored value reads back."""
        self.backend.set_item("cart-storage", '{"a": 1}')
        self.assertEqual(self.backend.get_item("cart-storage"), '{"a": 1}')  # type: ignore[attr-defined]

    def test_overwrite(self) -> None:
        """A second set replaces the value."""
        self.backend.set_item("k", "one")
        self.backend.set_item("k", "two")
        self.assertEqual(self.backend.get_item("k"), "two")  # type: ignore[attr-defined]

    def test_remove(self) -> None:
        """Removed keys read as None; removing twice is fine."""
        self.backend.set_item("k", "v")
        self.backend.remove_item("k")
        self.backend.remove_item("k")
        self.assertIsNone(self.backend.get_item("k"))  # type: ignore[attr-defined]

    def test_unicode_round_trip(self) -> None:
        """Non-ASCII text survives storage."""
        self.backend.set_item("k", '{"name": "Émeraude ⌚"}')
        self.assertEqual(self.backend.get_item("k"), '{"name": "Émeraude ⌚"}')  # type: ignore[attr-defined]


class TestMemoryStorage(_BackendContract, unittest.TestCase):
    """MemoryStorage."""

    def setUp(self) -> None:
        self.backend = MemoryStorage()

    def test_keys(self) -> None:
        """keys lists stored keys."""
        self.backend.set_item("b", "1")
        self.backend.set_item("a", "2")
        self.assertEqual(self.backend.keys(), ["a", "b"])  # type: ignore[attr-defined]


class TestJsonFileStorage(_BackendContract, unittest.TestCase):
    """JsonFileStorage in a temporary directory."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmp.name)
        self.backend = JsonFileStorage(self.directory)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_one_file_per_key(self) -> None:
        """Each key is its own JSON file."""
        self.backend.set_item("cart-storage", "{}")
        self.assertTrue((self.directory / "cart-storage.json").exists())

    def test_unsafe_key_characters_replaced(self) -> None:
        """Path characters in keys cannot escape the directory."""
        self.backend.set_item("../escape", "{}")
        self.assertEqual([p.name for p in self.directory.iterdir()], [".._escape.json"])

    def test_no_temp_files_left(self) -> None:
        """Atomic writes leave no temporary files."""
        self.backend.set_item("k", "v")
        self.assertEqual([p.name for p in self.directory.iterdir()], ["k.json"])


class TestSqliteStorage(_BackendContract, unittest.TestCase):
    """SqliteStorage in a temporary database."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.backend = SqliteStorage(Path(self._tmp.name) / "kv.db")

    def tearDown(self) -> None:
        self.backend.close()  # type: ignore[attr-defined]
        self._tmp.cleanup()

    def test_updated_at_recorded(self) -> None:
        """Writes record an update timestamp."""
        self.assertIsNone(self.backend.updated_at("k"))  # type: ignore[attr-defined]
        self.backend.set_item("k", "v")
        self.assertIsNotNone(self.backend.updated_at("k"))  # type: ignore[attr-defined]

    def test_survives_reopen(self) -> None:
        """Values survive closing and reopening the database."""
        path = Path(self._tmp.name) / "kv.db"
        self.backend.set_item("k", "v")
        reopened = SqliteStorage(path)
        try:
            self.assertEqual(reopened.get_item("k"), "v")
        finally:
            reopened.close()


class TestCreateBackend(unittest.TestCase):
    """create_backend selection."""

    def test_named_backends(self) -> None:
        """Each name builds its backend."""
        self.assertIsInstance(create_backend("memory"), MemoryStorage)
        self.assertIsInstance(create_backend("json"), JsonFileStorage)
        sqlite = create_backend("sqlite")
        self.assertIsInstance(sqlite, SqliteStorage)
        sqlite.close()  # type: ignore[attr-defined]

    def test_default_comes_from_settings(self) -> None:
        """No name uses the configured backend."""
        # conftest switches the default to memory
        self.assertIsInstance(create_backend(), MemoryStorage)

    def test_unknown_falls_back_to_json(self) -> None:
        """Unknown names warn and fall back to JSON files."""
        with self.assertLogs("storefront.persistence", level="WARNING"):
            self.assertIsInstance(create_backend("mongo"), JsonFileStorage)


class TestPersistenceWriter(unittest.TestCase):
    """Background writes through PersistenceWriter."""

    def test_writes_land_in_order(self) -> None:
        """Writes land in submission order."""
        storage = MemoryStorage()
        writer = PersistenceWriter(storage)
        for i in range(50):
            writer.save("k", str(i))
        self.assertTrue(writer.flush())
        self.assertEqual(storage.get_item("k"), "49")
        writer.close()

    def test_save_returns_awaitable_future(self) -> None:
        """save returns a Future that completes."""
        writer = PersistenceWriter(MemoryStorage())
        future = writer.save("k", "v")
        self.assertIsNone(future.result(timeout=5))
        writer.close()

    def test_writes_run_off_the_calling_thread(self) -> None:
        """Writes run on the persistence worker thread."""
        seen: list[str] = []
        backend = MagicMock(spec=MemoryStorage)
        backend.set_item.side_effect = lambda k, v: seen.append(
            threading.current_thread().name
        )
        writer = PersistenceWriter(backend)
        writer.save("k", "v").result(timeout=5)
        writer.close()
        self.assertTrue(seen[0].startswith("storefront-persist"))

    def test_failure_logged_not_raised(self) -> None:
        """A failing write is logged, never raised."""
        backend = MagicMock(spec=MemoryStorage)
        backend.set_item.side_effect = OSError("read-only")
        writer = PersistenceWriter(backend)
        with self.assertLogs("storefront.persistence", level="ERROR") as logs:
            future = writer.save("cart-storage", "{}")
            writer.close()
        self.assertIsInstance(future.exception(), OSError)
        self.assertIn("cart-storage", logs.output[0])

    def test_load_failure_treated_as_empty(self) -> None:
        """A failing load reads as nothing stored."""
        backend = MagicMock(spec=MemoryStorage)
        backend.get_item.side_effect = OSError("gone")
        writer = PersistenceWriter(backend)
        with self.assertLogs("storefront.persistence", level="ERROR"):
            self.assertIsNone(writer.load("k"))
        writer.close()

    def test_save_after_close_fails_future(self) -> None:
        """Saving after close returns a failed Future."""
        writer = PersistenceWriter(MemoryStorage())
        writer.close()
        with self.assertLogs("storefront.persistence", level="ERROR"):
            future = writer.save("k", "v")
        self.assertIsInstance(future.exception(), RuntimeError)

    def test_remove(self) -> None:
        """Removed keys read as None; removing twice is fine."""
        storage = MemoryStorage()
        storage.set_item("k", "v")
        writer = PersistenceWriter(storage)
        writer.remove("k").result(timeout=5)
        writer.close()
        self.assertIsNone(storage.get_item("k"))

    def test_flush_with_nothing_pending(self) -> None:
        """flush with nothing queued returns True."""
        writer = PersistenceWriter(MemoryStorage())
        self.assertTrue(writer.flush())
        writer.close()


if __name__ == "__main__":
    unittest.main()
