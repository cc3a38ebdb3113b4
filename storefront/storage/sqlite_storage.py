# storefront/storage/sqlite_storage.py

"""SQLite-backed key/value storage for store blobs."""

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path

from storefront.config.settings import Settings
from storefront.storage.backends import StorageBackend

logger = logging.getLogger("storefront.storage")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SqliteStorage(StorageBackend):
    """Single-table SQLite store; one row per key."""

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or Settings.DATA_DIR / Settings.STORAGE_DB_NAME
        path.parent.mkdir(parents=True, exist_ok=True)
        # Writes arrive from the persistence worker thread
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("SqliteStorage opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return None if row is None else str(row[0])

    def set_item(self, key: str, value: str) -> None:
        ts = datetime.now(timezone.utc).isoformat()
        with self._lock:
            self._conn.execute(
                "INSERT INTO kv_store (key, value, updated_at) "
                "VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET "
                "value=excluded.value, updated_at=excluded.updated_at",
                (key, value, ts),
            )
            self._conn.commit()

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            self._conn.commit()

    def updated_at(self, key: str) -> datetime | None:
        """Return when ``key`` was last written, if it exists."""
        with self._lock:
            row = self._conn.execute(
                "SELECT updated_at FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return None if row is None else datetime.fromisoformat(row[0])
