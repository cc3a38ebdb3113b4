# storefront/storage/backends.py

"""Durable key/value backends the stores serialise their state to."""

import logging
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from storefront.config.settings import Settings

logger = logging.getLogger("storefront.storage")

_SAFE_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]")


class StorageBackend(ABC):
    """String-valued key/value storage, modelled on browser local storage."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or ``None`` when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; absent keys are ignored."""


class MemoryStorage(StorageBackend):
    """Process-local storage for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._items)


class JsonFileStorage(StorageBackend):
    """One ``<key>.json`` file per key inside a data directory.

    Writes go to a temporary file that is then renamed over the target,
    so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self.directory: Path = directory or Settings.DATA_DIR
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug("JsonFileStorage initialised at %s", self.directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY_RE.sub('_', key)}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.directory, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
