# storefront/storage/persistence.py

"""Fire-and-forget persistence of store blobs.

Stores update their in-memory state first and then hand a serialised
blob to :class:`PersistenceWriter`.  Writes run on a single worker
thread, so they land in the order the mutations happened.  The caller
gets a :class:`~concurrent.futures.Future` it may wait on; failures are
logged by the writer and never raised back into the store.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures

from storefront.config.settings import Settings
from storefront.storage.backends import (
    JsonFileStorage,
    MemoryStorage,
    StorageBackend,
)

logger = logging.getLogger("storefront.persistence")


def create_backend(kind: str | None = None) -> StorageBackend:
    """Build the backend named by ``kind`` (default ``Settings.STORAGE_BACKEND``).

    Unknown names fall back to JSON files with a warning.
    """
    name = (kind or Settings.STORAGE_BACKEND).strip().lower()
    if name == "sqlite":
        from storefront.storage.sqlite_storage import SqliteStorage

        return SqliteStorage()
    if name == "memory":
        return MemoryStorage()
    if name != "json":
        logger.warning("Unknown storage backend '%s', using json", name)
    return JsonFileStorage()


class PersistenceWriter:
    """Serialises blob writes onto a background worker."""

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="storefront-persist"
        )
        self._pending: set[Future[None]] = set()
        self._lock = threading.Lock()
        self._closed = False

    def load(self, key: str) -> str | None:
        """Read a blob synchronously (used once, at store hydration).

        A failing backend is logged and treated as "nothing stored".
        """
        try:
            return self.backend.get_item(key)
        except Exception:
            logger.error("Failed to load '%s' from storage", key, exc_info=True)
            return None

    def save(self, key: str, blob: str) -> Future[None]:
        """Queue ``blob`` to be written under ``key``."""
        return self._submit(key, self.backend.set_item, key, blob)

    def remove(self, key: str) -> Future[None]:
        """Queue removal of ``key``."""
        return self._submit(key, self.backend.remove_item, key)

    def _submit(self, key: str, fn: Callable[..., None], *args: str) -> Future[None]:
        if self._closed:
            future: Future[None] = Future()
            future.set_exception(RuntimeError("PersistenceWriter is closed"))
            logger.error("Dropped write for '%s': writer is closed", key)
            return future

        future = self._executor.submit(fn, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(lambda f: self._on_done(key, f))
        return future

    def _on_done(self, key: str, future: Future[None]) -> None:
        with self._lock:
            self._pending.discard(future)
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Persisting '%s' failed; in-memory state stays authoritative",
                key,
                exc_info=exc,
            )
        else:
            logger.debug("Persisted '%s'", key)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for queued writes.  Returns ``False`` on timeout."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _done, not_done = wait_futures(
            pending,
            timeout=Settings.PERSIST_TIMEOUT if timeout is None else timeout,
        )
        if not_done:
            logger.warning("%d writes still pending after flush", len(not_done))
        return not not_done

    def close(self) -> None:
        """Flush outstanding writes and stop the worker."""
        if self._closed:
            return
        self.flush()
        self._closed = True
        self._executor.shutdown(wait=True)
        close = getattr(self.backend, "close", None)
        if callable(close):
            close()
