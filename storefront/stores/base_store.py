# storefront/stores/base_store.py

"""Shared plumbing for persisted, observable session stores."""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from storefront.config.settings import Settings
from storefront.storage.persistence import PersistenceWriter

Listener = Callable[[Any], None]


class PersistedStore(ABC):
    """A store whose state is rehydrated once and persisted on every change.

    Subclasses provide ``_dump_state`` / ``_load_state`` and call
    :meth:`_commit` after each mutation.  Listeners registered with
    :meth:`subscribe` are notified synchronously after the commit.
    """

    def __init__(
        self,
        storage_key: str,
        persistence: PersistenceWriter | None = None,
    ) -> None:
        self.storage_key = storage_key
        self._persistence = persistence
        self._listeners: list[Listener] = []
        self.logger = logging.getLogger(f"storefront.{self._area}")
        self.last_write: Future[None] | None = None

    @property
    @abstractmethod
    def _area(self) -> str:
        """Logger suffix for this store."""

    @abstractmethod
    def _dump_state(self) -> dict[str, Any]:
        """Return the JSON-ready state for the blob."""

    @abstractmethod
    def _load_state(self, state: dict[str, Any]) -> None:
        """Replace in-memory state from a decoded blob."""

    @abstractmethod
    def _reset_state(self) -> None:
        """Put the store into its empty state."""

    # ── Hydration / persistence ──────────────────────────

    def _hydrate(self) -> None:
        """Load the persisted blob once; fall back to the empty state."""
        self._reset_state()
        if self._persistence is None:
            return
        raw = self._persistence.load(self.storage_key)
        if raw is None:
            self.logger.debug("No persisted '%s', starting empty", self.storage_key)
            return
        try:
            payload = json.loads(raw)
            if payload.get("version") != Settings.BLOB_VERSION:
                raise ValueError(f"unsupported version {payload.get('version')!r}")
            state = payload["state"]
            if not isinstance(state, dict):
                raise TypeError("state is not an object")
            self._load_state(state)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            self.logger.warning(
                "Discarding malformed '%s' blob: %s", self.storage_key, exc
            )
            self._reset_state()
            return
        self.logger.info("Rehydrated '%s'", self.storage_key)

    def serialize(self) -> str:
        """Encode the current state as the named storage blob."""
        return json.dumps(
            {"version": Settings.BLOB_VERSION, "state": self._dump_state()},
            ensure_ascii=False,
        )

    def _commit(self) -> None:
        """Persist (fire-and-forget) and notify listeners."""
        if self._persistence is not None:
            self.last_write = self._persistence.save(
                self.storage_key, self.serialize()
            )
        self._notify()

    def flush(self, timeout: float | None = None) -> bool:
        """Block until pending writes finish (mainly for shutdown and tests)."""
        if self._persistence is None:
            return True
        return self._persistence.flush(timeout)

    # ── Observers ────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                self.logger.exception(
                    "Listener %r failed on '%s' update",
                    listener,
                    self.storage_key,
                )
