# storefront/stores/wishlist_store.py

"""Liked products, kept as an insertion-ordered set of ids."""

from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any

from storefront.config.settings import Settings
from storefront.models.product import Product
from storefront.models.wishlist import WishlistItem
from storefront.storage.persistence import PersistenceWriter
from storefront.stores.base_store import PersistedStore


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WishlistStore(PersistedStore):
    """Set of wishlist items keyed by product id; no quantities."""

    _area = "wishlist"

    def __init__(
        self,
        persistence: PersistenceWriter | None = None,
        storage_key: str = Settings.WISHLIST_STORAGE_KEY,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        super().__init__(storage_key, persistence)
        self._items: dict[str, WishlistItem] = {}
        self._clock = clock
        self._hydrate()

    def _reset_state(self) -> None:
        self._items = {}

    def _dump_state(self) -> dict[str, Any]:
        return {
            "items": [
                {"productId": item.product_id, "addedAt": item.added_at}
                for item in self._items.values()
            ]
        }

    def _load_state(self, state: dict[str, Any]) -> None:
        items: dict[str, WishlistItem] = {}
        for record in state.get("items", []):
            product_id = record.get("productId")
            if not isinstance(product_id, str) or not product_id:
                self.logger.warning("Skipping invalid wishlist record %r", record)
                continue
            # Duplicate ids in a stored blob collapse to the first entry
            items.setdefault(
                product_id,
                WishlistItem(
                    product_id=product_id,
                    added_at=str(record.get("addedAt") or ""),
                ),
            )
        self._items = items

    # ── Accessors ────────────────────────────────────────

    @property
    def items(self) -> list[WishlistItem]:
        return list(self._items.values())

    @property
    def count(self) -> int:
        return len(self._items)

    def product_ids(self) -> list[str]:
        return list(self._items)

    def is_in_wishlist(self, product_id: str) -> bool:
        return product_id in self._items

    def resolve(self, products: Iterable[Product]) -> list[Product]:
        """Catalog products that are wishlisted, in catalog order.

        Ids whose product has left the catalog are skipped.
        """
        return [p for p in products if p.id in self._items]

    # ── Mutators ─────────────────────────────────────────

    def add_to_wishlist(self, product_id: str) -> None:
        """Insert ``product_id`` unless it is already present."""
        if product_id in self._items:
            return
        self._items[product_id] = WishlistItem(
            product_id=product_id,
            added_at=self._clock().isoformat(),
        )
        self._commit()

    def remove_from_wishlist(self, product_id: str) -> None:
        if self._items.pop(product_id, None) is None:
            return
        self._commit()

    def toggle_wishlist(self, product_id: str) -> bool:
        """Remove if present, else add.  Returns the new membership."""
        if product_id in self._items:
            self.remove_from_wishlist(product_id)
            return False
        self.add_to_wishlist(product_id)
        return True

    def clear_wishlist(self) -> None:
        if not self._items:
            return
        self._items = {}
        self._commit()
