# storefront/stores/cart_store.py

"""The shopper's in-progress order: lines, totals and the open flag."""

import math
from dataclasses import replace
from typing import Any

from storefront.config.settings import Settings
from storefront.models.cart import CartLine, OrderSummary
from storefront.models.product import Product
from storefront.services.money import clamp_quantity
from storefront.storage.persistence import PersistenceWriter
from storefront.stores.base_store import PersistedStore


class CartStore(PersistedStore):
    """Cart keyed by product id; every line holds a quantity of at least 1.

    Mutators never raise.  Invalid quantities and unknown products are
    clamped or ignored, and each change is persisted in the background.
    """

    _area = "cart"

    def __init__(
        self,
        persistence: PersistenceWriter | None = None,
        storage_key: str = Settings.CART_STORAGE_KEY,
    ) -> None:
        super().__init__(storage_key, persistence)
        self._lines: dict[str, CartLine] = {}
        self._is_open = False
        self._hydrate()

    # ── State (de)serialisation ──────────────────────────

    def _reset_state(self) -> None:
        self._lines = {}
        self._is_open = False

    def _dump_state(self) -> dict[str, Any]:
        return {
            "items": {
                pid: {
                    "product": line.product.to_dict(),
                    "quantity": line.quantity,
                }
                for pid, line in self._lines.items()
            },
            "isOpen": self._is_open,
        }

    def _load_state(self, state: dict[str, Any]) -> None:
        lines: dict[str, CartLine] = {}
        for pid, entry in state.get("items", {}).items():
            try:
                product = Product.from_dict(entry["product"])
            except (TypeError, KeyError) as exc:
                self.logger.warning("Skipping invalid cart line '%s': %s", pid, exc)
                continue
            quantity = entry.get("quantity")
            if (
                product.id != pid
                or not isinstance(quantity, int)
                or isinstance(quantity, bool)
                or quantity < 1
            ):
                self.logger.warning("Skipping invalid cart line '%s'", pid)
                continue
            lines[pid] = CartLine(product=product, quantity=quantity)
        self._lines = lines
        self._is_open = bool(state.get("isOpen", False))

    # ── Accessors ────────────────────────────────────────

    @property
    def lines(self) -> list[CartLine]:
        """Cart lines in the order they were first added."""
        return list(self._lines.values())

    @property
    def is_open(self) -> bool:
        return self._is_open

    def get_line(self, product_id: str) -> CartLine | None:
        return self._lines.get(product_id)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def get_total_items(self) -> int:
        """Sum of quantities across all lines (the cart badge count)."""
        return sum(line.quantity for line in self._lines.values())

    def get_total_price(self) -> float:
        """Sum of snapshot price times quantity, recomputed on every call."""
        return math.fsum(line.subtotal for line in self._lines.values())

    # ── Mutators ─────────────────────────────────────────

    def add_item(self, product: Product, quantity: int = 1) -> None:
        """Add ``quantity`` of ``product``, merging with an existing line.

        The merged quantity is clamped to the incoming product's stock when
        known, and that stock replaces the one held by the line.
        A clamp to zero (out of stock) leaves no line behind.
        """
        if quantity < 1:
            self.logger.debug(
                "Ignoring add of %s with quantity %d", product.id, quantity
            )
            return

        existing = self._lines.get(product.id)
        requested = quantity + (existing.quantity if existing else 0)
        new_quantity = clamp_quantity(requested, product.stock)

        if new_quantity < 1:
            self.logger.info("Product %s is out of stock, not added", product.id)
            if existing is None:
                return
            del self._lines[product.id]
        elif existing is not None:
            existing.product = replace(existing.product, stock=product.stock)
            existing.quantity = new_quantity
        else:
            self._lines[product.id] = CartLine(
                product=replace(
                    product,
                    images=list(product.images),
                    features=list(product.features),
                    specifications=dict(product.specifications),
                ),
                quantity=new_quantity,
            )

        if new_quantity < requested:
            self.logger.debug(
                "Clamped %s from %d to stock %s",
                product.id,
                requested,
                product.stock,
            )
        self._commit()

    def remove_item(self, product_id: str) -> None:
        """Delete the line for ``product_id``; absent ids are a no-op."""
        if self._lines.pop(product_id, None) is None:
            return
        self._commit()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        line = self._lines.get(product_id)
        if line is None:
            return
        if quantity <= 0:
            self.remove_item(product_id)
            return

        new_quantity = clamp_quantity(quantity, line.product.stock)
        if new_quantity < 1:
            self.remove_item(product_id)
            return
        if new_quantity == line.quantity:
            return
        line.quantity = new_quantity
        self._commit()

    def clear_cart(self) -> None:
        """Empty every line (the open flag is left as it is)."""
        if not self._lines:
            return
        self._lines = {}
        self._commit()

    def checkout(self) -> OrderSummary:
        """Capture the current lines and totals, then clear the cart."""
        summary = OrderSummary(
            lines=self.lines,
            total_items=self.get_total_items(),
            total_price=self.get_total_price(),
        )
        self.logger.info(
            "Checkout of %d items totalling %.2f",
            summary.total_items,
            summary.total_price,
        )
        self._lines = {}
        self._is_open = False
        self._commit()
        return summary

    # ── UI flag ──────────────────────────────────────────

    def open_cart(self) -> None:
        self._set_open(True)

    def close_cart(self) -> None:
        self._set_open(False)

    def toggle_cart(self) -> None:
        self._set_open(not self._is_open)

    def _set_open(self, value: bool) -> None:
        if self._is_open == value:
            return
        self._is_open = value
        self._commit()
