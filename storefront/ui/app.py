# storefront/ui/app.py

"""Terminal UI for the storefront client."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from storefront.models.filter_criteria import FilterCriteria, SortKey
from storefront.models.product import Product
from storefront.services.catalog import CatalogError, InMemoryCatalog
from storefront.services.money import format_price, has_discount
from storefront.services.shop_session import ShopSession, load_catalog
from storefront.storage.backends import StorageBackend
from storefront.stores.base_store import PersistedStore

logger = logging.getLogger("storefront.ui")

_SORT_LABELS: dict[SortKey, str] = {
    SortKey.NAME_ASC: "Name (A-Z)",
    SortKey.NAME_DESC: "Name (Z-A)",
    SortKey.PRICE_ASC: "Price (low to high)",
    SortKey.PRICE_DESC: "Price (high to low)",
}


def _parse_bound(raw: str) -> float | None:
    try:
        return float(raw) if raw.strip() else None
    except ValueError:
        return None


class StorefrontApp(App[object]):
    """Terminal UI: shop table with filters, cart panel and wishlist."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "add_to_cart", "Add to Cart"),
        Binding("w", "toggle_wishlist", "Wishlist"),
        Binding("c", "toggle_cart", "Cart"),
        Binding("d", "remove_line", "Remove Line"),
        Binding("x", "clear_filters", "Clear Filters"),
    ]

    def __init__(
        self,
        catalog: InMemoryCatalog | None = None,
        backend: StorageBackend | None = None,
    ) -> None:
        super().__init__()
        self._load_error: str | None = None
        if catalog is None:
            try:
                catalog = load_catalog()
            except CatalogError as exc:
                logger.error("Catalog unavailable: %s", exc)
                self._load_error = str(exc)
                catalog = InMemoryCatalog()
        self.session = ShopSession(catalog, backend)
        self.criteria = FilterCriteria()
        self.visible: list[Product] = []
        self._unsubscribe = [
            self.session.cart.subscribe(self._on_store_changed),
            self.session.wishlist.subscribe(self._on_store_changed),
        ]

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        view = self.session.shop_view(self.criteria)

        yield Header()
        yield Container(
            Static("⌚ Storefront", id="title"),
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Select[str](
                    [(c, c) for c in view.categories],
                    prompt="All Categories",
                    id="category_select",
                ),
                Select[str](
                    [(b, b) for b in view.brands],
                    prompt="All Brands",
                    id="brand_select",
                ),
                Select[str](
                    [(label, key.value) for key, label in _SORT_LABELS.items()],
                    value=SortKey.NAME_ASC.value,
                    allow_blank=False,
                    id="sort_select",
                ),
                id="filter_bar",
            ),
            Horizontal(
                Input(placeholder="Min price", id="min_price_input"),
                Input(placeholder="Max price", id="max_price_input"),
                Button("Clear Filters", id="clear_btn"),
                id="price_bar",
            ),
            Static("Ready", id="status"),
            DataTable(id="products_table", zebra_stripes=True, cursor_type="row"),
            id="main_container",
        )
        yield Vertical(
            Static("🛒 Cart", id="cart_title"),
            DataTable(id="cart_table", cursor_type="row"),
            Static("", id="cart_total"),
            id="cart_panel",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure tables and render the initial state."""
        products = self._table("#products_table")
        products.add_columns("Name", "Brand", "Category", "Price", "Stock", "Rating", "♥")
        cart = self._table("#cart_table")
        cart.add_columns("Product", "Qty", "Subtotal")
        self.refresh_products()
        self.refresh_cart()
        if self._load_error:
            self.notify(f"Catalog unavailable: {self._load_error}", severity="error")

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self.session.close()

    def _table(self, selector: str) -> DataTable[str | Text]:
        return cast(DataTable[str | Text], self.query_one(selector, DataTable))

    # ── Rendering ────────────────────────────────────────

    def refresh_products(self) -> None:
        """Re-run the filter pipeline and fill the products table."""
        view = self.session.shop_view(self.criteria)
        self.visible = view.products
        table = self._table("#products_table")
        table.clear()
        for p in self.visible:
            rating = self.session.rating_for(p.id)
            price_style = "bold green" if has_discount(p) else ""
            table.add_row(
                p.name[:40],
                p.brand,
                p.category,
                Text(format_price(p.price), style=price_style),
                "OUT" if p.stock == 0 else ("" if p.stock is None else str(p.stock)),
                f"⭐ {rating.average:.1f} ({rating.count})" if rating.count else "",
                "♥" if self.session.wishlist.is_in_wishlist(p.id) else "",
            )
        self._update_status()

    def refresh_cart(self) -> None:
        cart = self.session.cart
        panel = self.query_one("#cart_panel", Vertical)
        panel.display = cart.is_open
        table = self._table("#cart_table")
        table.clear()
        for line in cart.lines:
            table.add_row(
                line.product.name[:30],
                str(line.quantity),
                format_price(line.subtotal),
            )
        self.query_one("#cart_total", Static).update(
            f"Total: {format_price(cart.get_total_price())}"
        )
        self._update_status()

    def _update_status(self) -> None:
        cart = self.session.cart
        self.query_one("#status", Static).update(
            f"{len(self.visible)} products · "
            f"🛒 {cart.get_total_items()} · "
            f"♥ {self.session.wishlist.count}"
        )

    def _on_store_changed(self, store: PersistedStore) -> None:
        if not self.is_running:
            return
        if store is self.session.cart:
            self.refresh_cart()
        else:
            self.refresh_products()

    # ── Filter events ────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        """Update text and price criteria as the shopper types."""
        if event.input.id == "search_input":
            self.criteria = self.criteria.with_changes(search=event.value or None)
        elif event.input.id == "min_price_input":
            self.criteria = self.criteria.with_changes(min_price=_parse_bound(event.value))
        elif event.input.id == "max_price_input":
            self.criteria = self.criteria.with_changes(max_price=_parse_bound(event.value))
        else:
            return
        self.refresh_products()

    def on_select_changed(self, event: Select.Changed) -> None:
        """Update category, brand or sort from the dropdowns."""
        value = event.value if isinstance(event.value, str) else None
        if event.select.id == "category_select":
            self.criteria = self.criteria.with_changes(category=value)
        elif event.select.id == "brand_select":
            self.criteria = self.criteria.with_changes(brand=value)
        elif event.select.id == "sort_select":
            self.criteria = self.criteria.with_changes(sort=SortKey.parse(value))
        else:
            return
        self.refresh_products()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "clear_btn":
            self.action_clear_filters()

    # ── Actions ──────────────────────────────────────────

    def _selected_product(self) -> Product | None:
        row = self._table("#products_table").cursor_row
        if 0 <= row < len(self.visible):
            return self.visible[row]
        return None

    def action_add_to_cart(self) -> None:
        """Add one of the highlighted product to the cart."""
        product = self._selected_product()
        if product is None:
            return
        if product.stock == 0:
            self.notify(f"{product.name} is out of stock", severity="warning")
            return
        self.session.add_to_cart(product.id, 1)
        self.notify(f"Added {product.name} to cart")

    def action_toggle_wishlist(self) -> None:
        product = self._selected_product()
        if product is None:
            return
        added = self.session.wishlist.toggle_wishlist(product.id)
        self.notify(
            f"{'Added' if added else 'Removed'} {product.name} "
            f"{'to' if added else 'from'} wishlist"
        )

    def action_toggle_cart(self) -> None:
        self.session.cart.toggle_cart()

    def action_remove_line(self) -> None:
        """Remove the highlighted cart line."""
        cart = self.session.cart
        if not cart.is_open or not cart.lines:
            return
        row = self._table("#cart_table").cursor_row
        if 0 <= row < len(cart.lines):
            cart.remove_item(cart.lines[row].product_id)

    def action_clear_filters(self) -> None:
        """Reset every filter widget and the criteria."""
        self.criteria = self.criteria.cleared()
        self.query_one("#search_input", Input).value = ""
        self.query_one("#min_price_input", Input).value = ""
        self.query_one("#max_price_input", Input).value = ""
        self.query_one("#category_select", Select).clear()
        self.query_one("#brand_select", Select).clear()
        self.query_one("#sort_select", Select).value = SortKey.NAME_ASC.value
        self.refresh_products()
