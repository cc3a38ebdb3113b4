# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import unittest
from unittest.mock import patch

from textual.containers import Vertical
from textual.widgets import DataTable, Input, Static

from factories import make_product

from storefront.services.catalog import CatalogError, InMemoryCatalog
from storefront.storage.backends import MemoryStorage
from storefront.ui.app import StorefrontApp


def _app() -> StorefrontApp:
    catalog = InMemoryCatalog(
        [
            make_product("w1", 300.0, name="Diver", brand="Seiko", category="Watches", stock=2),
            make_product("w2", 120.0, name="Field", brand="Casio", category="Watches"),
            make_product("r1", 80.0, name="Zircon Band", brand="Casio", category="Jewelry", stock=0),
        ]
    )
    return StorefrontApp(catalog=catalog, backend=MemoryStorage())


class TestStorefrontApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    async def test_app_composes_without_crash(self) -> None:
        """The app starts and renders the shop table with every product."""
        app = _app()
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input)
            app.query_one("#status", Static)
            table = app.query_one("#products_table", DataTable)
            self.assertEqual(table.row_count, 3)
            self.assertFalse(app.query_one("#cart_panel", Vertical).display)
            await pilot.pause()

    async def test_search_narrows_table(self) -> None:
        """Typing in the search box narrows the table."""
        app = _app()
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "diver"
            await pilot.pause()
            self.assertEqual(app.criteria.search, "diver")
            self.assertEqual([p.id for p in app.visible], ["w1"])
            self.assertEqual(app.query_one("#products_table", DataTable).row_count, 1)

    async def test_price_bounds_filter(self) -> None:
        """Price inputs set bounds; unparsable text leaves a bound unset."""
        app = _app()
        async with app.run_test() as pilot:
            app.query_one("#min_price_input", Input).value = "100"
            app.query_one("#max_price_input", Input).value = "not a number"
            await pilot.pause()
            self.assertEqual(app.criteria.min_price, 100.0)
            self.assertIsNone(app.criteria.max_price)
            self.assertEqual([p.id for p in app.visible], ["w1", "w2"])

    async def test_clear_filters(self) -> None:
        """Clear Filters resets criteria and shows every product."""
        app = _app()
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "field"
            await pilot.pause()
            app.action_clear_filters()
            await pilot.pause()
            self.assertIsNone(app.criteria.search)
            self.assertEqual(len(app.visible), 3)

    async def test_add_to_cart_key_opens_panel(self) -> None:
        """Pressing 'a' on the highlighted row adds it and shows the cart."""
        app = _app()
        async with app.run_test() as pilot:
            app.query_one("#products_table", DataTable).focus()
            await pilot.press("a")
            await pilot.pause()
            self.assertEqual(app.session.cart.get_total_items(), 1)
            self.assertTrue(app.query_one("#cart_panel", Vertical).display)
            self.assertEqual(app.query_one("#cart_table", DataTable).row_count, 1)

    async def test_out_of_stock_not_added(self) -> None:
        """An out-of-stock row is never added to the cart."""
        app = _app()
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "zircon"
            await pilot.pause()
            app.action_add_to_cart()
            await pilot.pause()
            self.assertEqual(len(app.session.cart), 0)

    async def test_toggle_wishlist_and_remove_line(self) -> None:
        """Wishlist toggle and cart line removal act on the highlighted rows."""
        app = _app()
        async with app.run_test() as pilot:
            app.action_toggle_wishlist()
            await pilot.pause()
            self.assertEqual(app.session.wishlist.count, 1)

            app.action_add_to_cart()
            app.action_remove_line()
            await pilot.pause()
            self.assertEqual(len(app.session.cart), 0)

    async def test_catalog_error_starts_empty(self) -> None:
        """A failing catalog load starts the app with no products."""
        with patch(
            "storefront.ui.app.load_catalog", side_effect=CatalogError("offline")
        ):
            app = StorefrontApp(backend=MemoryStorage())
        async with app.run_test(notifications=True) as pilot:
            await pilot.pause()
            self.assertEqual(app.visible, [])
            self.assertEqual(app._load_error, "offline")


if __name__ == "__main__":
    unittest.main()
