# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from storefront.config.settings import Settings
from storefront.models.filter_criteria import SortKey


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_storage_keys_are_distinct(self) -> None:
        """Cart, wishlist and reviews persist under their own keys."""
        self.assertEqual(Settings.CART_STORAGE_KEY, "cart-storage")
        self.assertEqual(Settings.WISHLIST_STORAGE_KEY, "wishlist-storage")
        self.assertEqual(Settings.REVIEW_STORAGE_KEY, "review-storage")

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_persist_timeout_positive(self) -> None:
        """PERSIST_TIMEOUT must be positive."""
        self.assertGreater(Settings.PERSIST_TIMEOUT, 0)

    def test_rating_bounds(self) -> None:
        """Ratings run from 1 to 5 inclusive."""
        self.assertEqual((Settings.MIN_RATING, Settings.MAX_RATING), (1, 5))
        self.assertEqual(Settings.MIN_REVIEW_LENGTH, 10)

    def test_default_sort_is_valid_key(self) -> None:
        """DEFAULT_SORT parses to a real sort key."""
        self.assertEqual(SortKey.parse(Settings.DEFAULT_SORT), SortKey.NAME_ASC)

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.DATA_DIR, Path)
        self.assertIsInstance(Settings.CATALOG_PATH, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_catalog_path_exists(self) -> None:
        """The bundled catalog.json file must exist on disk."""
        self.assertTrue(Settings.CATALOG_PATH.exists())

    def test_impersonate_browser_is_string(self) -> None:
        """IMPERSONATE_BROWSER must be a non-empty string."""
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(Settings.IMPERSONATE_BROWSER)

    def test_default_headers_accept_json(self) -> None:
        """Catalog requests ask for JSON."""
        self.assertEqual(Settings.DEFAULT_HEADERS["Accept"], "application/json")


if __name__ == "__main__":
    unittest.main()
