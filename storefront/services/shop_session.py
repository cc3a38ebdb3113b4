# storefront/services/shop_session.py

"""Wires a catalog, the persisted stores and the pure views together."""

import logging
from dataclasses import dataclass, field

from storefront.config.settings import Settings
from storefront.filters.product_filter import ProductFilter
from storefront.models.filter_criteria import FilterCriteria
from storefront.models.product import Product
from storefront.models.review import RatingSummary, Review
from storefront.services.catalog import (
    HttpCatalog,
    InMemoryCatalog,
    load_json_catalog,
)
from storefront.services.review_aggregator import ReviewAggregator
from storefront.storage.backends import StorageBackend
from storefront.storage.persistence import PersistenceWriter, create_backend
from storefront.stores.cart_store import CartStore
from storefront.stores.review_store import ReviewStore
from storefront.stores.wishlist_store import WishlistStore

logger = logging.getLogger("storefront.session")


@dataclass
class ShopView:
    """Everything the shop page renders for one set of criteria."""

    criteria: FilterCriteria
    products: list[Product] = field(default_factory=lambda: list[Product]())
    categories: list[str] = field(default_factory=lambda: list[str]())
    brands: list[str] = field(default_factory=lambda: list[str]())
    total_in_catalog: int = 0


def load_catalog() -> InMemoryCatalog:
    """Load from ``CATALOG_URL`` when configured, else the JSON file."""
    if Settings.CATALOG_URL:
        return HttpCatalog(Settings.CATALOG_URL).fetch()
    return load_json_catalog()


class ShopSession:
    """One shopper's session: catalog access, cart, wishlist and own reviews."""

    def __init__(
        self,
        catalog: InMemoryCatalog,
        backend: StorageBackend | None = None,
    ) -> None:
        self.catalog = catalog
        self._writer = PersistenceWriter(backend or create_backend())
        self.cart = CartStore(self._writer)
        self.wishlist = WishlistStore(self._writer)
        self.reviews = ReviewStore(self._writer)
        logger.debug(
            "Session ready: %d cart lines, %d wishlist items",
            len(self.cart),
            self.wishlist.count,
        )

    def shop_view(self, criteria: FilterCriteria | None = None) -> ShopView:
        """Filter and sort the catalog; facets come from the full catalog."""
        criteria = criteria or FilterCriteria()
        products = self.catalog.get_all()
        return ShopView(
            criteria=criteria,
            products=ProductFilter.filter_and_sort(products, criteria),
            categories=ProductFilter.categories(products),
            brands=ProductFilter.brands(products),
            total_in_catalog=len(products),
        )

    def reviews_for(self, product_id: str) -> list[Review]:
        """Catalog reviews plus the shopper's own, newest first."""
        return ReviewAggregator.newest_first(
            self.catalog.get_by_product(product_id)
            + self.reviews.get_by_product(product_id)
        )

    def rating_for(self, product_id: str) -> RatingSummary:
        return ReviewAggregator.get_average_rating(self.reviews_for(product_id))

    def submit_review(
        self,
        product_id: str,
        user_id: str,
        user_name: str,
        rating: int,
        comment: str,
        user_email: str = "",
    ) -> tuple[Review | None, list[str]]:
        """Store a review for a catalog product.

        Returns the stored review (or ``None``) and the validation problems.
        """
        if self.catalog.get_by_id(product_id) is None:
            return None, [f"Unknown product '{product_id}'"]
        return self.reviews.add_review(
            product_id, user_id, user_name, rating, comment, user_email
        )

    def wishlist_products(self) -> list[Product]:
        return self.wishlist.resolve(self.catalog.get_all())

    def add_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        """Add a catalog product to the cart and open it.

        Returns ``False`` when the id is not in the catalog.  An
        out-of-stock product adds nothing and does not open the cart.
        """
        product = self.catalog.get_by_id(product_id)
        if product is None:
            logger.info("Add to cart ignored, unknown product '%s'", product_id)
            return False
        self.cart.add_item(product, quantity)
        if product_id in self.cart:
            self.cart.open_cart()
        return True

    def close(self) -> None:
        """Flush pending writes and release the storage backend."""
        self._writer.close()
