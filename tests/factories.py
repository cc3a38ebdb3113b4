# tests/factories.py

"""Small builders for products and reviews used across tests."""

from datetime import datetime, timezone

from storefront.models.product import Product
from storefront.models.review import Review


def make_product(
    product_id: str,
    price: float = 10.0,
    stock: int | None = None,
    name: str | None = None,
    brand: str = "",
    category: str = "",
    discount: float | None = None,
) -> Product:
    """Create a Product with sensible defaults."""
    return Product(
        id=product_id,
        name=name if name is not None else product_id.upper(),
        price=price,
        brand=brand,
        category=category,
        stock=stock,
        discount=discount,
    )


def make_review(
    rating: int,
    product_id: str = "p1",
    created_at: datetime | None = None,
    review_id: str = "r",
) -> Review:
    """Create a Review with the given rating."""
    return Review(
        id=review_id,
        product_id=product_id,
        user_id="u1",
        user_name="Tester",
        rating=rating,
        comment="A perfectly fine product.",
        created_at=created_at or datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
