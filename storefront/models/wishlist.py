# storefront/models/wishlist.py

"""Wishlist entry model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WishlistItem:
    """A liked product and the ISO-8601 time it was added."""

    product_id: str
    added_at: str
