# storefront/models/review.py

"""Review and derived rating summary models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Review:
    """A shopper's review of a single product."""

    id: str
    product_id: str
    user_id: str
    user_name: str
    rating: int
    comment: str
    created_at: datetime
    user_email: str = ""
    updated_at: datetime | None = None


@dataclass(frozen=True)
class RatingSummary:
    """Average rating and review count, derived and never stored."""

    average: float
    count: int
