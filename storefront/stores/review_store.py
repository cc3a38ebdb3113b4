# storefront/stores/review_store.py

"""Reviews written by this shopper, kept until they are deleted."""

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from storefront.config.settings import Settings
from storefront.models.review import Review
from storefront.services.catalog import ReviewSource, coerce_review, review_to_record
from storefront.services.review_aggregator import ReviewAggregator
from storefront.storage.persistence import PersistenceWriter
from storefront.stores.base_store import PersistedStore


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReviewStore(PersistedStore, ReviewSource):
    """Persisted list of submitted reviews, in submission order.

    Records use the same keys as the catalog document, so a stored review
    reads back through :func:`coerce_review` like a catalog one.
    """

    _area = "reviews"

    def __init__(
        self,
        persistence: PersistenceWriter | None = None,
        storage_key: str = Settings.REVIEW_STORAGE_KEY,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        super().__init__(storage_key, persistence)
        self._reviews: list[Review] = []
        self._clock = clock
        self._hydrate()

    def _reset_state(self) -> None:
        self._reviews = []

    def _dump_state(self) -> dict[str, Any]:
        return {"items": [review_to_record(r) for r in self._reviews]}

    def _load_state(self, state: dict[str, Any]) -> None:
        reviews: list[Review] = []
        for record in state.get("items", []):
            review = coerce_review(record) if isinstance(record, dict) else None
            if review is None:
                self.logger.warning("Skipping invalid review record %r", record)
                continue
            reviews.append(review)
        self._reviews = reviews

    @property
    def reviews(self) -> list[Review]:
        return list(self._reviews)

    def get_by_product(self, product_id: str) -> list[Review]:
        return ReviewAggregator.newest_first(
            [r for r in self._reviews if r.product_id == product_id]
        )

    def add_review(
        self,
        product_id: str,
        user_id: str,
        user_name: str,
        rating: int,
        comment: str,
        user_email: str = "",
    ) -> tuple[Review | None, list[str]]:
        """Validate and store a review.

        Returns the stored review (or ``None``) and the validation problems.
        """
        problems = ReviewAggregator.validate_review(rating, comment)
        if problems:
            self.logger.info(
                "Rejected review for %s: %s", product_id, "; ".join(problems)
            )
            return None, problems

        review = Review(
            id=uuid.uuid4().hex,
            product_id=product_id,
            user_id=user_id,
            user_name=user_name or "User",
            user_email=user_email,
            rating=rating,
            comment=comment.strip(),
            created_at=self._clock(),
        )
        self._reviews.append(review)
        self.logger.info("Added review %s for product %s", review.id, product_id)
        self._commit()
        return review, []

    def delete_review(self, review_id: str) -> bool:
        """Remove a review by id; returns whether one was removed."""
        kept = [r for r in self._reviews if r.id != review_id]
        if len(kept) == len(self._reviews):
            return False
        self._reviews = kept
        self.logger.info("Deleted review %s", review_id)
        self._commit()
        return True
