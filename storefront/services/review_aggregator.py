# storefront/services/review_aggregator.py

"""Rating statistics and ordering over a product's reviews."""

import logging
from collections.abc import Sequence

from storefront.config.settings import Settings
from storefront.models.review import RatingSummary, Review

logger = logging.getLogger("storefront.reviews")


class ReviewAggregator:
    """Pure functions over review collections; no retained state."""

    @staticmethod
    def get_average_rating(reviews: Sequence[Review]) -> RatingSummary:
        """Arithmetic mean of the ratings and the review count.

        An empty collection yields ``RatingSummary(0, 0)``.  The average
        is not rounded; formatting is left to the caller.
        """
        count = len(reviews)
        if count == 0:
            return RatingSummary(average=0, count=0)
        total = sum(review.rating for review in reviews)
        return RatingSummary(average=total / count, count=count)

    @staticmethod
    def newest_first(reviews: Sequence[Review]) -> list[Review]:
        """Reviews ordered by creation time, most recent first."""
        return sorted(reviews, key=lambda r: r.created_at, reverse=True)

    @staticmethod
    def validate_review(rating: int, comment: str) -> list[str]:
        """Check a review draft before submission.

        Returns a list of problems; an empty list means the draft is valid.
        """
        problems: list[str] = []
        if not Settings.MIN_RATING <= rating <= Settings.MAX_RATING:
            problems.append(
                f"Rating must be between {Settings.MIN_RATING} "
                f"and {Settings.MAX_RATING}"
            )
        if len(comment.strip()) < Settings.MIN_REVIEW_LENGTH:
            problems.append(
                f"Review must be at least {Settings.MIN_REVIEW_LENGTH} "
                "characters long"
            )
        if problems:
            logger.debug("Rejected review draft: %s", "; ".join(problems))
        return problems
