# storefront/services/catalog.py

"""Product and review sources consumed by the shop.

The catalog document is the same whether it comes from disk or over
HTTP::

    {"products": [{...}, ...], "reviews": [{...}, ...]}

Raw records are coerced into typed models here, at ingestion, so the
filter engine and stores only ever see well-formed products.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings
from storefront.filters.product_validator import ProductValidator
from storefront.models.product import Product
from storefront.models.review import Review
from storefront.services.review_aggregator import ReviewAggregator

logger = logging.getLogger("storefront.catalog")


class CatalogError(Exception):
    """The catalog document could not be fetched or decoded."""


class ProductSource(ABC):
    """Read access to the product catalog."""

    @abstractmethod
    def get_all(self) -> list[Product]:
        """Return every product in catalog order."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return one product, or ``None`` when it does not exist."""


class ReviewSource(ABC):
    """Read access to product reviews."""

    @abstractmethod
    def get_by_product(self, product_id: str) -> list[Review]:
        """Return the reviews of one product, newest first."""


def _parse_timestamp(raw: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(raw, str) and raw.strip():
        try:
            parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparsable review timestamp '%s'", raw)
        else:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return datetime.now(timezone.utc)


def coerce_review(record: Mapping[str, Any]) -> Review | None:
    """Build a :class:`Review` from a raw record, or ``None`` if unusable."""
    product_id = str(record.get("productId") or "").strip()
    try:
        rating = int(record.get("rating"))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not product_id or not Settings.MIN_RATING <= rating <= Settings.MAX_RATING:
        return None
    return Review(
        id=str(record.get("id") or uuid.uuid4().hex),
        product_id=product_id,
        user_id=str(record.get("userId") or ""),
        user_name=str(record.get("userName") or "User"),
        user_email=str(record.get("userEmail") or ""),
        rating=rating,
        comment=str(record.get("comment") or ""),
        created_at=_parse_timestamp(record.get("createdAt")),
        updated_at=(
            _parse_timestamp(record["updatedAt"])
            if record.get("updatedAt")
            else None
        ),
    )


def review_to_record(review: Review) -> dict[str, Any]:
    """Inverse of :func:`coerce_review`, in catalog document keys."""
    return {
        "id": review.id,
        "productId": review.product_id,
        "userId": review.user_id,
        "userName": review.user_name,
        "userEmail": review.user_email,
        "rating": review.rating,
        "comment": review.comment,
        "createdAt": review.created_at.isoformat(),
        "updatedAt": review.updated_at.isoformat() if review.updated_at else None,
    }


class InMemoryCatalog(ProductSource, ReviewSource):
    """Products and reviews held in memory."""

    def __init__(
        self,
        products: Iterable[Product] = (),
        reviews: Iterable[Review] = (),
    ) -> None:
        self._products: dict[str, Product] = {}
        for product in products:
            if product.id in self._products:
                logger.warning("Duplicate product id '%s' ignored", product.id)
                continue
            self._products[product.id] = product
        self._reviews: list[Review] = list(reviews)

    @classmethod
    def from_document(cls, document: Any) -> "InMemoryCatalog":
        """Build a catalog from a decoded ``{"products", "reviews"}`` document."""
        if not isinstance(document, Mapping):
            raise CatalogError("Catalog document must be a JSON object")

        raw_products = document.get("products") or []
        raw_reviews = document.get("reviews") or []
        if not isinstance(raw_products, list) or not isinstance(raw_reviews, list):
            raise CatalogError("'products' and 'reviews' must be lists")

        products, dropped = ProductValidator.validate(raw_products)
        reviews: list[Review] = []
        for record in raw_reviews:
            review = coerce_review(record) if isinstance(record, Mapping) else None
            if review is None:
                dropped += 1
                continue
            reviews.append(review)

        logger.info(
            "Loaded catalog: %d products, %d reviews (%d records dropped)",
            len(products),
            len(reviews),
            dropped,
        )
        return cls(products, reviews)

    # ── ProductSource ────────────────────────────────────

    def get_all(self) -> list[Product]:
        return list(self._products.values())

    def get_by_id(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    # ── ReviewSource ─────────────────────────────────────

    def get_by_product(self, product_id: str) -> list[Review]:
        return ReviewAggregator.newest_first(
            [r for r in self._reviews if r.product_id == product_id]
        )


def load_json_catalog(path: Path | None = None) -> InMemoryCatalog:
    """Load the catalog document from a JSON file."""
    catalog_path = path or Settings.CATALOG_PATH
    try:
        with open(catalog_path, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as exc:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {exc}") from exc
    logger.debug("Read catalog document from %s", catalog_path)
    return InMemoryCatalog.from_document(document)


class HttpCatalog:
    """Fetches the catalog document from a remote endpoint.

    A single GET per fetch: no retries or backoff.
    """

    def __init__(self, url: str | None = None) -> None:
        self.url = url or Settings.CATALOG_URL
        self.session = curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        )

    def fetch(self) -> InMemoryCatalog:
        """Download and decode the catalog; raises :class:`CatalogError`."""
        if not self.url:
            raise CatalogError("No catalog URL configured")
        try:
            resp = self.session.get(
                self.url,
                headers=Settings.DEFAULT_HEADERS,
                timeout=Settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            logger.warning("Catalog request to %s failed: %s", self.url, exc)
            raise CatalogError(f"Request to {self.url} failed: {exc}") from exc

        if resp.status_code != 200:
            raise CatalogError(f"HTTP {resp.status_code} from {self.url}")
        try:
            document = resp.json()
        except ValueError as exc:
            raise CatalogError(f"Invalid JSON from {self.url}") from exc

        logger.info("Fetched catalog from %s", self.url)
        return InMemoryCatalog.from_document(document)
