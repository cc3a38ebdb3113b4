# storefront/filters/product_validator.py

"""Product ingestion: coerce raw catalog records into typed products."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


def _as_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_price(value: Any) -> float:
    """Coerce a raw price to a non-negative float (``0.0`` if unusable)."""
    if isinstance(value, bool):
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    if price != price or price < 0:  # NaN or negative
        return 0.0
    return price


def _as_stock(value: Any) -> int | None:
    """Coerce raw stock; unknown or malformed stock becomes ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        stock = int(value)
    except (TypeError, ValueError):
        return None
    return max(stock, 0)


def _as_discount(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        discount = float(value)
    except (TypeError, ValueError):
        return None
    return min(max(discount, 0.0), 100.0)


class ProductValidator:
    """Validate raw product records and drop those without an identity."""

    @staticmethod
    def coerce(record: Mapping[str, Any]) -> Product | None:
        """Build a :class:`Product` from one raw record.

        Returns ``None`` when the record has no usable identifier.
        """
        raw_id = record.get("id")
        product_id = str(raw_id).strip() if raw_id is not None else ""
        if not product_id:
            return None

        image = _as_str(record.get("image"))
        raw_images = record.get("images")
        if isinstance(raw_images, list) and raw_images:
            images = [str(i) for i in raw_images if i]
        else:
            images = [image] if image else []

        raw_features = record.get("features")
        features = (
            [str(f) for f in raw_features]
            if isinstance(raw_features, list)
            else []
        )
        raw_specs = record.get("specifications")
        specifications = (
            {str(k): str(v) for k, v in raw_specs.items()}
            if isinstance(raw_specs, Mapping)
            else {}
        )

        return Product(
            id=product_id,
            name=_as_str(record.get("name")),
            price=_as_price(record.get("price")),
            brand=_as_str(record.get("brand")),
            category=_as_str(record.get("category")),
            stock=_as_stock(record.get("stock")),
            discount=_as_discount(record.get("discount")),
            image=image or (images[0] if images else ""),
            images=images,
            description=_as_str(record.get("description")),
            features=features,
            specifications=specifications,
        )

    @staticmethod
    def validate(
        records: Iterable[Mapping[str, Any]],
    ) -> tuple[list[Product], int]:
        """Coerce every record, dropping those without an id.

        Returns the typed products and the count of dropped records.
        """
        valid: list[Product] = []
        dropped = 0

        for record in records:
            if not isinstance(record, Mapping):
                logger.debug("Dropped non-mapping product record: %r", record)
                dropped += 1
                continue
            product = ProductValidator.coerce(record)
            if product is None:
                logger.debug(
                    "Dropped product record without id (name=%s)",
                    record.get("name"),
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid product records",
                dropped,
            )

        return valid, dropped
