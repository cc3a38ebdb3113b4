# storefront/filters/product_filter.py

"""Shop filtering, ordering and facet derivation over the catalog."""

import logging
import unicodedata
from collections.abc import Iterable

from storefront.models.filter_criteria import FilterCriteria, SortKey
from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


def _collation_key(name: str) -> tuple[str, str, str]:
    """Locale-style ordering key: accents and case only break ties."""
    folded = name.casefold()
    base = "".join(
        ch
        for ch in unicodedata.normalize("NFKD", folded)
        if not unicodedata.combining(ch)
    )
    return base, folded, name


def _equals_ignore_case(value: str, wanted: str) -> bool:
    return bool(value) and value.casefold() == wanted.casefold()


class ProductFilter:
    """Pure product filtering and sorting; holds no state."""

    @staticmethod
    def search(products: list[Product], query: str) -> list[Product]:
        """Keep products whose name, brand or category contains ``query``."""
        needle = query.casefold()
        return [
            p
            for p in products
            if any(
                needle in (field or "").casefold()
                for field in (p.name, p.brand, p.category)
            )
        ]

    @staticmethod
    def by_category(products: list[Product], category: str) -> list[Product]:
        return [p for p in products if _equals_ignore_case(p.category, category)]

    @staticmethod
    def by_brand(products: list[Product], brand: str) -> list[Product]:
        return [p for p in products if _equals_ignore_case(p.brand, brand)]

    @staticmethod
    def by_price_range(
        products: list[Product],
        min_price: float | None,
        max_price: float | None,
    ) -> list[Product]:
        """Inclusive price bounds; ``None`` leaves that side open."""
        kept = products
        if min_price is not None:
            kept = [p for p in kept if (p.price or 0) >= min_price]
        if max_price is not None:
            kept = [p for p in kept if (p.price or 0) <= max_price]
        return kept

    @staticmethod
    def sort(products: list[Product], key: SortKey) -> list[Product]:
        """Stable sort by the active key; ties keep their input order."""
        if key in (SortKey.PRICE_ASC, SortKey.PRICE_DESC):
            return sorted(
                products,
                key=lambda p: p.price or 0,
                reverse=key is SortKey.PRICE_DESC,
            )
        return sorted(
            products,
            key=lambda p: _collation_key(p.name or ""),
            reverse=key is SortKey.NAME_DESC,
        )

    @staticmethod
    def filter_and_sort(
        products: Iterable[Product],
        criteria: FilterCriteria | None = None,
    ) -> list[Product]:
        """Narrow the catalog by every set criterion, then sort.

        Stages run in a fixed order: search, category, price range,
        brand, sort.  The input collection is never modified.
        """
        criteria = criteria or FilterCriteria()
        result = list(products)
        total = len(result)

        if criteria.search:
            result = ProductFilter.search(result, criteria.search)
        if criteria.category:
            result = ProductFilter.by_category(result, criteria.category)
        result = ProductFilter.by_price_range(
            result, criteria.min_price, criteria.max_price
        )
        if criteria.brand:
            result = ProductFilter.by_brand(result, criteria.brand)

        result = ProductFilter.sort(result, criteria.sort)
        logger.debug(
            "Filtered %d -> %d products (sort=%s)",
            total,
            len(result),
            criteria.sort.value,
        )
        return result

    # ── Facets ───────────────────────────────────────────

    @staticmethod
    def categories(products: Iterable[Product]) -> list[str]:
        """Distinct non-empty categories across the whole catalog."""
        return sorted({p.category for p in products if p.category})

    @staticmethod
    def brands(products: Iterable[Product]) -> list[str]:
        """Distinct non-empty brands across the whole catalog."""
        return sorted({p.brand for p in products if p.brand})
