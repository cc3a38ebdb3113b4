# storefront/models/filter_criteria.py

"""Shop filter criteria and their query-string form."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum

logger = logging.getLogger("storefront.filters")


class SortKey(Enum):
    """Supported product orderings; exactly one is active at a time."""

    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"

    @classmethod
    def parse(cls, raw: str | None) -> "SortKey":
        """Map a raw sort value to a key, falling back to ``NAME_ASC``."""
        if raw:
            for key in cls:
                if key.value == raw.strip().lower():
                    return key
            logger.debug("Unknown sort key '%s', using default", raw)
        return cls.NAME_ASC


def _parse_price(raw: str | None) -> float | None:
    """Parse a price bound; blank or malformed values mean unset."""
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        logger.debug("Ignoring malformed price bound '%s'", raw)
        return None


def _format_price(value: float) -> str:
    return str(int(value)) if value == int(value) else str(value)


@dataclass(frozen=True)
class FilterCriteria:
    """Independent product predicates (ANDed) plus one sort key.

    Empty strings count as unset for the text criteria; a price bound
    of ``0`` is a real bound.
    """

    category: str | None = None
    brand: str | None = None
    search: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    sort: SortKey = SortKey.NAME_ASC

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "FilterCriteria":
        """Build criteria from shop query-string parameters."""
        return cls(
            category=params.get("category") or None,
            brand=params.get("brand") or None,
            search=params.get("search") or None,
            min_price=_parse_price(params.get("minPrice")),
            max_price=_parse_price(params.get("maxPrice")),
            sort=SortKey.parse(params.get("sort")),
        )

    def to_params(self) -> dict[str, str]:
        """Serialise the criteria that are set to query-string parameters."""
        params: dict[str, str] = {}
        if self.category:
            params["category"] = self.category
        if self.brand:
            params["brand"] = self.brand
        if self.search:
            params["search"] = self.search
        if self.min_price is not None:
            params["minPrice"] = _format_price(self.min_price)
        if self.max_price is not None:
            params["maxPrice"] = _format_price(self.max_price)
        params["sort"] = self.sort.value
        return params

    def with_changes(self, **changes: object) -> "FilterCriteria":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]

    def cleared(self) -> "FilterCriteria":
        """Reset every criterion back to the default ordering."""
        return FilterCriteria()
