# storefront/models/product.py

"""Product data model shared by the catalog, cart and filter engine."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from typing import Any

_NUMBER = (int, float)


@dataclass
class Product:
    """A single catalog product.

    ``price`` is the selling price with any discount already applied.
    ``stock`` is ``None`` when the catalog does not report stock.
    """

    id: str
    name: str
    price: float
    brand: str = ""
    category: str = ""
    stock: int | None = None
    discount: float | None = None
    image: str = ""
    images: list[str] = field(default_factory=lambda: list[str]())
    description: str = ""
    features: list[str] = field(default_factory=lambda: list[str]())
    specifications: dict[str, str] = field(
        default_factory=lambda: dict[str, str]()
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (used for cart snapshots)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        """Rebuild a product written by :meth:`to_dict`, value for value.

        Unlike catalog ingestion nothing is trimmed or repaired; a field
        of the wrong type raises ``TypeError``.
        """
        values = {f.name: data[f.name] for f in fields(cls) if f.name in data}
        product = cls(**values)
        product._check_types()
        return product

    def _check_types(self) -> None:
        for name in ("id", "name", "brand", "category", "image", "description"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"Product.{name} must be a string")
        if not self.id:
            raise TypeError("Product.id must not be empty")
        if not isinstance(self.price, _NUMBER) or isinstance(self.price, bool):
            raise TypeError("Product.price must be a number")
        if self.stock is not None and (
            not isinstance(self.stock, int) or isinstance(self.stock, bool)
        ):
            raise TypeError("Product.stock must be an integer or null")
        if self.discount is not None and (
            not isinstance(self.discount, _NUMBER) or isinstance(self.discount, bool)
        ):
            raise TypeError("Product.discount must be a number or null")
        for name in ("images", "features"):
            value = getattr(self, name)
            if not isinstance(value, list) or not all(
                isinstance(item, str) for item in value
            ):
                raise TypeError(f"Product.{name} must be a list of strings")
        if not isinstance(self.specifications, dict):
            raise TypeError("Product.specifications must be an object")
