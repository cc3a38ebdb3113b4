# storefront/models/cart.py

"""Cart line model."""

from dataclasses import dataclass

from storefront.models.product import Product


@dataclass
class CartLine:
    """One cart entry: a product snapshot and a positive quantity."""

    product: Product
    quantity: int

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity


@dataclass
class OrderSummary:
    """Lines and totals captured at checkout."""

    lines: list[CartLine]
    total_items: int
    total_price: float
