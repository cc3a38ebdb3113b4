# storefront/services/money.py

"""Price-with-discount arithmetic and quantity clamping."""

from storefront.config.settings import Settings
from storefront.models.product import Product


def original_price(price: float, discount: float | None) -> float:
    """Recover the pre-discount price from a discounted ``price``.

    A missing, zero or out-of-range discount leaves the price unchanged.
    """
    if discount is None or not 0 < discount < 100:
        return price
    return price / (1 - discount / 100)


def discounted_price(original: float, discount: float | None) -> float:
    """Apply a percentage discount to an original price."""
    if discount is None or not 0 < discount <= 100:
        return original
    return original * (1 - discount / 100)


def has_discount(product: Product) -> bool:
    """True when the product carries a positive discount."""
    return product.discount is not None and product.discount > 0


def clamp_quantity(quantity: int, stock: int | None) -> int:
    """Clamp a requested quantity to the available stock.

    Unknown stock (``None``) leaves the quantity as requested.  A result
    of zero or less means the product cannot be held in the cart.
    """
    if stock is None:
        return quantity
    return min(quantity, max(stock, 0))


def line_total(price: float, quantity: int) -> float:
    return price * quantity


def format_price(amount: float, currency: str | None = None) -> str:
    """Format an amount for display, e.g. ``LKR 1,250.00``."""
    return f"{currency or Settings.CURRENCY} {amount:,.2f}"
