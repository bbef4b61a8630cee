"""Product discount pricing."""

from enum import Enum


class DiscountKind(str, Enum):
    """Supported discount kinds."""

    PERCENTAGE = "Percentage"
    FIXED = "Fixed"


class Badge(str, Enum):
    """Merchandising badges a product may carry."""

    NEW = "New"
    SALE = "Sale"
    BEST_SELLER = "Best Seller"


def price_after_discount(price: float, kind: str, amount: float) -> float:
    """Apply a discount to a price.

    Percentage discounts take ``amount`` percent off, fixed discounts
    subtract ``amount``. Any other kind leaves the price untouched.

    Args:
        price: List price.
        kind: Discount kind name.
        amount: Discount amount.

    Returns:
        Discounted price rounded to cents.
    """
    if kind == DiscountKind.PERCENTAGE.value:
        discounted = price - price * amount / 100
    elif kind == DiscountKind.FIXED.value:
        discounted = price - amount
    else:
        discounted = price
    return round(discounted, 2)
