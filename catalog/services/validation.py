"""
Catalog API: Input Validation
===============================

Business-rule checks shared by create and update of both resources. They
run after the body has been decoded and before any store access, in a fixed
order: name, price, stock. The first failing check raises; later ones are
not evaluated.
"""

from typing import Optional

from catalog.exceptions import ValidationError


def require_name(name: Optional[str]) -> str:
    """Return the name, or raise when it is missing or blank."""
    if name is None or not name.strip():
        raise ValidationError(message="Name is required", field="name")
    return name


def require_non_negative_price(price: float) -> float:
    if price < 0:
        raise ValidationError(message="Price cannot be negative", field="price")
    return price


def require_non_negative_stock(stock: int) -> int:
    if stock < 0:
        raise ValidationError(message="Stock cannot be negative", field="stock")
    return stock
