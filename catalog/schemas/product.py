"""
Catalog API: Product Schemas
==============================

What:  Pydantic models for the product API contract.

    ProductInput  request body for POST/PUT /products
    Product       the record returned by repositories and the API

The raw category_id stays on Product for callers inside the process but is
excluded from serialization; clients see the nested `category` snapshot
instead, and only when the category still resolves.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.schemas.category import Category

INT64_MAX = 2**63 - 1


class ProductInput(BaseModel):
    """
    Body of a product create or update request.

    Strict: "100" is not a price and 5.0 is not a stock count. JSON integers
    are still accepted for price. NaN and Infinity, which Python's json
    module decodes, are rejected.
    """

    name: Optional[str] = Field(default=None, description="Unique product name")
    price: float = Field(
        default=0,
        allow_inf_nan=False,
        description="Unit price, must not be negative",
    )
    stock: int = Field(
        default=0,
        le=INT64_MAX,
        description="Units in stock, must not be negative",
    )
    category_id: Optional[int] = Field(
        default=None,
        ge=-INT64_MAX,
        le=INT64_MAX,
        description="Category to file the product under; omit or 0 for none",
    )

    model_config = ConfigDict(strict=True)

    @property
    def category_ref(self) -> int:
        """The category reference normalized to an int, 0 meaning none."""
        return self.category_id or 0


class Product(BaseModel):
    """A product with its read-time category snapshot."""

    id: int = Field(description="Store-assigned identifier")
    name: str
    price: float
    stock: int
    category_id: Optional[int] = Field(default=None, exclude=True)
    category: Optional[Category] = Field(
        default=None,
        description="Snapshot of the referenced category, absent when uncategorized",
    )

    model_config = {"frozen": True}
