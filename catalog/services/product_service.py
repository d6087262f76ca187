"""
Catalog API: Product Service
==============================

What:  Business logic for products.
Who:   Called by catalog.routes.products.

Validation order for create and update:
    name required → price ≥ 0 → stock ≥ 0 → repository
The repository then checks name uniqueness and category existence.

Why the category filter is passed through unchecked: an unknown category
simply has no products, so `?category_id=999` is an empty list, not a 404.
"""

import logging
from typing import List, Optional

from catalog.repositories.base import ProductRepository
from catalog.schemas.product import Product, ProductInput
from catalog.services.validation import (
    require_name,
    require_non_negative_price,
    require_non_negative_stock,
)

logger = logging.getLogger(__name__)


class ProductService:
    """Product operations on top of a ProductRepository."""

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    @staticmethod
    def _validate(payload: ProductInput) -> str:
        # Why here and not in the repository: a rejected body must never
        # reach the store, whichever backend is active
        name = require_name(payload.name)
        require_non_negative_price(payload.price)
        require_non_negative_stock(payload.stock)
        return name

    async def list_products(self, category_id: Optional[int] = None) -> List[Product]:
        """All products, or only those filed under `category_id` when given."""
        if category_id is not None:
            return await self.repository.list_by_category(category_id)
        return await self.repository.list_all()

    async def get_product(self, product_id: int) -> Product:
        return await self.repository.get(product_id)

    async def create_product(self, payload: ProductInput) -> Product:
        """
        Create a product.

        Raises:
            ValidationError: Missing name, negative price or negative stock
            NameConflictError: Name already used
            CategoryReferenceError: category_id given but unknown
        """
        name = self._validate(payload)
        return await self.repository.create(
            name=name,
            price=payload.price,
            stock=payload.stock,
            category_id=payload.category_ref,
        )

    async def update_product(self, product_id: int, payload: ProductInput) -> Product:
        """
        Replace every mutable field of a product.

        A missing or zero category_id clears the product's category.
        """
        name = self._validate(payload)
        return await self.repository.update(
            product_id,
            name=name,
            price=payload.price,
            stock=payload.stock,
            category_id=payload.category_ref,
        )

    async def delete_product(self, product_id: int) -> None:
        await self.repository.delete(product_id)
        logger.debug("Product %d removed", product_id)
