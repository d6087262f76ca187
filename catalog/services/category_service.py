"""
Catalog API: Category Service
===============================

What:  Business logic for categories: validate input, delegate to the
       repository.
Who:   Called by catalog.routes.categories.

The service only knows the abstract CategoryRepository; which store sits
behind it is decided once in create_app().
"""

import logging
from typing import List

from catalog.repositories.base import CategoryRepository
from catalog.schemas.category import Category, CategoryInput
from catalog.services.validation import require_name

logger = logging.getLogger(__name__)


class CategoryService:
    """Category operations on top of a CategoryRepository."""

    def __init__(self, repository: CategoryRepository):
        self.repository = repository

    async def list_categories(self) -> List[Category]:
        return await self.repository.list_all()

    async def get_category(self, category_id: int) -> Category:
        return await self.repository.get(category_id)

    async def create_category(self, payload: CategoryInput) -> Category:
        """
        Create a category.

        Raises:
            ValidationError: Name missing or blank (no store access happens)
            NameConflictError: Name already used
        """
        name = require_name(payload.name)
        # Why "": a missing description is stored and returned as an empty
        # string, never null, in both stores
        return await self.repository.create(
            name=name, description=payload.description or ""
        )

    async def update_category(self, category_id: int, payload: CategoryInput) -> Category:
        """
        Replace a category's name and description.

        Raises:
            ValidationError: Name missing or blank
            NotFoundError: Unknown id
            NameConflictError: Name used by another category
        """
        name = require_name(payload.name)
        return await self.repository.update(
            category_id, name=name, description=payload.description or ""
        )

    async def delete_category(self, category_id: int) -> None:
        await self.repository.delete(category_id)
        logger.debug("Category %d removed", category_id)
