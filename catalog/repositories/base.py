"""
Catalog API: Abstract Repository Interfaces
=============================================

What:  The storage contract both resources are written against.
How:   Concrete stores inherit from these classes:
         - catalog.repositories.memory: process-local maps behind one lock
         - catalog.repositories.sql: async SQLAlchemy against PostgreSQL/SQLite
       create_app() picks one pair from Settings.store_backend; services and
       routes only ever see these abstract types.

Contract shared by every implementation:
    - Identifiers are assigned by the store, strictly increasing, never reused.
    - Lists are ordered by id ascending and are [] (never None) when empty.
    - Missing ids raise NotFoundError, duplicate names raise
      NameConflictError, a product pointing at a missing category raises
      CategoryReferenceError. Any other storage failure raises DatabaseError.
    - Updates re-check name uniqueness against the other rows.
    - A category_id of 0 means "no category" and is stored as absent.
"""

from abc import ABC, abstractmethod
from typing import List

from catalog.schemas.category import Category
from catalog.schemas.product import Product


class CategoryRepository(ABC):
    """Storage contract for categories."""

    @abstractmethod
    async def list_all(self) -> List[Category]:
        """All categories, id ascending."""
        ...

    @abstractmethod
    async def get(self, category_id: int) -> Category:
        """
        Fetch one category.

        Raises:
            NotFoundError: No category has this id.
        """
        ...

    @abstractmethod
    async def create(self, *, name: str, description: str) -> Category:
        """
        Persist a new category and return it with its assigned id.

        Raises:
            NameConflictError: Another category already uses `name`.
        """
        ...

    @abstractmethod
    async def update(self, category_id: int, *, name: str, description: str) -> Category:
        """
        Replace name and description; the id never changes.

        Raises:
            NotFoundError: No category has this id.
            NameConflictError: A different category already uses `name`.
        """
        ...

    @abstractmethod
    async def delete(self, category_id: int) -> None:
        """
        Remove a category.

        Products that referenced it lose their category in both stores: they
        are no longer embedded with it nor listed under its id.

        Raises:
            NotFoundError: No category has this id.
        """
        ...


class ProductRepository(ABC):
    """Storage contract for products."""

    @abstractmethod
    async def list_all(self) -> List[Product]:
        """All products with their category snapshots, id ascending."""
        ...

    @abstractmethod
    async def get(self, product_id: int) -> Product:
        """
        Fetch one product with its category snapshot.

        Raises:
            NotFoundError: No product has this id.
        """
        ...

    @abstractmethod
    async def list_by_category(self, category_id: int) -> List[Product]:
        """Products filed under `category_id`, id ascending."""
        ...

    @abstractmethod
    async def category_exists(self, category_id: int) -> bool:
        ...

    @abstractmethod
    async def create(
        self, *, name: str, price: float, stock: int, category_id: int = 0
    ) -> Product:
        """
        Persist a new product.

        Checks run in order: name uniqueness, then category existence.

        Raises:
            NameConflictError: Another product already uses `name`.
            CategoryReferenceError: category_id is non-zero and unknown.
        """
        ...

    @abstractmethod
    async def update(
        self,
        product_id: int,
        *,
        name: str,
        price: float,
        stock: int,
        category_id: int = 0,
    ) -> Product:
        """
        Replace every mutable field. A category_id of 0 clears the category.

        Checks run in order: category existence, product existence, name
        uniqueness against the other products.

        Raises:
            CategoryReferenceError: category_id is non-zero and unknown.
            NotFoundError: No product has this id.
            NameConflictError: A different product already uses `name`.
        """
        ...

    @abstractmethod
    async def delete(self, product_id: int) -> None:
        """
        Remove a product.

        Raises:
            NotFoundError: No product has this id.
        """
        ...
