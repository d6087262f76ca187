"""
Catalog API: In-Memory Repositories
=====================================

What:  Map-backed implementations of the repository interfaces.
Who:   Selected with STORE_BACKEND=memory; also the default for the HTTP tests.

Layout:
    InMemoryStore holds both maps, both id counters and ONE asyncio.Lock.
    InMemoryCategoryRepository and InMemoryProductRepository are thin views
    over a shared store, so a product write can check category existence
    under the same lock that guards category writes.

Semantics:
    - Ids come from per-collection counters that only ever increase; a
      deleted id is never handed out again.
    - Dicts keep insertion order, which equals id order here.
    - Deleting a category clears the reference on its products, as ON DELETE
      SET NULL does in the SQL store, so the category filter no longer
      matches them either.
    - Nothing awaits while the lock is held.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from catalog.exceptions import CategoryReferenceError, NameConflictError, NotFoundError
from catalog.repositories.base import CategoryRepository, ProductRepository
from catalog.schemas.category import Category
from catalog.schemas.product import Product

logger = logging.getLogger(__name__)


@dataclass
class StoredProduct:
    id: int
    name: str
    price: float
    stock: int
    category_id: Optional[int]


@dataclass
class InMemoryStore:
    """
    Shared state for the in-memory repositories.

    Why one lock for both maps: a product write reads the category map and
    writes the product map, and a category delete writes both. A lock per
    map would need a fixed acquisition order; throughput is not a concern.
    """

    categories: Dict[int, Category] = field(default_factory=dict)
    products: Dict[int, StoredProduct] = field(default_factory=dict)
    next_category_id: int = 1
    next_product_id: int = 1
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def allocate_category_id(self) -> int:
        category_id = self.next_category_id
        self.next_category_id += 1
        return category_id

    def allocate_product_id(self) -> int:
        product_id = self.next_product_id
        self.next_product_id += 1
        return product_id


class InMemoryCategoryRepository(CategoryRepository):
    """Categories kept in a dict keyed by id."""

    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        return any(
            cat.name == name and cat.id != exclude_id
            for cat in self.store.categories.values()
        )

    async def list_all(self) -> List[Category]:
        async with self.store.lock:
            return list(self.store.categories.values())

    async def get(self, category_id: int) -> Category:
        async with self.store.lock:
            category = self.store.categories.get(category_id)
        if category is None:
            raise NotFoundError(resource="category", resource_id=category_id)
        return category

    async def create(self, *, name: str, description: str) -> Category:
        async with self.store.lock:
            if self._name_taken(name):
                raise NameConflictError(resource="category", name=name)
            category = Category(
                id=self.store.allocate_category_id(),
                name=name,
                description=description,
            )
            self.store.categories[category.id] = category
        logger.debug("Category %d created in memory", category.id)
        return category

    async def update(self, category_id: int, *, name: str, description: str) -> Category:
        async with self.store.lock:
            if category_id not in self.store.categories:
                raise NotFoundError(resource="category", resource_id=category_id)
            if self._name_taken(name, exclude_id=category_id):
                raise NameConflictError(resource="category", name=name)
            category = Category(id=category_id, name=name, description=description)
            self.store.categories[category_id] = category
        return category

    async def delete(self, category_id: int) -> None:
        async with self.store.lock:
            if self.store.categories.pop(category_id, None) is None:
                raise NotFoundError(resource="category", resource_id=category_id)
            # same effect as ON DELETE SET NULL in the SQL store
            for product in self.store.products.values():
                if product.category_id == category_id:
                    product.category_id = None


class InMemoryProductRepository(ProductRepository):
    """
    Products kept in a dict keyed by id.

    Category snapshots are looked up in the shared store on every read.
    """

    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()

    def _to_product(self, stored: StoredProduct) -> Product:
        category = None
        if stored.category_id:
            category = self.store.categories.get(stored.category_id)
        return Product(
            id=stored.id,
            name=stored.name,
            price=stored.price,
            stock=stored.stock,
            category_id=stored.category_id,
            category=category,
        )

    def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        return any(
            p.name == name and p.id != exclude_id
            for p in self.store.products.values()
        )

    def _check_category(self, category_id: int) -> None:
        if category_id and category_id not in self.store.categories:
            raise CategoryReferenceError(category_id=category_id)

    async def list_all(self) -> List[Product]:
        async with self.store.lock:
            return [self._to_product(p) for p in self.store.products.values()]

    async def get(self, product_id: int) -> Product:
        async with self.store.lock:
            stored = self.store.products.get(product_id)
            if stored is None:
                raise NotFoundError(resource="product", resource_id=product_id)
            return self._to_product(stored)

    async def list_by_category(self, category_id: int) -> List[Product]:
        async with self.store.lock:
            return [
                self._to_product(p)
                for p in self.store.products.values()
                if p.category_id == category_id
            ]

    async def category_exists(self, category_id: int) -> bool:
        async with self.store.lock:
            return category_id in self.store.categories

    async def create(
        self, *, name: str, price: float, stock: int, category_id: int = 0
    ) -> Product:
        async with self.store.lock:
            # Why this order: a duplicate name is reported even when the
            # category is also wrong, matching the SQL store
            if self._name_taken(name):
                raise NameConflictError(resource="product", name=name)
            self._check_category(category_id)
            stored = StoredProduct(
                id=self.store.allocate_product_id(),
                name=name,
                price=price,
                stock=stock,
                category_id=category_id or None,
            )
            self.store.products[stored.id] = stored
            return self._to_product(stored)

    async def update(
        self,
        product_id: int,
        *,
        name: str,
        price: float,
        stock: int,
        category_id: int = 0,
    ) -> Product:
        async with self.store.lock:
            # category, then existence, then name; same order as the SQL store
            self._check_category(category_id)
            if product_id not in self.store.products:
                raise NotFoundError(resource="product", resource_id=product_id)
            if self._name_taken(name, exclude_id=product_id):
                raise NameConflictError(resource="product", name=name)
            stored = StoredProduct(
                id=product_id,
                name=name,
                price=price,
                stock=stock,
                category_id=category_id or None,
            )
            self.store.products[product_id] = stored
            return self._to_product(stored)

    async def delete(self, product_id: int) -> None:
        async with self.store.lock:
            if self.store.products.pop(product_id, None) is None:
                raise NotFoundError(resource="product", resource_id=product_id)
