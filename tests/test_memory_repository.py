"""
Catalog API: In-Memory Repository Tests
=========================================

What we test:
    ✅ Ids start at 1, increase, and are never reused after delete
    ✅ Name uniqueness on create and update (update may keep its own name)
    ✅ Not-found on get / update / delete
    ✅ Category reference checks and read-time category snapshots
    ✅ Concurrent creates under the shared lock
"""

import asyncio

import pytest

from catalog.exceptions import CategoryReferenceError, NameConflictError, NotFoundError


class TestInMemoryCategories:

    @pytest.mark.asyncio
    async def test_list_empty(self, memory_categories):
        assert await memory_categories.list_all() == []

    @pytest.mark.asyncio
    async def test_create_assigns_increasing_ids(self, memory_categories):
        first = await memory_categories.create(name="Electronics", description="")
        second = await memory_categories.create(name="Books", description="Paper")

        assert first.id == 1
        assert second.id == 2
        assert second.description == "Paper"
        assert [c.id for c in await memory_categories.list_all()] == [1, 2]

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, memory_categories):
        await memory_categories.create(name="Electronics", description="")

        with pytest.raises(NameConflictError) as exc_info:
            await memory_categories.create(name="Electronics", description="again")

        assert exc_info.value.message == "Category name already exists"
        assert len(await memory_categories.list_all()) == 1

    @pytest.mark.asyncio
    async def test_get_missing(self, memory_categories):
        with pytest.raises(NotFoundError) as exc_info:
            await memory_categories.get(42)
        assert exc_info.value.message == "Category not found"

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, memory_categories):
        created = await memory_categories.create(name="Electronics", description="old")

        updated = await memory_categories.update(
            created.id, name="Gadgets", description="new"
        )

        assert updated.id == created.id
        assert await memory_categories.get(created.id) == updated
        assert updated.name == "Gadgets"

    @pytest.mark.asyncio
    async def test_update_can_keep_own_name(self, memory_categories):
        created = await memory_categories.create(name="Electronics", description="")
        updated = await memory_categories.update(
            created.id, name="Electronics", description="same name"
        )
        assert updated.description == "same name"

    @pytest.mark.asyncio
    async def test_update_to_other_name_conflicts(self, memory_categories):
        await memory_categories.create(name="Electronics", description="")
        books = await memory_categories.create(name="Books", description="")

        with pytest.raises(NameConflictError):
            await memory_categories.update(books.id, name="Electronics", description="")

    @pytest.mark.asyncio
    async def test_update_missing_creates_nothing(self, memory_categories):
        with pytest.raises(NotFoundError):
            await memory_categories.update(7, name="Ghost", description="")
        assert await memory_categories.list_all() == []

    @pytest.mark.asyncio
    async def test_delete_then_get(self, memory_categories):
        created = await memory_categories.create(name="Electronics", description="")
        await memory_categories.delete(created.id)

        with pytest.raises(NotFoundError):
            await memory_categories.get(created.id)
        with pytest.raises(NotFoundError):
            await memory_categories.delete(created.id)

    @pytest.mark.asyncio
    async def test_deleted_id_not_reused(self, memory_categories):
        first = await memory_categories.create(name="A", description="")
        await memory_categories.delete(first.id)
        second = await memory_categories.create(name="B", description="")
        assert second.id == 2

    @pytest.mark.asyncio
    async def test_concurrent_creates_get_distinct_ids(self, memory_categories):
        created = await asyncio.gather(
            *(memory_categories.create(name=f"cat-{i}", description="") for i in range(20))
        )
        assert sorted(c.id for c in created) == list(range(1, 21))

    @pytest.mark.asyncio
    async def test_concurrent_same_name_only_one_wins(self, memory_categories):
        results = await asyncio.gather(
            *(memory_categories.create(name="Same", description="") for _ in range(5)),
            return_exceptions=True,
        )
        conflicts = [r for r in results if isinstance(r, NameConflictError)]
        assert len(conflicts) == 4
        assert len(await memory_categories.list_all()) == 1


class TestInMemoryProducts:

    @pytest.mark.asyncio
    async def test_create_without_category(self, memory_products):
        product = await memory_products.create(name="Phone", price=100.0, stock=5)

        assert product.id == 1
        assert product.category is None
        assert product.category_id is None

    @pytest.mark.asyncio
    async def test_create_with_category_embeds_snapshot(
        self, memory_categories, memory_products
    ):
        category = await memory_categories.create(name="Electronics", description="d")

        product = await memory_products.create(
            name="Phone", price=100.0, stock=5, category_id=category.id
        )

        assert product.category == category

    @pytest.mark.asyncio
    async def test_create_with_unknown_category(self, memory_products):
        with pytest.raises(CategoryReferenceError) as exc_info:
            await memory_products.create(
                name="Phone", price=100.0, stock=5, category_id=999
            )
        assert exc_info.value.message == "Category not found"
        assert await memory_products.list_all() == []

    @pytest.mark.asyncio
    async def test_name_checked_before_category(self, memory_products):
        await memory_products.create(name="Phone", price=1.0, stock=1)
        with pytest.raises(NameConflictError):
            await memory_products.create(name="Phone", price=1.0, stock=1, category_id=999)

    @pytest.mark.asyncio
    async def test_snapshot_follows_category_updates(
        self, memory_categories, memory_products
    ):
        category = await memory_categories.create(name="Electronics", description="")
        product = await memory_products.create(
            name="Phone", price=1.0, stock=1, category_id=category.id
        )
        await memory_categories.update(category.id, name="Gadgets", description="")

        fetched = await memory_products.get(product.id)
        assert fetched.category.name == "Gadgets"

    @pytest.mark.asyncio
    async def test_deleted_category_no_longer_embedded(
        self, memory_categories, memory_products
    ):
        category = await memory_categories.create(name="Electronics", description="")
        product = await memory_products.create(
            name="Phone", price=1.0, stock=1, category_id=category.id
        )
        await memory_categories.delete(category.id)

        fetched = await memory_products.get(product.id)
        assert fetched.category is None

    @pytest.mark.asyncio
    async def test_list_by_category(self, memory_categories, memory_products):
        electronics = await memory_categories.create(name="Electronics", description="")
        books = await memory_categories.create(name="Books", description="")
        await memory_products.create(name="Phone", price=1.0, stock=1, category_id=electronics.id)
        await memory_products.create(name="Novel", price=1.0, stock=1, category_id=books.id)
        await memory_products.create(name="Loose", price=1.0, stock=1)

        listed = await memory_products.list_by_category(electronics.id)

        assert [p.name for p in listed] == ["Phone"]
        assert await memory_products.list_by_category(999) == []

    @pytest.mark.asyncio
    async def test_category_exists(self, memory_categories, memory_products):
        category = await memory_categories.create(name="Electronics", description="")
        assert await memory_products.category_exists(category.id) is True
        assert await memory_products.category_exists(category.id + 1) is False

    @pytest.mark.asyncio
    async def test_update_checks_category_before_existence(self, memory_products):
        with pytest.raises(CategoryReferenceError):
            await memory_products.update(
                5, name="Phone", price=1.0, stock=1, category_id=999
            )

    @pytest.mark.asyncio
    async def test_update_missing(self, memory_products):
        with pytest.raises(NotFoundError) as exc_info:
            await memory_products.update(5, name="Phone", price=1.0, stock=1)
        assert exc_info.value.message == "Product not found"

    @pytest.mark.asyncio
    async def test_update_zero_category_clears_it(self, memory_categories, memory_products):
        category = await memory_categories.create(name="Electronics", description="")
        product = await memory_products.create(
            name="Phone", price=1.0, stock=1, category_id=category.id
        )

        updated = await memory_products.update(
            product.id, name="Phone", price=2.5, stock=3, category_id=0
        )

        assert updated.category is None
        assert updated.price == 2.5
        assert updated.stock == 3

    @pytest.mark.asyncio
    async def test_update_name_conflict(self, memory_products):
        await memory_products.create(name="Phone", price=1.0, stock=1)
        tablet = await memory_products.create(name="Tablet", price=1.0, stock=1)

        with pytest.raises(NameConflictError) as exc_info:
            await memory_products.update(tablet.id, name="Phone", price=1.0, stock=1)
        assert exc_info.value.message == "Product name already exists"

    @pytest.mark.asyncio
    async def test_delete(self, memory_products):
        product = await memory_products.create(name="Phone", price=1.0, stock=1)
        await memory_products.delete(product.id)

        with pytest.raises(NotFoundError):
            await memory_products.get(product.id)
        with pytest.raises(NotFoundError):
            await memory_products.delete(product.id)


class TestInMemoryCategoryDelete:

    @pytest.mark.asyncio
    async def test_delete_clears_product_references(
        self, memory_store, memory_categories, memory_products
    ):
        category = await memory_categories.create(name="Electronics", description="")
        product = await memory_products.create(
            name="Phone", price=1.0, stock=1, category_id=category.id
        )

        await memory_categories.delete(category.id)

        assert memory_store.products[product.id].category_id is None
        assert await memory_products.list_by_category(category.id) == []
        assert (await memory_products.get(product.id)).category_id is None

    @pytest.mark.asyncio
    async def test_delete_leaves_other_categories_alone(
        self, memory_categories, memory_products
    ):
        electronics = await memory_categories.create(name="Electronics", description="")
        books = await memory_categories.create(name="Books", description="")
        novel = await memory_products.create(
            name="Novel", price=1.0, stock=1, category_id=books.id
        )

        await memory_categories.delete(electronics.id)

        assert (await memory_products.get(novel.id)).category == books
