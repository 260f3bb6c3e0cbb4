"""Tests for ProductService business rules.

These tests verify:
- Sequential id assignment on create
- Duplicate name rejection
- Partial update semantics with explicit presence tracking
- Not-found handling for update and delete
- Inventory report totals
"""

import pytest

from inventory.models import InventoryReport, ProductCreate, ProductFilter, ProductUpdate
from inventory.services import (
    InMemoryProductRepository,
    ProductConflictError,
    ProductNotFoundError,
    ProductService,
)


def _new_product(name: str = "cherry", price: float = 7.5, quantity: int = 4) -> ProductCreate:
    return ProductCreate(name=name, price=price, description="Fresh", quantity=quantity, unit="kg")


class TestCreateProduct:
    """Test product creation."""

    @pytest.mark.asyncio
    async def test_create_assigns_next_id(self, product_service, repository):
        """After ids {1, 2, 3} exist, a new create yields id 4."""
        await product_service.create_product(_new_product("cherry"))

        created = await product_service.create_product(_new_product("date"))

        assert created.id == 4
        assert await repository.count() == 4

    @pytest.mark.asyncio
    async def test_create_after_all_deleted_starts_at_one(self, product_service, repository):
        """After all products are deleted, a new create yields id 1."""
        await repository.delete_all()

        created = await product_service.create_product(_new_product())

        assert created.id == 1

    @pytest.mark.asyncio
    async def test_create_returns_created_record(self, product_service):
        """The created product carries its assigned id and coerced fields."""
        created = await product_service.create_product(
            ProductCreate.model_validate(
                {"name": "cherry", "price": "7.25", "description": "Fresh", "quantity": "4", "unit": "kg"}
            )
        )

        assert created.id == 3
        assert created.price == 7.25
        assert created.quantity == 4

    @pytest.mark.asyncio
    async def test_create_duplicate_name_rejected(self, product_service, repository):
        """A second product named 'apple' is rejected and nothing is written."""
        with pytest.raises(ProductConflictError):
            await product_service.create_product(_new_product("apple"))

        assert await repository.count() == 2

    @pytest.mark.asyncio
    async def test_create_conflicting_id_rejected(self, repository):
        """An id already claimed in the store surfaces as a conflict."""

        class StaleMaxIdRepository(InMemoryProductRepository):
            async def max_id(self):
                return 1

        stale = StaleMaxIdRepository(await repository.find(ProductFilter()))
        service = ProductService(stale)

        with pytest.raises(ProductConflictError):
            await service.create_product(_new_product())

        assert await stale.count() == 2


class TestUpdateProduct:
    """Test partial updates."""

    @pytest.mark.asyncio
    async def test_update_price_only(self, product_service):
        """Updating only price leaves the other fields unchanged."""
        changes = ProductUpdate(price=12.5).changes()

        product, changed = await product_service.update_product(1, changes)

        assert changed is True
        assert product.price == 12.5
        assert product.name == "apple"
        assert product.description == "Red apples"
        assert product.quantity == 2
        assert product.unit == "kg"

    @pytest.mark.asyncio
    async def test_update_zero_values_are_applied(self, product_service, repository):
        """Explicit zero and empty string count as provided values."""
        changes = ProductUpdate(price=0, quantity=0, description="").changes()

        product, changed = await product_service.update_product(2, changes)

        assert changed is True
        stored = await repository.get(2)
        assert stored.price == 0
        assert stored.quantity == 0
        assert stored.description == ""
        assert stored == product

    @pytest.mark.asyncio
    async def test_update_omitted_and_null_fields_are_kept(self, product_service):
        """Null fields behave like omitted ones."""
        changes = ProductUpdate.model_validate({"name": None, "unit": "pcs"}).changes()

        product, changed = await product_service.update_product(1, changes)

        assert changes == {"unit": "pcs"}
        assert changed is True
        assert product.name == "apple"
        assert product.unit == "pcs"

    @pytest.mark.asyncio
    async def test_update_with_same_values_reports_no_change(self, product_service):
        """Writing identical values is a successful no-op."""
        product, changed = await product_service.update_product(1, {"price": 10.0, "name": "apple"})

        assert changed is False
        assert product.price == 10

    @pytest.mark.asyncio
    async def test_rename_to_taken_name_rejected(self, product_service, repository):
        """Renaming apple to banana would leave two products named banana."""
        with pytest.raises(ProductConflictError):
            await product_service.update_product(1, {"name": "banana", "price": 1.0})

        stored = await repository.get(1)
        assert stored.name == "apple"
        assert stored.price == 10

    @pytest.mark.asyncio
    async def test_rename_to_free_name(self, product_service):
        product, changed = await product_service.update_product(1, {"name": "quince"})

        assert changed is True
        assert product.name == "quince"

    @pytest.mark.asyncio
    async def test_update_missing_product(self, product_service, repository):
        """Updating a nonexistent id raises and leaves the collection unchanged."""
        before = await repository.find(ProductFilter())

        with pytest.raises(ProductNotFoundError) as exc_info:
            await product_service.update_product(99, {"price": 1.0})

        assert exc_info.value.product_id == 99
        assert await repository.find(ProductFilter()) == before


class TestDeleteProduct:
    """Test product deletion."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, product_service, repository):
        deleted = await product_service.delete_product(1)

        assert deleted is True
        assert await repository.get(1) is None
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_delete_missing_product(self, product_service, repository):
        """Deleting a nonexistent id raises and leaves the collection unchanged."""
        with pytest.raises(ProductNotFoundError):
            await product_service.delete_product(42)

        assert await repository.count() == 2

    @pytest.mark.asyncio
    async def test_delete_race_reports_no_change(self, products):
        """A product removed between the check and the delete is a no-op."""

        class VanishingRepository(InMemoryProductRepository):
            async def delete(self, product_id):
                await super().delete(product_id)
                return False

        service = ProductService(VanishingRepository(products))

        assert await service.delete_product(1) is False


class TestListAndReport:
    """Test filtered listing and the inventory report."""

    @pytest.mark.asyncio
    async def test_list_min_price(self, product_service):
        """minPrice=15 returns exactly banana."""
        result = await product_service.list_products(ProductFilter(min_price=15))

        assert [p.name for p in result] == ["banana"]

    @pytest.mark.asyncio
    async def test_list_name_case_insensitive(self, product_service):
        """name=AN matches banana only."""
        result = await product_service.list_products(ProductFilter(name="AN"))

        assert [p.name for p in result] == ["banana"]

    @pytest.mark.asyncio
    async def test_report_totals(self, product_service):
        """quantity 2 @ 10 plus quantity 3 @ 20 gives 5 units worth 80."""
        report = await product_service.inventory_report()

        assert report == InventoryReport(total_quantity=5, total_value=80)

    @pytest.mark.asyncio
    async def test_report_two_products(self, products):
        """quantity 2 @ 5 plus quantity 3 @ 10 gives 5 units worth 40."""
        repository = InMemoryProductRepository(
            [
                products[0].model_copy(update={"quantity": 2, "price": 5}),
                products[1].model_copy(update={"quantity": 3, "price": 10}),
            ]
        )

        report = await ProductService(repository).inventory_report()

        assert report.total_quantity == 5
        assert report.total_value == 40

    @pytest.mark.asyncio
    async def test_report_empty_collection(self):
        report = await ProductService(InMemoryProductRepository()).inventory_report()

        assert report.total_quantity == 0
        assert report.total_value == 0
