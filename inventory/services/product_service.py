"""Product CRUD and inventory reporting over an injected repository."""

import logging
from typing import Any, List, Tuple

from inventory.models import InventoryReport, Product, ProductCreate, ProductFilter
from inventory.services.errors import ProductConflictError, ProductNotFoundError
from inventory.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """Business rules for the product endpoints.

    Existence checks and id assignment are read-then-write against the
    repository; the store only guarantees that ids stay unique.
    """

    def __init__(self, repository: ProductRepository):
        self._repository = repository

    async def list_products(self, product_filter: ProductFilter) -> List[Product]:
        return await self._repository.find(product_filter)

    async def create_product(self, data: ProductCreate) -> Product:
        """Create a product with the next sequential id.

        Raises:
            ProductConflictError: If the name is taken, or a concurrent create
                claimed the same id first.
        """
        if await self._repository.find_by_name(data.name):
            raise ProductConflictError(f"Product named '{data.name}' already exists.")

        last_id = await self._repository.max_id()
        new_id = last_id + 1 if last_id is not None else 1

        product = await self._repository.insert(Product(id=new_id, **data.model_dump()))
        logger.info(f"Created product {product.id}: {product.name}")
        return product

    async def update_product(self, product_id: int, changes: dict[str, Any]) -> Tuple[Product, bool]:
        """Apply the provided fields to an existing product.

        Args:
            product_id: Id of the product to update.
            changes: Only the fields the caller supplied.

        Returns:
            The product after the update and whether anything changed.

        Raises:
            ProductNotFoundError: If no product has this id.
            ProductConflictError: If the new name belongs to another product.
        """
        existing = await self._repository.get(product_id)
        if existing is None:
            raise ProductNotFoundError(product_id)

        new_name = changes.get("name")
        if new_name is not None and new_name != existing.name:
            owner = await self._repository.find_by_name(new_name)
            if owner is not None and owner.id != product_id:
                raise ProductConflictError(f"Product named '{new_name}' already exists.")

        updated = existing.model_copy(update=changes)
        if updated == existing:
            logger.info(f"No changes made to product {product_id}")
            return existing, False

        product = await self._repository.replace(updated)
        logger.info(f"Updated product {product_id}")
        return product, True

    async def delete_product(self, product_id: int) -> bool:
        """Delete an existing product.

        Returns:
            False when the product vanished between the check and the delete.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        if await self._repository.get(product_id) is None:
            raise ProductNotFoundError(product_id)

        deleted = await self._repository.delete(product_id)
        if deleted:
            logger.info(f"Deleted product {product_id}")
        else:
            logger.info(f"No changes made to product {product_id}")
        return deleted

    async def inventory_report(self) -> InventoryReport:
        return await self._repository.inventory_totals()
