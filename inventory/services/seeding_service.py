"""Startup seeding of the product collection from a bundled JSON file."""

import json
import logging
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from inventory.models import Product, ProductCreate
from inventory.services.errors import SeedError
from inventory.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def load_seed_products(path: Union[str, Path]) -> List[Product]:
    """
    Read seed records and assign sequential ids in file order.

    Args:
        path: JSON file holding an array of {name, price, description, quantity, unit}.

    Returns:
        Products with ids 1..N.

    Raises:
        SeedError: If the file is missing, not JSON, not an array, or a record is invalid.
    """
    seed_path = Path(path)
    try:
        with open(seed_path, "r", encoding="utf-8") as f:
            records = json.load(f)
    except FileNotFoundError as e:
        raise SeedError(f"Seed file not found: {seed_path}") from e
    except json.JSONDecodeError as e:
        raise SeedError(f"Seed file is not valid JSON: {seed_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise SeedError(f"Seed file is not valid UTF-8: {seed_path}: {e}") from e
    except OSError as e:
        raise SeedError(f"Seed file cannot be read: {seed_path}: {e}") from e

    if not isinstance(records, list):
        raise SeedError(f"Seed file must contain a JSON array: {seed_path}")

    products: List[Product] = []
    for index, record in enumerate(records):
        try:
            data = ProductCreate.model_validate(record)
        except ValidationError as e:
            raise SeedError(f"Invalid seed record at index {index}: {e}") from e
        products.append(Product(id=index + 1, **data.model_dump()))

    return products


class SeedingService:
    """Clears and repopulates the product collection at startup."""

    def __init__(self, repository: ProductRepository):
        self._repository = repository

    async def seed(self, path: Union[str, Path]) -> int:
        """Delete all products, then load the seed file if the collection is empty.

        Returns:
            Number of products inserted.
        """
        deleted = await self._repository.delete_all()
        logger.info(f"{deleted} products deleted from the collection")

        if await self._repository.count() > 0:
            logger.info("Collection already contains products, skipping seed")
            return 0

        products = load_seed_products(path)
        inserted = await self._repository.insert_many(products)
        logger.info(f"{inserted} products seeded from {path}")
        return inserted
