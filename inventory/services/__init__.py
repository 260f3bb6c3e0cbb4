"""Service layer: error taxonomy, data access, seeding and product rules."""

from inventory.services.errors import (
    InventoryError,
    ProductConflictError,
    ProductNotFoundError,
    SeedError,
    StartupError,
    StoreError,
)
from inventory.services.product_repository import (
    CosmosProductRepository,
    InMemoryProductRepository,
    ProductRepository,
    build_filter_query,
    create_repository,
)
from inventory.services.product_service import ProductService
from inventory.services.seeding_service import SeedingService, load_seed_products

__all__ = [
    "CosmosProductRepository",
    "InMemoryProductRepository",
    "InventoryError",
    "ProductConflictError",
    "ProductNotFoundError",
    "ProductRepository",
    "ProductService",
    "SeedError",
    "SeedingService",
    "StartupError",
    "StoreError",
    "build_filter_query",
    "create_repository",
    "load_seed_products",
]
