"""Data models module."""

from inventory.models.product import (
    InventoryReport,
    MessageResponse,
    Product,
    ProductCreate,
    ProductFilter,
    ProductMessageResponse,
    ProductUpdate,
)

__all__ = [
    "InventoryReport",
    "MessageResponse",
    "Product",
    "ProductCreate",
    "ProductFilter",
    "ProductMessageResponse",
    "ProductUpdate",
]
