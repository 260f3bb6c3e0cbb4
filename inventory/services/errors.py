"""Error taxonomy for the inventory service."""


class InventoryError(Exception):
    """Base class for inventory service errors."""
    pass


class StartupError(InventoryError):
    """Raised when the product store cannot be reached at startup."""
    pass


class SeedError(InventoryError):
    """Raised when the seed file is missing or malformed."""
    pass


class StoreError(InventoryError):
    """Raised when a product store operation fails."""
    pass


class ProductConflictError(InventoryError):
    """Raised when a product with the same name or id already exists."""
    pass


class ProductNotFoundError(InventoryError):
    """Raised when no product has the requested id."""

    def __init__(self, product_id: int):
        super().__init__(f"Product with id {product_id} does not exist.")
        self.product_id = product_id
