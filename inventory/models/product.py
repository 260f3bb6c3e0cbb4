"""Product models for the API and the store."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    """Incoming product payload for create requests and seed records."""

    name: str
    price: float
    description: str = ""
    quantity: int
    unit: str = ""


class Product(ProductCreate):
    """Product as exposed by the API. Carries no storage-internal fields."""

    id: int


class ProductUpdate(BaseModel):
    """Partial update payload.

    A field counts as provided when its key is present with a non-null
    value, so ``price=0`` or ``description=""`` do overwrite.
    """

    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    quantity: Optional[int] = None
    unit: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller provided."""
        return self.model_dump(exclude_none=True)


class ProductFilter(BaseModel):
    """Optional predicates over the product collection. Bounds are inclusive."""

    name: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_quantity: Optional[int] = None
    max_quantity: Optional[int] = None

    def matches(self, product: Product) -> bool:
        """Evaluate the filter against a single product."""
        if self.name and self.name.lower() not in product.name.lower():
            return False
        if self.min_price is not None and product.price < self.min_price:
            return False
        if self.max_price is not None and product.price > self.max_price:
            return False
        if self.min_quantity is not None and product.quantity < self.min_quantity:
            return False
        if self.max_quantity is not None and product.quantity > self.max_quantity:
            return False
        return True


class InventoryReport(BaseModel):
    """Aggregate stock figures over the whole collection."""

    model_config = ConfigDict(populate_by_name=True)

    total_quantity: int = Field(0, alias="totalQuantity")
    total_value: float = Field(0, alias="totalValue")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ProductMessageResponse(MessageResponse):
    """Confirmation message together with the affected product."""

    product: Product
