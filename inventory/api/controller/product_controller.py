"""REST controller for the product collection."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from inventory.api.dependencies import get_product_service
from inventory.models import (
    MessageResponse,
    Product,
    ProductCreate,
    ProductFilter,
    ProductMessageResponse,
    ProductUpdate,
)
from inventory.services import (
    ProductConflictError,
    ProductNotFoundError,
    ProductService,
    StoreError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

SERVER_ERROR = "Server error"


def _parse_product_id(raw: str) -> int:
    """Convert a path id to an int; ids that cannot exist are reported as not found."""
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with id {raw} does not exist.",
        )


@router.get("", response_model=List[Product])
async def list_products(
    name: Optional[str] = Query(None, description="Case-insensitive substring of the name"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    min_quantity: Optional[int] = Query(None, alias="minQuantity"),
    max_quantity: Optional[int] = Query(None, alias="maxQuantity"),
    service: ProductService = Depends(get_product_service),
) -> List[Product]:
    """List products, optionally filtered by name, price range and quantity range."""
    product_filter = ProductFilter(
        name=name,
        min_price=min_price,
        max_price=max_price,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
    )
    try:
        return await service.list_products(product_filter)
    except StoreError as e:
        logger.exception(f"Error while fetching products: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)


@router.post("", response_model=ProductMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductMessageResponse:
    """Create a product. The name must not be in use."""
    try:
        created = await service.create_product(product)
    except ProductConflictError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        logger.exception(f"Error while creating product: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)

    return ProductMessageResponse(message="Product created successfully.", product=created)


@router.put("/{product_id}", response_model=ProductMessageResponse)
async def update_product(
    product_id: str,
    update: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductMessageResponse:
    """Update the provided fields of a product; omitted or null fields are kept."""
    pid = _parse_product_id(product_id)
    try:
        product, changed = await service.update_product(pid, update.changes())
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ProductConflictError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        logger.exception(f"Error while updating product {product_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)

    message = "Product updated successfully." if changed else "No changes made to product."
    return ProductMessageResponse(message=message, product=product)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> MessageResponse:
    """Delete a product."""
    pid = _parse_product_id(product_id)
    try:
        deleted = await service.delete_product(pid)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreError as e:
        logger.exception(f"Error while deleting product {product_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR)

    message = "Product deleted successfully." if deleted else "No changes made to product."
    return MessageResponse(message=message)
