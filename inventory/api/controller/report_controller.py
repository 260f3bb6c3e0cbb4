"""Inventory report endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from inventory.api.dependencies import get_product_service
from inventory.models import InventoryReport
from inventory.services import ProductService, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reports"])


@router.get("/inventory-report", response_model=InventoryReport)
async def inventory_report(
    service: ProductService = Depends(get_product_service),
) -> InventoryReport:
    """Total quantity and total value (quantity x price) of all products."""
    try:
        return await service.inventory_report()
    except StoreError as e:
        logger.exception(f"Error while generating inventory report: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")
