"""HTTP controllers."""

from inventory.api.controller.product_controller import router as product_router
from inventory.api.controller.report_controller import router as report_router

__all__ = ["product_router", "report_router"]
