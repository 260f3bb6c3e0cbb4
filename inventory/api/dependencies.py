"""FastAPI dependencies shared by the controllers."""

from fastapi import Request

from inventory.services import ProductService


def get_product_service(request: Request) -> ProductService:
    """Return the ProductService built during application startup."""
    return request.app.state.product_service
