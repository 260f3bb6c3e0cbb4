"""FastAPI application setup."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory.api.controller import product_router, report_router
from inventory.config import AppConfig, get_config
from inventory.services import (
    ProductRepository,
    ProductService,
    SeedError,
    SeedingService,
    StartupError,
    StoreError,
    create_repository,
)

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    repository: Optional[ProductRepository] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Startup connects the product store and re-seeds the collection before any
    request is served. A store that cannot be reached raises StartupError and
    a bad seed file raises SeedError; either way the app never serves traffic.

    Args:
        config: Application configuration (defaults to the config singleton).
        repository: Product store to use instead of the configured backend.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(level=config.logging.level)

        store = repository if repository is not None else create_repository(config)
        try:
            await store.connect()
        except StoreError as e:
            logger.error(f"Database connection failed: {e}")
            await store.close()
            raise StartupError(f"Product store unreachable: {e}") from e
        logger.info("Connected to product store")

        try:
            try:
                await SeedingService(store).seed(config.seed.path)
            except SeedError:
                logger.error("Seeding failed, refusing to start")
                raise
            except StoreError as e:
                logger.error(f"Seeding failed: {e}")
                raise StartupError(f"Seeding failed: {e}") from e

            app.state.product_service = ProductService(store)
            yield
        finally:
            await store.close()
            logger.info("Product store connection closed")

    app = FastAPI(
        title=config.api.title,
        description="CRUD API for the product inventory with an aggregate stock report",
        version=config.api.version,
        docs_url=config.api.docs_url,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(product_router)
    app.include_router(report_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
