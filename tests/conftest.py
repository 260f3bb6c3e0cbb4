"""Shared fixtures: in-memory product store, seed files and app configuration."""

import json
import os
import tempfile

import pytest

from inventory.config import (
    ApiConfig,
    AppConfig,
    LoggingConfig,
    SeedConfig,
    ServerConfig,
    StoreConfig,
)
from inventory.models import Product
from inventory.services import InMemoryProductRepository, ProductService

SEED_RECORDS = [
    {"name": "apple", "price": 10, "description": "Red apples", "quantity": 2, "unit": "kg"},
    {"name": "banana", "price": 20, "description": "Ripe bananas", "quantity": 3, "unit": "kg"},
    {"name": "Cherry", "price": 35.5, "description": "Sour cherries", "quantity": 10, "unit": "kg"},
]


def write_seed_file(records) -> str:
    """Write records to a temporary JSON file and return its path."""
    fd, path = tempfile.mkstemp(suffix=".json")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(records, f)
    return path


def make_config(seed_path: str) -> AppConfig:
    """Build an AppConfig using the in-memory store backend."""
    return AppConfig(
        server=ServerConfig(host="127.0.0.1", port=3001),
        api=ApiConfig(title="Inventory API (test)", version="test", docs_url="/swag"),
        store=StoreConfig(backend="memory"),
        seed=SeedConfig(path=seed_path),
        logging=LoggingConfig(level="DEBUG"),
        cosmosdb=None,
    )


@pytest.fixture
def seed_path():
    """Seed file holding SEED_RECORDS."""
    path = write_seed_file(SEED_RECORDS)
    yield path
    # Cleanup
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def app_config(seed_path):
    return make_config(seed_path)


@pytest.fixture
def products():
    """Products A(price=10, name=apple) and B(price=20, name=banana)."""
    return [
        Product(id=1, name="apple", price=10, description="Red apples", quantity=2, unit="kg"),
        Product(id=2, name="banana", price=20, description="Ripe bananas", quantity=3, unit="kg"),
    ]


@pytest.fixture
def repository(products):
    return InMemoryProductRepository(products)


@pytest.fixture
def product_service(repository):
    return ProductService(repository)
