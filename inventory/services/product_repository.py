"""Data access for the product collection.

The service talks to a ``ProductRepository``; the concrete backend is chosen
from configuration:
- cosmosdb → CosmosProductRepository (Azure Cosmos DB container)
- memory   → InMemoryProductRepository (process-local, for development and tests)
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

from azure.core.exceptions import AzureError
from azure.cosmos.exceptions import CosmosResourceExistsError

from inventory.clients import CosmosDBClient
from inventory.config.configuration import AppConfig
from inventory.models import InventoryReport, Product, ProductFilter
from inventory.services.errors import ProductConflictError, StoreError

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ("name", "price", "description", "quantity", "unit")


def build_filter_query(product_filter: ProductFilter) -> tuple[str, list[dict[str, Any]]]:
    """
    Translate a product filter into a parameterised Cosmos SQL query.

    Args:
        product_filter: Optional predicates; omitted ones add no constraint.

    Returns:
        Tuple of (query, parameters).
    """
    clauses: list[str] = []
    parameters: list[dict[str, Any]] = []

    if product_filter.name:
        # Third argument makes CONTAINS case-insensitive
        clauses.append("CONTAINS(c.name, @name, true)")
        parameters.append({"name": "@name", "value": product_filter.name})
    if product_filter.min_price is not None:
        clauses.append("c.price >= @minPrice")
        parameters.append({"name": "@minPrice", "value": product_filter.min_price})
    if product_filter.max_price is not None:
        clauses.append("c.price <= @maxPrice")
        parameters.append({"name": "@maxPrice", "value": product_filter.max_price})
    if product_filter.min_quantity is not None:
        clauses.append("c.quantity >= @minQuantity")
        parameters.append({"name": "@minQuantity", "value": product_filter.min_quantity})
    if product_filter.max_quantity is not None:
        clauses.append("c.quantity <= @maxQuantity")
        parameters.append({"name": "@maxQuantity", "value": product_filter.max_quantity})

    query = "SELECT * FROM c"
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY c.productId"
    return query, parameters


TOTAL_QUANTITY_QUERY = "SELECT VALUE SUM(c.quantity) FROM c"
TOTAL_VALUE_QUERY = "SELECT VALUE SUM(c.quantity * c.price) FROM c"


def _first_or_zero(rows: list) -> Any:
    """Unwrap a VALUE aggregate result; an empty container yields no row or null."""
    if not rows or rows[0] is None:
        return 0
    return rows[0]


def summarize_stock(stock: Iterable[tuple[int, float]]) -> InventoryReport:
    """Sum quantity and quantity * price over (quantity, price) pairs in one pass."""
    total_quantity = 0
    total_value = 0.0
    for quantity, price in stock:
        total_quantity += quantity
        total_value += quantity * price
    return InventoryReport(total_quantity=total_quantity, total_value=total_value)


class ProductRepository(ABC):
    """Data-access interface over the product collection."""

    async def connect(self) -> None:
        """Open the underlying store connection."""

    async def close(self) -> None:
        """Release the underlying store connection."""

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every product and return how many were removed."""

    @abstractmethod
    async def count(self) -> int:
        """Count stored products."""

    @abstractmethod
    async def insert(self, product: Product) -> Product:
        """Insert a product. Raises ProductConflictError if its id is taken."""

    async def insert_many(self, products: Iterable[Product]) -> int:
        inserted = 0
        for product in products:
            await self.insert(product)
            inserted += 1
        return inserted

    @abstractmethod
    async def find(self, product_filter: ProductFilter) -> list[Product]:
        """Return products matching the filter, ordered by id."""

    @abstractmethod
    async def get(self, product_id: int) -> Optional[Product]:
        """Return the product with this id, or None."""

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Product]:
        """Return the product with exactly this name, or None."""

    @abstractmethod
    async def max_id(self) -> Optional[int]:
        """Return the highest product id, or None for an empty collection."""

    @abstractmethod
    async def replace(self, product: Product) -> Product:
        """Overwrite the stored product with the same id."""

    @abstractmethod
    async def delete(self, product_id: int) -> bool:
        """Delete one product. Returns False if nothing was removed."""

    @abstractmethod
    async def inventory_totals(self) -> InventoryReport:
        """Compute total quantity and total value over all products."""

    async def __aenter__(self) -> "ProductRepository":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False


class InMemoryProductRepository(ProductRepository):
    """Process-local product store keyed by product id."""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: dict[int, Product] = {}
        for product in products or []:
            self._products[product.id] = product.model_copy()

    async def delete_all(self) -> int:
        deleted = len(self._products)
        self._products.clear()
        return deleted

    async def count(self) -> int:
        return len(self._products)

    async def insert(self, product: Product) -> Product:
        if product.id in self._products:
            raise ProductConflictError(f"Product with id {product.id} already exists.")
        self._products[product.id] = product.model_copy()
        return product.model_copy()

    async def find(self, product_filter: ProductFilter) -> list[Product]:
        return [
            product.model_copy()
            for _, product in sorted(self._products.items())
            if product_filter.matches(product)
        ]

    async def get(self, product_id: int) -> Optional[Product]:
        product = self._products.get(product_id)
        return product.model_copy() if product else None

    async def find_by_name(self, name: str) -> Optional[Product]:
        for product in self._products.values():
            if product.name == name:
                return product.model_copy()
        return None

    async def max_id(self) -> Optional[int]:
        return max(self._products) if self._products else None

    async def replace(self, product: Product) -> Product:
        self._products[product.id] = product.model_copy()
        return product.model_copy()

    async def delete(self, product_id: int) -> bool:
        return self._products.pop(product_id, None) is not None

    async def inventory_totals(self) -> InventoryReport:
        return summarize_stock((p.quantity, p.price) for p in self._products.values())


class CosmosProductRepository(ProductRepository):
    """Product store backed by a Cosmos DB container.

    Each product is one document whose Cosmos ``id`` is the string form of
    the product id, so the store rejects duplicate ids on insert. The
    integer id is kept in ``productId`` for ordering and range queries.
    """

    def __init__(self, client: CosmosDBClient):
        self._client = client

    @staticmethod
    def _to_document(product: Product) -> dict[str, Any]:
        document = {"id": str(product.id), "productId": product.id}
        document.update(product.model_dump(include=set(PRODUCT_FIELDS)))
        return document

    def _partition_key(self, product_id: int) -> Any:
        return self._client.partition_key_for({"id": str(product_id), "productId": product_id})

    @staticmethod
    def _to_product(document: dict[str, Any]) -> Product:
        # Drops the string document id and system fields (_rid, _etag, _ts, ...)
        fields = {key: document[key] for key in PRODUCT_FIELDS if key in document}
        return Product(id=document["productId"], **fields)

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except CosmosResourceExistsError as e:
            raise ProductConflictError(f"Failed to {action}: product already exists") from e
        except AzureError as e:
            raise StoreError(f"Failed to {action}: {e}") from e

    async def connect(self) -> None:
        with self._store_errors("connect to Cosmos DB"):
            await self._client.connect()

    async def close(self) -> None:
        await self._client.close()

    async def delete_all(self) -> int:
        with self._store_errors("delete products"):
            return await self._client.delete_all_items()

    async def count(self) -> int:
        with self._store_errors("count products"):
            return await self._client.count_items()

    async def insert(self, product: Product) -> Product:
        with self._store_errors(f"insert product {product.id}"):
            document = await self._client.create_item(self._to_document(product))
        return self._to_product(document)

    async def find(self, product_filter: ProductFilter) -> list[Product]:
        query, parameters = build_filter_query(product_filter)
        logger.debug(f"Querying products: {query} {parameters}")
        with self._store_errors("query products"):
            documents = await self._client.query_items(query, parameters=parameters)
        return [self._to_product(document) for document in documents]

    async def get(self, product_id: int) -> Optional[Product]:
        with self._store_errors(f"read product {product_id}"):
            document = await self._client.read_item(
                str(product_id), partition_key=self._partition_key(product_id)
            )
        return self._to_product(document) if document else None

    async def find_by_name(self, name: str) -> Optional[Product]:
        with self._store_errors("query products by name"):
            documents = await self._client.query_items(
                "SELECT * FROM c WHERE c.name = @name",
                parameters=[{"name": "@name", "value": name}],
            )
        return self._to_product(documents[0]) if documents else None

    async def max_id(self) -> Optional[int]:
        with self._store_errors("read highest product id"):
            result = await self._client.query_items(
                "SELECT TOP 1 VALUE c.productId FROM c ORDER BY c.productId DESC"
            )
        return int(result[0]) if result else None

    async def replace(self, product: Product) -> Product:
        with self._store_errors(f"replace product {product.id}"):
            document = await self._client.replace_item(self._to_document(product))
        return self._to_product(document)

    async def delete(self, product_id: int) -> bool:
        with self._store_errors(f"delete product {product_id}"):
            return await self._client.delete_item(
                str(product_id), partition_key=self._partition_key(product_id)
            )

    async def inventory_totals(self) -> InventoryReport:
        # Cross-partition aggregates only support a single VALUE aggregate per query.
        with self._store_errors("compute inventory totals"):
            quantity = await self._client.query_items(TOTAL_QUANTITY_QUERY)
            value = await self._client.query_items(TOTAL_VALUE_QUERY)
        return InventoryReport(
            total_quantity=_first_or_zero(quantity),
            total_value=_first_or_zero(value),
        )


def create_repository(config: AppConfig) -> ProductRepository:
    """
    Create the product repository for the configured backend.

    Raises:
        ValueError: If the backend is unknown.
    """
    backend = config.store.backend
    if backend == "memory":
        logger.info("Using in-memory product store")
        return InMemoryProductRepository()
    if backend == "cosmosdb":
        cosmos = config.cosmosdb
        logger.info(
            f"Using Cosmos DB product store: {cosmos.database_name}/{cosmos.container_name}"
        )
        return CosmosProductRepository(
            CosmosDBClient(
                endpoint=cosmos.endpoint,
                key=cosmos.key,
                database_name=cosmos.database_name,
                container_name=cosmos.container_name,
                partition_key_path=cosmos.partition_key_path,
            )
        )
    raise ValueError(f"Unknown store backend: {backend}")
