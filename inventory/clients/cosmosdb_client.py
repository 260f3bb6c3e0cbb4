"""Azure Cosmos DB client for product document storage."""

import logging
from typing import Any, Optional

from azure.cosmos.aio import CosmosClient
from azure.cosmos.aio._container import ContainerProxy
from azure.cosmos.aio._database import DatabaseProxy
from azure.cosmos.exceptions import CosmosResourceNotFoundError

logger = logging.getLogger(__name__)


class CosmosDBClient:
    """Async Cosmos DB client with connection management.

    Uses the NoSQL API for storing and querying documents in one container.
    Supports async context manager pattern for proper resource cleanup.
    """

    def __init__(
        self,
        endpoint: str,
        key: str,
        database_name: str,
        container_name: str,
        partition_key_path: str = "/id",
    ):
        """Initialize the Cosmos DB client.

        Args:
            endpoint: Cosmos DB account endpoint URL
            key: Cosmos DB account key
            database_name: Name of the database to use
            container_name: Name of the container to use
            partition_key_path: Path to the partition key field (default: /id)
        """
        self._endpoint = endpoint
        self._key = key
        self._database_name = database_name
        self._container_name = container_name
        self._partition_key_path = partition_key_path

        self._client: Optional[CosmosClient] = None
        self._database: Optional[DatabaseProxy] = None
        self._container: Optional[ContainerProxy] = None

    async def connect(self) -> None:
        """Establish connection and ensure database/container exist."""
        self._client = CosmosClient(url=self._endpoint, credential=self._key)
        await self._client.__aenter__()

        # Get or create database
        try:
            self._database = self._client.get_database_client(self._database_name)
            # Verify database exists by reading it
            await self._database.read()
        except CosmosResourceNotFoundError:
            self._database = await self._client.create_database(self._database_name)

        # Get or create container
        try:
            self._container = self._database.get_container_client(self._container_name)
            # Verify container exists by reading it
            await self._container.read()
        except CosmosResourceNotFoundError:
            self._container = await self._database.create_container(
                id=self._container_name,
                partition_key={"paths": [self._partition_key_path], "kind": "Hash"},
            )
            logger.info(f"Created Cosmos DB container: {self._container_name}")

    async def close(self) -> None:
        """Close the Cosmos DB connection."""
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None
            self._container = None

    async def __aenter__(self) -> "CosmosDBClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Async context manager exit with cleanup."""
        await self.close()
        return False

    def _require_container(self) -> ContainerProxy:
        if self._container is None:
            raise RuntimeError("CosmosDB client not connected. Call connect() first.")
        return self._container

    def partition_key_for(self, item: dict[str, Any]) -> Any:
        """Extract the partition key value of an item from its configured path."""
        value: Any = item
        for part in self._partition_key_path.strip("/").split("/"):
            value = value[part]
        return value

    def _key_projection_query(self) -> str:
        """Select only the fields needed to address each item for deletion."""
        fields = ["c.id"]
        top_level = self._partition_key_path.strip("/").split("/")[0]
        if top_level != "id":
            fields.append(f"c.{top_level}")
        return "SELECT " + ", ".join(fields) + " FROM c"

    async def create_item(self, item: dict[str, Any]) -> dict[str, Any]:
        """Insert a new item.

        Args:
            item: Dictionary containing the item data, including 'id' and
                  the partition key field.

        Returns:
            The created item with any system-generated fields.

        Raises:
            RuntimeError: If client is not connected.
            CosmosResourceExistsError: If an item with the same id exists.
        """
        container = self._require_container()
        result = await container.create_item(body=item)
        return dict(result)

    async def replace_item(self, item: dict[str, Any]) -> dict[str, Any]:
        """Replace an existing item, matched by its 'id'.

        Raises:
            RuntimeError: If client is not connected.
            CosmosResourceNotFoundError: If item not found.
        """
        container = self._require_container()
        result = await container.replace_item(item=item["id"], body=item)
        return dict(result)

    async def query_items(
        self,
        query: str,
        parameters: Optional[list[dict[str, Any]]] = None,
        partition_key: Optional[str] = None,
    ) -> list[Any]:
        """Query items from the container.

        Args:
            query: SQL query string
            parameters: Optional query parameters as list of {"name": "@param", "value": value}
            partition_key: Optional partition key to scope the query

        Returns:
            List of matching items (or scalar values for SELECT VALUE queries).

        Raises:
            RuntimeError: If client is not connected.
        """
        container = self._require_container()

        query_options = {}
        if partition_key is not None:
            query_options["partition_key"] = partition_key

        items = []
        async for item in container.query_items(
            query=query,
            parameters=parameters,
            **query_options,
        ):
            items.append(dict(item) if isinstance(item, dict) else item)

        return items

    async def read_item(self, item_id: str, partition_key: Any) -> Optional[dict[str, Any]]:
        """Read a single item by id and partition key.

        Returns:
            The item data, or None if it does not exist.

        Raises:
            RuntimeError: If client is not connected.
        """
        container = self._require_container()
        try:
            result = await container.read_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return None
        return dict(result)

    async def delete_item(self, item_id: str, partition_key: Any) -> bool:
        """Delete an item by id and partition key.

        Returns:
            True if the item was deleted, False if it did not exist.

        Raises:
            RuntimeError: If client is not connected.
        """
        container = self._require_container()
        try:
            await container.delete_item(item=item_id, partition_key=partition_key)
        except CosmosResourceNotFoundError:
            return False
        return True

    async def count_items(self) -> int:
        """Count all items in the container."""
        result = await self.query_items("SELECT VALUE COUNT(1) FROM c")
        return int(result[0]) if result else 0

    async def delete_all_items(self) -> int:
        """Delete every item in the container.

        Returns:
            Number of items deleted.
        """
        items = await self.query_items(self._key_projection_query())
        deleted = 0
        for item in items:
            if await self.delete_item(item["id"], self.partition_key_for(item)):
                deleted += 1
        return deleted
