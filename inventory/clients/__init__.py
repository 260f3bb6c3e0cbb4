"""Client modules for external services."""

from inventory.clients.cosmosdb_client import CosmosDBClient

__all__ = [
    "CosmosDBClient",
]
