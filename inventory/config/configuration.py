"""Configuration module for the inventory service.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml (in-memory store, local development)
- APP_ENV=test → config_test.yaml
- Default      → config.yaml (Cosmos DB store)

Cosmos DB credentials are loaded from the .env file.
Fails fast with clear error messages if required configuration is missing.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

STORE_BACKENDS = ("cosmosdb", "memory")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from inventory/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable.

    Returns:
        Config filename:
        - APP_ENV=dev  → config_dev.yaml
        - APP_ENV=test → config_test.yaml
        - Default      → config.yaml
    """
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


def _resolve_path(path: str) -> str:
    """Resolve a path relative to the project root."""
    candidate = Path(path)
    if candidate.is_absolute():
        return str(candidate)
    return str(_get_project_root() / candidate)


@dataclass(frozen=True)
class ServerConfig:
    """HTTP listener configuration."""
    host: str
    port: int


@dataclass(frozen=True)
class ApiConfig:
    """API metadata and documentation settings."""
    title: str
    version: str
    docs_url: str


@dataclass(frozen=True)
class StoreConfig:
    """Product store configuration with backend toggle."""
    backend: str  # "cosmosdb" or "memory"


@dataclass(frozen=True)
class CosmosDBConfig:
    """Azure Cosmos DB configuration for the product collection."""
    endpoint: str
    key: str
    database_name: str
    container_name: str
    partition_key_path: str


@dataclass(frozen=True)
class SeedConfig:
    """Startup seeding configuration."""
    path: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    server: ServerConfig
    api: ApiConfig
    store: StoreConfig
    seed: SeedConfig
    logging: LoggingConfig
    cosmosdb: Optional[CosmosDBConfig]  # Only required when store.backend == "cosmosdb"


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from config.yaml for non-sensitive settings and .env for credentials.
    Fails fast if required configuration is missing.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    # Load YAML configuration
    yaml_config = _load_yaml_config()

    server_section = yaml_config.get("server", {})
    server_config = ServerConfig(
        host=server_section.get("host", "0.0.0.0"),
        port=int(server_section.get("port", 3001)),
    )

    api_section = yaml_config.get("api", {})
    api_config = ApiConfig(
        title=api_section.get("title", "Inventory API"),
        version=api_section.get("version", "1.0.0"),
        docs_url=api_section.get("docs_url", "/swag"),
    )

    # Build Store config
    store_section = yaml_config.get("store", {})
    store_backend = store_section.get("backend", "cosmosdb")
    if store_backend not in STORE_BACKENDS:
        raise ConfigurationError(
            f"Unknown store backend '{store_backend}'. "
            f"Expected one of: {', '.join(STORE_BACKENDS)}."
        )
    store_config = StoreConfig(backend=store_backend)

    seed_section = yaml_config.get("seed", {})
    seed_config = SeedConfig(
        path=_resolve_path(seed_section.get("path", "products.json")),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {})

    logging_config = LoggingConfig(
        level=logging_section.get("level", "INFO"),
    )

    # Build CosmosDB config (only if backend is cosmosdb)
    cosmosdb_config: Optional[CosmosDBConfig] = None
    if store_backend == "cosmosdb":
        cosmosdb_section = yaml_config.get("cosmosdb", {})
        cosmosdb_config = CosmosDBConfig(
            endpoint=_get_required_env("COSMOSDB_ENDPOINT"),
            key=_get_required_env("COSMOSDB_KEY"),
            database_name=cosmosdb_section.get("database_name", "productsDB"),
            container_name=cosmosdb_section.get("container_name", "products"),
            partition_key_path=cosmosdb_section.get("partition_key_path", "/id"),
        )

    return AppConfig(
        server=server_config,
        api=api_config,
        store=store_config,
        seed=seed_config,
        logging=logging_config,
        cosmosdb=cosmosdb_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
