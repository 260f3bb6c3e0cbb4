"""Configuration module."""

from inventory.config.configuration import (
    ApiConfig,
    AppConfig,
    ConfigurationError,
    CosmosDBConfig,
    LoggingConfig,
    SeedConfig,
    ServerConfig,
    StoreConfig,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "ConfigurationError",
    "CosmosDBConfig",
    "LoggingConfig",
    "SeedConfig",
    "ServerConfig",
    "StoreConfig",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
