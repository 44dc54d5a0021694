"""Configuration package with clean public API."""

from .manager import ConfigurationManager, expand_env_vars
from .schemas import (
    DEFAULT_PAGE_SIZE,
    AppConfig,
    CacheConfig,
    LogFileConfig,
    LoggingConfig,
    validate_config,
)

__all__ = [
    # Main configuration
    "AppConfig",
    "validate_config",
    # Specific configurations
    "CacheConfig",
    "DEFAULT_PAGE_SIZE",
    "LoggingConfig",
    "LogFileConfig",
    # Configuration management
    "ConfigurationManager",
    "expand_env_vars",
]
