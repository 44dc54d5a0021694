"""Configuration schemas package."""

from .app_schema import AppConfig, validate_config
from .cache_schema import DEFAULT_PAGE_SIZE, CacheConfig
from .logging_schema import LogFileConfig, LoggingConfig

__all__ = [
    # Main configuration
    "AppConfig",
    "validate_config",
    # Cache configuration
    "CacheConfig",
    "DEFAULT_PAGE_SIZE",
    # Logging configuration
    "LoggingConfig",
    "LogFileConfig",
]
