"""Unified configuration management for the application."""
from __future__ import annotations

import json
import logging
import os
import threading
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.config.schemas import AppConfig, CacheConfig, LoggingConfig, validate_config
from src.domain.base.exceptions import ConfigurationError

T = TypeVar("T")
logger = logging.getLogger(__name__)

ENV_PREFIX = "AZRT"
CONFIG_FILE_ENV = f"{ENV_PREFIX}_CONFIG_FILE"


def expand_env_vars(value: Any) -> Any:
    """Expand $VAR and ${VAR} in strings, recursing into dicts and lists.

    Unknown variables are left untouched.
    """
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(v) for v in value]
    return value


def _nested_model(model_cls: Type[BaseModel], field_name: str) -> Optional[Type[BaseModel]]:
    annotation = model_cls.model_fields[field_name].annotation
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _assign_env_value(data: Dict[str, Any], model_cls: Type[BaseModel], key: str, value: str) -> bool:
    """Place ``value`` at the field path spelled by ``key`` (e.g. ``cache_page_size``)."""
    for field_name in sorted(model_cls.model_fields, key=len, reverse=True):
        if key == field_name:
            data[field_name] = value
            return True
        nested = _nested_model(model_cls, field_name)
        if nested is not None and key.startswith(field_name + "_"):
            section = data.get(field_name)
            if not isinstance(section, dict):
                section = {}
                data[field_name] = section
            return _assign_env_value(section, nested, key[len(field_name) + 1:], value)
    return False


class ConfigurationManager:
    """
    Configuration manager that serves as the single source of truth.

    Configuration is resolved with the following priority (highest first):
    1. Environment variables (AZRT_SECTION_KEY, e.g. AZRT_CACHE_PAGE_SIZE)
    2. Configuration file (explicit path, then $AZRT_CONFIG_FILE)
    3. Schema defaults

    Loading is lazy and thread-safe.
    """

    def __init__(self, config_file: Optional[str] = None, env_prefix: str = ENV_PREFIX):
        """Initialize configuration manager with lazy loading."""
        self._config_file = config_file
        self._env_prefix = env_prefix
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def _resolve_config_file(self) -> Optional[str]:
        return self._config_file or os.environ.get(CONFIG_FILE_ENV)

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """Load configuration from file."""
        try:
            with open(config_path, "r") as f:
                return json.load(f)
        except FileNotFoundError:
            if self._config_file:
                raise ConfigurationError(f"Configuration file not found: {config_path}")
            logger.debug("Config file not found: %s", config_path)
            return {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}")

    def _apply_environment_overrides(self, data: Dict[str, Any]) -> Dict[str, Any]:
        prefix = f"{self._env_prefix}_"
        for env_key, value in os.environ.items():
            if not env_key.startswith(prefix) or env_key == CONFIG_FILE_ENV:
                continue
            key = env_key[len(prefix):].lower()
            if not _assign_env_value(data, AppConfig, key, value):
                logger.debug("Ignoring unknown configuration variable %s", env_key)
        return data

    def _load_app_config(self) -> AppConfig:
        """Load application configuration from sources."""
        config_path = self._resolve_config_file()
        data = self._load_config_file(config_path) if config_path else {}
        data = expand_env_vars(data)
        data = self._apply_environment_overrides(data)

        try:
            config = validate_config(data)
        except ValidationError as e:
            invalid = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
            raise ConfigurationError(f"Invalid configuration: {e}", missing_fields=invalid) from e

        logger.info("Configuration loaded successfully")
        return config

    def get_typed(self, config_type: Type[T]) -> T:
        """Get a configuration section by its schema type."""
        type_mapping = {
            AppConfig: lambda c: c,
            CacheConfig: lambda c: c.cache,
            LoggingConfig: lambda c: c.logging,
        }
        if config_type not in type_mapping:
            raise ValueError(f"Unknown configuration type: {config_type.__name__}")
        return type_mapping[config_type](self.app_config)

    def reload(self) -> None:
        """Reload configuration from sources on next access."""
        with self._lock:
            self._app_config = None
