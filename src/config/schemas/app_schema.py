"""Top-level configuration schema."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .cache_schema import CacheConfig
from .logging_schema import LoggingConfig


class AppConfig(BaseModel):
    """Toolkit configuration: default subscription, caching and logging."""

    subscription_id: Optional[str] = Field(None, description="Default Azure subscription")
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def validate_config(config: Dict[str, Any]) -> AppConfig:
    """
    Build an ``AppConfig`` from raw (file plus environment) values.

    Raises:
        pydantic.ValidationError: If a value does not match the schema
    """
    return AppConfig.model_validate(config)
