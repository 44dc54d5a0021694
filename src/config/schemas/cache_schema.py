"""Resource cache configuration schema."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_PAGE_SIZE = 100


class CacheConfig(BaseModel):
    """Listing and caching behaviour of resource modules."""

    page_size: int = Field(DEFAULT_PAGE_SIZE, description="Number of items requested per listing page")
    ttl_seconds: Optional[float] = Field(
        None, description="Age after which a fully loaded listing is fetched again; None keeps it until invalidated"
    )

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Validate page size."""
        if v < 1:
            raise ValueError("Page size must be at least 1")
        return v

    @field_validator("ttl_seconds")
    @classmethod
    def validate_ttl(cls, v: Optional[float]) -> Optional[float]:
        """Validate cache TTL."""
        if v is not None and v <= 0:
            raise ValueError("Cache TTL must be positive")
        return v
