"""Azure resource groups."""

from .kinds import RESOURCE_GROUPS
from .manager import ResourcesResourceManager

__all__ = ["RESOURCE_GROUPS", "ResourcesResourceManager"]
