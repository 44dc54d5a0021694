"""Generic resource lifecycle: modules, drafts and managers."""

from .draft import Draft
from .manager import ResourceManager
from .module import ResourceModule

__all__ = ["Draft", "ResourceManager", "ResourceModule"]
