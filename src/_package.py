"""Package metadata and naming constants."""

PACKAGE_NAME = "azure-resource-toolkit"
PACKAGE_NAME_SHORT = "azrt"
__version__ = "0.1.0"
VERSION = __version__
DESCRIPTION = "Cached, draft-based management of Azure control-plane resources"
