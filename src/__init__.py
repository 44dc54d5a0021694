"""Azure Resource Toolkit - Root Package.

This package provides a uniform object model over Azure control-plane APIs:
callers enumerate, create, update and delete cloud resources through
modules, entities and drafts instead of talking to each SDK directly.

Key Components:
    - domain: Resource entities, kinds, identifiers and exceptions
    - config: Configuration schemas and loading
    - infrastructure: Caching, modules, drafts, managers, logging and errors
    - providers: Azure service bindings (resource groups, Cosmos DB,
      Spring Apps, Application Insights)

Architecture:
    Reads flow Manager -> Module -> Cache -> RemoteClient. Writes flow
    Module -> Draft -> RemoteClient, and the result is upserted back into
    the module's cache.
"""

from ._package import PACKAGE_NAME, __version__

__package_name__ = PACKAGE_NAME
