"""Resource manager for resource groups."""
from typing import Any, Optional

from src.config.schemas.cache_schema import CacheConfig
from src.infrastructure.resource.manager import ResourceManager
from src.infrastructure.resource.module import ResourceModule
from src.providers.azure.client import AzureSdkRemoteClient
from src.providers.azure.resources.kinds import RESOURCE_GROUPS


class ResourcesResourceManager(ResourceManager):
    """Resource groups of one subscription."""

    service_name = "resources"
    KINDS = (RESOURCE_GROUPS,)

    def __init__(self, subscription_id: str, clients, cache_config: Optional[CacheConfig] = None):
        super().__init__(subscription_id, self.KINDS, clients, cache_config)

    def resource_groups(self) -> ResourceModule:
        return self.module(RESOURCE_GROUPS.name)

    @classmethod
    def from_sdk(cls, subscription_id: str, client: Any, cache_config: Optional[CacheConfig] = None):
        """
        Build the manager from an ``azure.mgmt.resource.ResourceManagementClient``.

        Args:
            subscription_id: Subscription the client is bound to
            client: Management client exposing ``resource_groups``
            cache_config: Listing and caching behaviour
        """
        groups = client.resource_groups
        return cls(
            subscription_id,
            {
                RESOURCE_GROUPS.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: groups.list(),
                    get_operation=lambda parent, name: groups.get(name),
                    delete_operation=lambda rid: groups.begin_delete(rid.resource_group),
                    create_or_update_operation=lambda parent, name, payload: groups.create_or_update(name, payload),
                )
            },
            cache_config,
        )
