"""Resource manager for Application Insights components."""
from typing import Any, Optional

from src.config.schemas.cache_schema import CacheConfig
from src.infrastructure.resource.manager import ResourceManager
from src.infrastructure.resource.module import ResourceModule
from src.providers.azure.applicationinsights.kinds import APPLICATION_INSIGHTS
from src.providers.azure.client import AzureSdkRemoteClient, find_by_name


class ApplicationInsightsResourceManager(ResourceManager):
    """Application Insights components of one subscription."""

    service_name = "applicationinsights"
    KINDS = (APPLICATION_INSIGHTS,)

    def __init__(self, subscription_id: str, clients, cache_config: Optional[CacheConfig] = None):
        super().__init__(subscription_id, self.KINDS, clients, cache_config)

    def application_insights(self) -> ResourceModule:
        return self.module(APPLICATION_INSIGHTS.name)

    @classmethod
    def from_sdk(cls, subscription_id: str, client: Any, cache_config: Optional[CacheConfig] = None):
        """Build the manager from an ``azure.mgmt.applicationinsights.ApplicationInsightsManagementClient``."""
        components = client.components

        def get_component(parent, name):
            if parent.resource_group:
                return components.get(parent.resource_group, name)
            return find_by_name(components.list(), name)

        return cls(
            subscription_id,
            {
                APPLICATION_INSIGHTS.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: components.list(),
                    get_operation=get_component,
                    delete_operation=lambda rid: components.delete(rid.resource_group, rid.name),
                    create_or_update_operation=lambda parent, name, payload: components.create_or_update(
                        parent.resource_group, name, payload
                    ),
                )
            },
            cache_config,
        )
