"""Subscription-wide entry point over the per-service Azure resource managers."""
from typing import Any, Optional, Tuple

from src.config.manager import ConfigurationManager
from src.config.schemas.cache_schema import CacheConfig
from src.domain.base.exceptions import ConfigurationError
from src.infrastructure.resource.manager import ResourceManager
from src.infrastructure.resource.module import ResourceModule
from src.providers.azure.applicationinsights.manager import ApplicationInsightsResourceManager
from src.providers.azure.cosmos.manager import CosmosResourceManager
from src.providers.azure.resources.manager import ResourcesResourceManager
from src.providers.azure.springcloud.manager import SpringCloudResourceManager


class AzureResourceManager:
    """
    Groups the service managers of one subscription.

    Services without a manager are simply unavailable; asking for one raises
    ``ConfigurationError``.
    """

    def __init__(
        self,
        subscription_id: str,
        resources: Optional[ResourcesResourceManager] = None,
        cosmos: Optional[CosmosResourceManager] = None,
        spring_cloud: Optional[SpringCloudResourceManager] = None,
        application_insights: Optional[ApplicationInsightsResourceManager] = None,
    ):
        self.subscription_id = subscription_id
        self._managers = {
            ResourcesResourceManager.service_name: resources,
            CosmosResourceManager.service_name: cosmos,
            SpringCloudResourceManager.service_name: spring_cloud,
            ApplicationInsightsResourceManager.service_name: application_insights,
        }
        for manager in self.managers():
            if manager.subscription_id != subscription_id:
                raise ConfigurationError(
                    f"Manager for '{manager.service_name}' is bound to subscription "
                    f"'{manager.subscription_id}', expected '{subscription_id}'"
                )

    def _service(self, service_name: str) -> ResourceManager:
        manager = self._managers.get(service_name)
        if manager is None:
            raise ConfigurationError(f"Service '{service_name}' is not configured", missing_fields=[service_name])
        return manager

    @property
    def resources(self) -> ResourcesResourceManager:
        return self._service(ResourcesResourceManager.service_name)

    @property
    def cosmos(self) -> CosmosResourceManager:
        return self._service(CosmosResourceManager.service_name)

    @property
    def spring_cloud(self) -> SpringCloudResourceManager:
        return self._service(SpringCloudResourceManager.service_name)

    @property
    def application_insights(self) -> ApplicationInsightsResourceManager:
        return self._service(ApplicationInsightsResourceManager.service_name)

    def managers(self) -> Tuple[ResourceManager, ...]:
        return tuple(manager for manager in self._managers.values() if manager is not None)

    def all_modules(self) -> Tuple[ResourceModule, ...]:
        return tuple(module for manager in self.managers() for module in manager.all_modules())

    def refresh(self) -> None:
        for manager in self.managers():
            manager.refresh()

    @classmethod
    def from_sdk(
        cls,
        subscription_id: str,
        resource_client: Any = None,
        cosmos_client: Any = None,
        app_platform_client: Any = None,
        application_insights_client: Any = None,
        cache_config: Optional[CacheConfig] = None,
    ) -> "AzureResourceManager":
        """
        Build the managers for the SDK clients that are given.

        Args:
            subscription_id: Subscription all clients are bound to
            resource_client: ``ResourceManagementClient``
            cosmos_client: ``CosmosDBManagementClient``
            app_platform_client: ``AppPlatformManagementClient``
            application_insights_client: ``ApplicationInsightsManagementClient``
            cache_config: Listing and caching behaviour shared by every module
        """

        def build(manager_cls, client):
            return manager_cls.from_sdk(subscription_id, client, cache_config) if client is not None else None

        return cls(
            subscription_id,
            resources=build(ResourcesResourceManager, resource_client),
            cosmos=build(CosmosResourceManager, cosmos_client),
            spring_cloud=build(SpringCloudResourceManager, app_platform_client),
            application_insights=build(ApplicationInsightsResourceManager, application_insights_client),
        )

    @classmethod
    def from_config(
        cls,
        config: ConfigurationManager,
        resource_client: Any = None,
        cosmos_client: Any = None,
        app_platform_client: Any = None,
        application_insights_client: Any = None,
    ) -> "AzureResourceManager":
        """
        Build the managers from loaded configuration and the SDK clients that are given.

        The subscription comes from ``subscription_id`` and every module shares
        the ``cache`` section.

        Raises:
            ConfigurationError: If the configuration names no subscription
        """
        subscription_id = config.app_config.subscription_id
        if not subscription_id:
            raise ConfigurationError(
                "No subscription configured; set subscription_id or AZRT_SUBSCRIPTION_ID",
                missing_fields=["subscription_id"],
            )
        return cls.from_sdk(
            subscription_id,
            resource_client=resource_client,
            cosmos_client=cosmos_client,
            app_platform_client=app_platform_client,
            application_insights_client=application_insights_client,
            cache_config=config.get_typed(CacheConfig),
        )
