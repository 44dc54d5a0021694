"""Resource manager for Spring Apps services, apps and deployments."""
from typing import Any, Optional

from src.config.schemas.cache_schema import CacheConfig
from src.infrastructure.resource.manager import ResourceManager
from src.infrastructure.resource.module import ResourceModule
from src.providers.azure.client import AzureSdkRemoteClient, find_by_name, wait_for
from src.providers.azure.springcloud.kinds import SPRING_APPS, SPRING_DEPLOYMENTS, SPRING_SERVICES


class SpringCloudResourceManager(ResourceManager):
    """Spring Apps resources of one subscription."""

    service_name = "springcloud"
    KINDS = (SPRING_SERVICES,)

    def __init__(self, subscription_id: str, clients, cache_config: Optional[CacheConfig] = None):
        super().__init__(subscription_id, self.KINDS, clients, cache_config)

    def services(self) -> ResourceModule:
        return self.module(SPRING_SERVICES.name)

    @classmethod
    def from_sdk(cls, subscription_id: str, client: Any, cache_config: Optional[CacheConfig] = None):
        """Build the manager from an ``azure.mgmt.appplatform.AppPlatformManagementClient``."""
        services = client.services
        apps = client.apps
        deployments = client.deployments

        def get_service(parent, name):
            if parent.resource_group:
                return services.get(parent.resource_group, name)
            return find_by_name(services.list_by_subscription(), name)

        def update_app(parent, name, payload):
            # activeDeploymentName is switched through set_active_deployments, not PATCH
            properties = dict(payload.get("properties") or {})
            deployment = properties.pop("activeDeploymentName", None)
            body = {**payload, "properties": properties}
            if not properties:
                body.pop("properties")
            result = None
            if body:
                result = wait_for(apps.begin_update(parent.resource_group, parent.names[0], name, body))
            if deployment is not None:
                result = apps.begin_set_active_deployments(
                    parent.resource_group, parent.names[0], name, {"activeDeploymentNames": [deployment]}
                )
            return result

        return cls(
            subscription_id,
            {
                SPRING_SERVICES.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: services.list_by_subscription(),
                    get_operation=get_service,
                    delete_operation=lambda rid: services.begin_delete(rid.resource_group, rid.name),
                    create_or_update_operation=lambda parent, name, payload: services.begin_create_or_update(
                        parent.resource_group, name, payload
                    ),
                ),
                SPRING_APPS.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: apps.list(parent.resource_group, parent.names[0]),
                    get_operation=lambda parent, name: apps.get(parent.resource_group, parent.names[0], name),
                    delete_operation=lambda rid: apps.begin_delete(rid.resource_group, rid.names[0], rid.name),
                    create_or_update_operation=lambda parent, name, payload: apps.begin_create_or_update(
                        parent.resource_group, parent.names[0], name, payload
                    ),
                    update_operation=update_app,
                ),
                SPRING_DEPLOYMENTS.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: deployments.list(
                        parent.resource_group, parent.names[0], parent.names[1]
                    ),
                    get_operation=lambda parent, name: deployments.get(
                        parent.resource_group, parent.names[0], parent.names[1], name
                    ),
                    delete_operation=lambda rid: deployments.begin_delete(
                        rid.resource_group, rid.names[0], rid.names[1], rid.name
                    ),
                    create_or_update_operation=lambda parent, name, payload: deployments.begin_create_or_update(
                        parent.resource_group, parent.names[0], parent.names[1], name, payload
                    ),
                    update_operation=lambda parent, name, payload: deployments.begin_update(
                        parent.resource_group, parent.names[0], parent.names[1], name, payload
                    ),
                ),
            },
            cache_config,
        )
