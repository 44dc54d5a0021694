"""Azure provider: SDK adapter, resource kinds and per-service managers."""

from .applicationinsights import APPLICATION_INSIGHTS, ApplicationInsightsResourceManager
from .client import AzureSdkRemoteClient
from .cosmos import CASSANDRA_KEYSPACES, CASSANDRA_TABLES, DATABASE_ACCOUNTS, CosmosResourceManager
from .manager import AzureResourceManager
from .resources import RESOURCE_GROUPS, ResourcesResourceManager
from .springcloud import (
    SPRING_APPS,
    SPRING_DEPLOYMENTS,
    SPRING_SERVICES,
    SpringCloudResourceManager,
    stage_active_deployment,
)

__all__ = [
    "AzureSdkRemoteClient",
    "AzureResourceManager",
    "ResourcesResourceManager",
    "CosmosResourceManager",
    "SpringCloudResourceManager",
    "ApplicationInsightsResourceManager",
    "RESOURCE_GROUPS",
    "DATABASE_ACCOUNTS",
    "CASSANDRA_KEYSPACES",
    "CASSANDRA_TABLES",
    "SPRING_SERVICES",
    "SPRING_APPS",
    "SPRING_DEPLOYMENTS",
    "APPLICATION_INSIGHTS",
    "stage_active_deployment",
]
