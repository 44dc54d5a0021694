import pytest

from src.config.schemas import CacheConfig
from src.infrastructure.resource.manager import ResourceManager
from src.providers.azure.cosmos import CASSANDRA_KEYSPACES, CASSANDRA_TABLES, DATABASE_ACCOUNTS, CosmosResourceManager
from src.providers.azure.springcloud import (
    SPRING_APPS,
    SPRING_DEPLOYMENTS,
    SPRING_SERVICES,
    SpringCloudResourceManager,
)
from tests.fakes import GADGETS, SUBSCRIPTION_ID, WIDGETS, InMemoryRemoteClient


@pytest.fixture
def subscription_id():
    return SUBSCRIPTION_ID


@pytest.fixture
def widget_client():
    return InMemoryRemoteClient(WIDGETS.resource_type)


@pytest.fixture
def gadget_client():
    return InMemoryRemoteClient(GADGETS.resource_type)


@pytest.fixture
def widget_manager(widget_client, gadget_client):
    return ResourceManager(
        SUBSCRIPTION_ID,
        [WIDGETS],
        {WIDGETS.name: widget_client, GADGETS.name: gadget_client},
        CacheConfig(page_size=50),
    )


@pytest.fixture
def widgets(widget_manager):
    return widget_manager.module(WIDGETS.name)


@pytest.fixture
def cosmos_clients():
    return {
        DATABASE_ACCOUNTS.name: InMemoryRemoteClient(DATABASE_ACCOUNTS.resource_type),
        CASSANDRA_KEYSPACES.name: InMemoryRemoteClient(CASSANDRA_KEYSPACES.resource_type),
        CASSANDRA_TABLES.name: InMemoryRemoteClient(CASSANDRA_TABLES.resource_type),
    }


@pytest.fixture
def cosmos_manager(cosmos_clients):
    """Manager with account 'acct' (westus) holding keyspace 'shop'."""
    cosmos_clients[DATABASE_ACCOUNTS.name].add("acct", location="westus", kind="GlobalDocumentDB")
    cosmos_clients[CASSANDRA_KEYSPACES.name].add("shop", parent_names=("acct",), properties={"resource": {"id": "shop"}})
    return CosmosResourceManager(SUBSCRIPTION_ID, cosmos_clients)


@pytest.fixture
def keyspace(cosmos_manager):
    account = cosmos_manager.database_accounts().get("acct")
    return account.sub_module(CASSANDRA_KEYSPACES.name).get("shop")


@pytest.fixture
def spring_clients():
    return {
        SPRING_SERVICES.name: InMemoryRemoteClient(SPRING_SERVICES.resource_type),
        SPRING_APPS.name: InMemoryRemoteClient(SPRING_APPS.resource_type),
        SPRING_DEPLOYMENTS.name: InMemoryRemoteClient(SPRING_DEPLOYMENTS.resource_type),
    }


@pytest.fixture
def spring_manager(spring_clients):
    """Manager with a Standard tier service 'svc' in resource group 'rg'."""
    spring_clients[SPRING_SERVICES.name].add("svc", location="eastus", sku={"name": "S0", "tier": "Standard"})
    return SpringCloudResourceManager(SUBSCRIPTION_ID, spring_clients)


@pytest.fixture
def spring_service(spring_manager):
    return spring_manager.services().get("svc")
