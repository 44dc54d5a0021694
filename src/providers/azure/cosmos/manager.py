"""Resource manager for Cosmos DB accounts and their Cassandra keyspaces and tables."""
from typing import Any, Optional

from src.config.schemas.cache_schema import CacheConfig
from src.infrastructure.resource.manager import ResourceManager
from src.infrastructure.resource.module import ResourceModule
from src.providers.azure.client import AzureSdkRemoteClient, find_by_name
from src.providers.azure.cosmos.kinds import CASSANDRA_KEYSPACES, CASSANDRA_TABLES, DATABASE_ACCOUNTS


class CosmosResourceManager(ResourceManager):
    """Cosmos DB resources of one subscription."""

    service_name = "cosmos"
    KINDS = (DATABASE_ACCOUNTS,)

    def __init__(self, subscription_id: str, clients, cache_config: Optional[CacheConfig] = None):
        super().__init__(subscription_id, self.KINDS, clients, cache_config)

    def database_accounts(self) -> ResourceModule:
        return self.module(DATABASE_ACCOUNTS.name)

    @classmethod
    def from_sdk(cls, subscription_id: str, client: Any, cache_config: Optional[CacheConfig] = None):
        """
        Build the manager from an ``azure.mgmt.cosmosdb.CosmosDBManagementClient``.

        Keyspace and table operations address their parents positionally:
        ``parent.names`` is ``(account,)`` for keyspaces and
        ``(account, keyspace)`` for tables.
        """
        accounts = client.database_accounts
        cassandra = client.cassandra_resources

        def get_account(parent, name):
            if parent.resource_group:
                return accounts.get(parent.resource_group, name)
            return find_by_name(accounts.list(), name)

        return cls(
            subscription_id,
            {
                DATABASE_ACCOUNTS.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: accounts.list(),
                    get_operation=get_account,
                    delete_operation=lambda rid: accounts.begin_delete(rid.resource_group, rid.name),
                    create_or_update_operation=lambda parent, name, payload: accounts.begin_create_or_update(
                        parent.resource_group, name, payload
                    ),
                ),
                CASSANDRA_KEYSPACES.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: cassandra.list_cassandra_keyspaces(
                        parent.resource_group, parent.names[0]
                    ),
                    get_operation=lambda parent, name: cassandra.get_cassandra_keyspace(
                        parent.resource_group, parent.names[0], name
                    ),
                    delete_operation=lambda rid: cassandra.begin_delete_cassandra_keyspace(
                        rid.resource_group, rid.names[0], rid.name
                    ),
                    create_or_update_operation=lambda parent, name, payload: cassandra.begin_create_update_cassandra_keyspace(
                        parent.resource_group, parent.names[0], name, payload
                    ),
                ),
                CASSANDRA_TABLES.name: AzureSdkRemoteClient(
                    list_operation=lambda parent: cassandra.list_cassandra_tables(
                        parent.resource_group, parent.names[0], parent.names[1]
                    ),
                    get_operation=lambda parent, name: cassandra.get_cassandra_table(
                        parent.resource_group, parent.names[0], parent.names[1], name
                    ),
                    delete_operation=lambda rid: cassandra.begin_delete_cassandra_table(
                        rid.resource_group, rid.names[0], rid.names[1], rid.name
                    ),
                    create_or_update_operation=lambda parent, name, payload: cassandra.begin_create_update_cassandra_table(
                        parent.resource_group, parent.names[0], parent.names[1], name, payload
                    ),
                ),
            },
            cache_config,
        )
