"""Azure Cosmos DB accounts, Cassandra keyspaces and tables."""

from .kinds import CASSANDRA_KEYSPACES, CASSANDRA_TABLES, DATABASE_ACCOUNTS
from .manager import CosmosResourceManager

__all__ = ["DATABASE_ACCOUNTS", "CASSANDRA_KEYSPACES", "CASSANDRA_TABLES", "CosmosResourceManager"]
