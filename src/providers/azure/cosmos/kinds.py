"""
Cosmos DB resource kinds.

Hierarchy: database account -> Cassandra keyspace -> Cassandra table.
Keyspaces and tables are immutable after creation; their schema and
throughput are chosen once, in the create payload.
"""
from typing import Any, Dict, List, Optional, Sequence

from src.domain.base.ports import RawPayload
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.kind import CreateContext, FieldSpec, ResourceKind
from src.providers.azure.mapping import compact, inherited_location, to_azure_entity

DATABASE_ACCOUNT_TYPE = "Microsoft.DocumentDB/databaseAccounts"
CASSANDRA_KEYSPACE_TYPE = "Microsoft.DocumentDB/databaseAccounts/cassandraKeyspaces"
CASSANDRA_TABLE_TYPE = "Microsoft.DocumentDB/databaseAccounts/cassandraKeyspaces/tables"

DEFAULT_ACCOUNT_KIND = "GlobalDocumentDB"
DEFAULT_CONSISTENCY_LEVEL = "Session"


def _throughput_options(throughput: Optional[int], autoscale_max_throughput: Optional[int]) -> Dict[str, Any]:
    if autoscale_max_throughput:
        return {"autoscaleSettings": {"maxThroughput": autoscale_max_throughput}}
    if throughput:
        return {"throughput": throughput}
    return {}


# Database accounts


def _account_capabilities(entity: ResourceEntity) -> List[str]:
    return [c.get("name") for c in entity.get_property("properties", "capabilities", default=[])]


def _account_document(values: Dict[str, Any]) -> RawPayload:
    return compact(
        {
            "location": values["location"],
            "kind": values["kind"],
            "tags": values["tags"] or None,
            "properties": {
                "databaseAccountOfferType": "Standard",
                "locations": [{"locationName": values["location"], "failoverPriority": 0, "isZoneRedundant": False}],
                "consistencyPolicy": {"defaultConsistencyLevel": values["consistency_level"]},
                "capabilities": [{"name": name} for name in values["capabilities"] or ()],
            },
        }
    )


def _account_create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    return _account_document(values)


def _account_update_payload(changes: Dict[str, Any], origin: ResourceEntity) -> Optional[RawPayload]:
    # Accounts are written with PUT, which needs the whole document.
    values = {name: spec.read(origin) for name, spec in DATABASE_ACCOUNTS.fields.items()}
    values.update(changes)
    return _account_document(values)


# Cassandra keyspaces


def _keyspace_create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    return {
        "location": inherited_location(context.parent),
        "properties": {
            "resource": {"id": context.name},
            "options": _throughput_options(values["throughput"], values["autoscale_max_throughput"]),
        },
    }


# Cassandra tables


def _schema(entity: ResourceEntity, key: str) -> List[Dict[str, Any]]:
    return entity.get_property("properties", "resource", "schema", key, default=[])


def _columns(columns: Sequence[Any]) -> List[Dict[str, str]]:
    """Accept ``{"name": ..., "type": ...}`` mappings or ``(name, type)`` pairs."""
    result = []
    for column in columns:
        if isinstance(column, dict):
            result.append({"name": column["name"], "type": column["type"]})
        else:
            name, column_type = column
            result.append({"name": name, "type": column_type})
    return result


def _cluster_keys(keys: Sequence[Any]) -> List[Dict[str, str]]:
    """Accept key names (ascending), ``(name, order)`` pairs or mappings."""
    result = []
    for key in keys or ():
        if isinstance(key, str):
            result.append({"name": key, "orderBy": "Asc"})
        elif isinstance(key, dict):
            result.append({"name": key["name"], "orderBy": key.get("orderBy", "Asc")})
        else:
            name, order = key
            result.append({"name": name, "orderBy": order})
    return result


def _table_create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    schema = {
        "columns": _columns(values["columns"]),
        "partitionKeys": [{"name": key} for key in values["partition_keys"]],
    }
    cluster_keys = _cluster_keys(values["cluster_keys"])
    if cluster_keys:
        schema["clusterKeys"] = cluster_keys
    return {
        "location": inherited_location(context.parent),
        "properties": {
            "resource": compact({"id": context.name, "defaultTtl": values["default_ttl"], "schema": schema}),
            "options": _throughput_options(values["throughput"], None),
        },
    }


CASSANDRA_TABLES = ResourceKind(
    name="tables",
    resource_type=CASSANDRA_TABLE_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_table_create_payload,
    supports_update=False,
    fields={
        "columns": FieldSpec(read=lambda e: _schema(e, "columns"), default=(), required=True),
        "partition_keys": FieldSpec(
            read=lambda e: [key.get("name") for key in _schema(e, "partitionKeys")], default=(), required=True
        ),
        "cluster_keys": FieldSpec(read=lambda e: _schema(e, "clusterKeys"), default=()),
        "default_ttl": FieldSpec(read=lambda e: e.get_property("properties", "resource", "defaultTtl")),
        "throughput": FieldSpec(read=lambda e: e.get_property("properties", "options", "throughput")),
    },
)

CASSANDRA_KEYSPACES = ResourceKind(
    name="cassandra_keyspaces",
    resource_type=CASSANDRA_KEYSPACE_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_keyspace_create_payload,
    supports_update=False,
    fields={
        "throughput": FieldSpec(read=lambda e: e.get_property("properties", "options", "throughput")),
        "autoscale_max_throughput": FieldSpec(
            read=lambda e: e.get_property("properties", "options", "autoscaleSettings", "maxThroughput")
        ),
    },
    child_kinds=(CASSANDRA_TABLES,),
)

DATABASE_ACCOUNTS = ResourceKind(
    name="database_accounts",
    resource_type=DATABASE_ACCOUNT_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_account_create_payload,
    to_update_payload=_account_update_payload,
    fields={
        "location": FieldSpec(read=lambda e: e.get_property("location"), required=True, create_only=True),
        "kind": FieldSpec(
            read=lambda e: e.get_property("kind", default=DEFAULT_ACCOUNT_KIND),
            default=DEFAULT_ACCOUNT_KIND,
            create_only=True,
        ),
        "capabilities": FieldSpec(read=_account_capabilities, default=(), create_only=True),
        "consistency_level": FieldSpec(
            read=lambda e: e.get_property(
                "properties", "consistencyPolicy", "defaultConsistencyLevel", default=DEFAULT_CONSISTENCY_LEVEL
            ),
            default=DEFAULT_CONSISTENCY_LEVEL,
        ),
        "tags": FieldSpec(read=lambda e: e.get_property("tags", default={}), default={}),
    },
    child_kinds=(CASSANDRA_KEYSPACES,),
)
