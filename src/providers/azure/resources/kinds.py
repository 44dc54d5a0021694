"""Resource group kind."""
from typing import Any, Dict, Optional

from src.domain.base.ports import RawPayload
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.kind import CreateContext, FieldSpec, ResourceKind
from src.providers.azure.mapping import compact, to_azure_entity

RESOURCE_GROUP_TYPE = "Microsoft.Resources/resourceGroups"


def _create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    return compact({"location": values["location"], "tags": values["tags"] or None})


def _update_payload(changes: Dict[str, Any], origin: ResourceEntity) -> Optional[RawPayload]:
    if "tags" not in changes:
        return None
    # PUT on a resource group replaces it, so the location is always sent.
    return {"location": origin.get_property("location"), "tags": changes["tags"] or {}}


RESOURCE_GROUPS = ResourceKind(
    name="resource_groups",
    resource_type=RESOURCE_GROUP_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_create_payload,
    to_update_payload=_update_payload,
    requires_resource_group=False,
    fields={
        "location": FieldSpec(read=lambda e: e.get_property("location"), required=True, create_only=True),
        "tags": FieldSpec(read=lambda e: e.get_property("tags", default={}), default={}),
    },
)
