"""Application Insights component kind."""
from typing import Any, Dict, Optional

from src.domain.base.ports import RawPayload
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.kind import CreateContext, FieldSpec, ResourceKind
from src.providers.azure.mapping import compact, to_azure_entity

COMPONENT_TYPE = "Microsoft.Insights/components"
DEFAULT_KIND = "web"
DEFAULT_APPLICATION_TYPE = "web"
DEFAULT_RETENTION_IN_DAYS = 90


def _component_document(values: Dict[str, Any]) -> RawPayload:
    return compact(
        {
            "location": values["location"],
            "kind": values["kind"],
            "tags": values["tags"] or None,
            "properties": {
                "Application_Type": values["application_type"],
                "RetentionInDays": values["retention_in_days"],
                "WorkspaceResourceId": values["workspace_resource_id"],
            },
        }
    )


def _create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    return _component_document(values)


def _update_payload(changes: Dict[str, Any], origin: ResourceEntity) -> Optional[RawPayload]:
    values = {name: spec.read(origin) for name, spec in APPLICATION_INSIGHTS.fields.items()}
    values.update(changes)
    return _component_document(values)


APPLICATION_INSIGHTS = ResourceKind(
    name="components",
    resource_type=COMPONENT_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_create_payload,
    to_update_payload=_update_payload,
    fields={
        "location": FieldSpec(read=lambda e: e.get_property("location"), required=True, create_only=True),
        "kind": FieldSpec(read=lambda e: e.get_property("kind", default=DEFAULT_KIND), default=DEFAULT_KIND, create_only=True),
        "application_type": FieldSpec(
            read=lambda e: e.get_property("properties", "Application_Type", default=DEFAULT_APPLICATION_TYPE),
            default=DEFAULT_APPLICATION_TYPE,
            create_only=True,
        ),
        "retention_in_days": FieldSpec(
            read=lambda e: e.get_property("properties", "RetentionInDays", default=DEFAULT_RETENTION_IN_DAYS),
            default=DEFAULT_RETENTION_IN_DAYS,
        ),
        "workspace_resource_id": FieldSpec(read=lambda e: e.get_property("properties", "WorkspaceResourceId")),
        "tags": FieldSpec(read=lambda e: e.get_property("tags", default={}), default={}),
    },
)
