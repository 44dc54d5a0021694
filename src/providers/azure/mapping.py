"""Payload helpers shared by the Azure resource kinds."""
from typing import Any, Dict, Optional

from src.domain.base.ports import RawPayload
from src.domain.base.value_objects import ResourceStatus
from src.domain.resource.entity import ResourceEntity, entity_from_payload

# ARM provisioningState -> lifecycle status
PROVISIONING_STATES: Dict[str, ResourceStatus] = {
    "succeeded": ResourceStatus.ACTIVE,
    "accepted": ResourceStatus.CREATING,
    "creating": ResourceStatus.CREATING,
    "provisioning": ResourceStatus.CREATING,
    "initializing": ResourceStatus.CREATING,
    "updating": ResourceStatus.UPDATING,
    "deleting": ResourceStatus.DELETING,
    "deleted": ResourceStatus.DELETED,
    "failed": ResourceStatus.FAILED,
    "canceled": ResourceStatus.FAILED,
}


def status_from_payload(raw: RawPayload) -> ResourceStatus:
    """Lifecycle status from ``properties.provisioningState`` (active when absent)."""
    properties = raw.get("properties") or {}
    state = properties.get("provisioningState") or raw.get("provisioningState")
    if not state:
        return ResourceStatus.ACTIVE
    return PROVISIONING_STATES.get(str(state).lower(), ResourceStatus.PENDING)


def to_azure_entity(raw: RawPayload, module) -> ResourceEntity:
    return entity_from_payload(raw, module, status_from_payload(raw))


def compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None, recursively."""
    result = {}
    for key, value in payload.items():
        if isinstance(value, dict):
            value = compact(value)
        if value is not None:
            result[key] = value
    return result


def inherited_location(entity: Optional[ResourceEntity]) -> Optional[str]:
    """Location of the entity or of its closest ancestor that reports one."""
    while entity is not None:
        location = entity.get_property("location")
        if location:
            return location
        entity = entity.module.parent_entity if entity.module is not None else None
    return None
