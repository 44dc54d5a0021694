"""
Spring Apps resource kinds.

Hierarchy: service -> app -> deployment. App and deployment payloads depend
on the pricing tier of the owning service:

    tier          persistent disk   temporary disk   deployment source
    Basic         1 GB              5 GB at /tmp     uploaded jar
    Standard      50 GB             5 GB at /tmp     uploaded jar
    StandardGen2  none              5 GB at /tmp     uploaded jar
    Enterprise    none              none             build result
"""
import re
from typing import TYPE_CHECKING, Any, Dict, Optional

from src.domain.base.ports import RawPayload
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.kind import CreateContext, FieldSpec, ResourceKind
from src.providers.azure.mapping import compact, to_azure_entity

if TYPE_CHECKING:
    from src.infrastructure.resource.draft import Draft

SPRING_SERVICE_TYPE = "Microsoft.AppPlatform/Spring"
SPRING_APP_TYPE = "Microsoft.AppPlatform/Spring/apps"
SPRING_DEPLOYMENT_TYPE = "Microsoft.AppPlatform/Spring/apps/deployments"

BASIC_TIER = "Basic"
STANDARD_TIER = "Standard"
ENTERPRISE_TIER = "Enterprise"
CONSUMPTION_TIER = "StandardGen2"
SKU_NAMES = {BASIC_TIER: "B0", STANDARD_TIER: "S0", ENTERPRISE_TIER: "E0", CONSUMPTION_TIER: "S0"}

DEFAULT_DISK_MOUNT_PATH = "/persistent"
BASIC_TIER_DEFAULT_DISK_SIZE = 1
STANDARD_TIER_DEFAULT_DISK_SIZE = 50
DEFAULT_TEMP_DISK_SIZE = 5
DEFAULT_TEMP_DISK_MOUNT_PATH = "/tmp"
DEFAULT_DEPLOYMENT_NAME = "default"
DEFAULT_RUNTIME_VERSION = "Java_17"
DEFAULT_CPU = 1.0
DEFAULT_MEMORY_IN_GB = 2.0
DEFAULT_CAPACITY = 1
UPDATE_APP_NOTICE = "It may take some moments for the configuration to be applied at server side!"


def service_tier(service: Optional[ResourceEntity]) -> str:
    if service is None:
        return BASIC_TIER
    return service.get_property("sku", "tier", default=BASIC_TIER)


def _parent_service(app: Optional[ResourceEntity]) -> Optional[ResourceEntity]:
    if app is None or app.module is None:
        return None
    return app.module.parent_entity


def normalize_runtime_version(version: Optional[str]) -> str:
    """``"Java 11"``, ``"java_11"`` and ``"11"`` all become ``"Java_11"``."""
    if not version:
        return DEFAULT_RUNTIME_VERSION
    match = re.search(r"(\d+)", str(version))
    return f"Java_{match.group(1)}" if match else DEFAULT_RUNTIME_VERSION


def to_cpu_string(cpu: float) -> str:
    if cpu < 1:
        return f"{int(cpu * 1000)}m"
    return str(int(cpu)) if float(cpu).is_integer() else str(cpu)


def to_memory_string(memory_in_gb: float) -> str:
    if memory_in_gb < 1:
        return f"{int(memory_in_gb * 1024)}Mi"
    return f"{int(memory_in_gb)}Gi"


def parse_cpu(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    if value.endswith("m"):
        return int(value[:-1]) / 1000
    return float(value)


def parse_memory(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    if value.endswith("Mi"):
        return int(value[:-2]) / 1024
    if value.endswith("Gi"):
        return float(value[:-2])
    return float(value)


# Services


def _service_document(values: Dict[str, Any]) -> RawPayload:
    tier = values["sku_tier"]
    return compact(
        {
            "location": values["location"],
            "sku": {"name": SKU_NAMES.get(tier, "S0"), "tier": tier},
            "tags": values["tags"] or None,
        }
    )


def _service_create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    return _service_document(values)


def _service_update_payload(changes: Dict[str, Any], origin: ResourceEntity) -> Optional[RawPayload]:
    values = {name: spec.read(origin) for name, spec in SPRING_SERVICES.fields.items()}
    values.update(changes)
    return _service_document(values)


# Apps


def _persistent_disk(enabled: bool, tier: str) -> Optional[Dict[str, Any]]:
    if not enabled or tier in (ENTERPRISE_TIER, CONSUMPTION_TIER):
        return None
    size = STANDARD_TIER_DEFAULT_DISK_SIZE if tier == STANDARD_TIER else BASIC_TIER_DEFAULT_DISK_SIZE
    return {"sizeInGB": size, "mountPath": DEFAULT_DISK_MOUNT_PATH}


def _app_create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    tier = service_tier(context.parent)
    properties: Dict[str, Any] = {"public": bool(values["public_endpoint_enabled"])}
    disk = _persistent_disk(values["persistent_disk_enabled"], tier)
    if disk:
        properties["persistentDisk"] = disk
    if tier != ENTERPRISE_TIER:
        properties["temporaryDisk"] = {"sizeInGB": DEFAULT_TEMP_DISK_SIZE, "mountPath": DEFAULT_TEMP_DISK_MOUNT_PATH}
    return {"properties": properties}


def _app_update_payload(changes: Dict[str, Any], origin: ResourceEntity) -> Optional[RawPayload]:
    properties: Dict[str, Any] = {}
    if "public_endpoint_enabled" in changes:
        properties["public"] = bool(changes["public_endpoint_enabled"])
    if "persistent_disk_enabled" in changes:
        tier = service_tier(_parent_service(origin))
        disk = _persistent_disk(changes["persistent_disk_enabled"], tier)
        properties["persistentDisk"] = disk or {"sizeInGB": 0, "mountPath": DEFAULT_DISK_MOUNT_PATH}
    if "active_deployment_name" in changes:
        properties["activeDeploymentName"] = changes["active_deployment_name"]
    return {"properties": properties} if properties else None


# Deployments


def _deployment_source(values: Dict[str, Any], tier: str) -> Dict[str, Any]:
    if tier == ENTERPRISE_TIER:
        return {"type": "BuildResult", "buildResultId": "<default>"}
    return compact(
        {
            "type": "Jar",
            "relativePath": "<default>",
            "runtimeVersion": normalize_runtime_version(values["runtime_version"]),
            "jvmOptions": values["jvm_options"],
        }
    )


def _resource_requests(cpu: Optional[float], memory_in_gb: Optional[float]) -> Dict[str, str]:
    return {
        "cpu": to_cpu_string(cpu if cpu is not None else DEFAULT_CPU),
        "memory": to_memory_string(memory_in_gb if memory_in_gb is not None else DEFAULT_MEMORY_IN_GB),
    }


def _deployment_create_payload(values: Dict[str, Any], context: CreateContext) -> RawPayload:
    service = _parent_service(context.parent)
    tier = service_tier(service)
    capacity = values["capacity"] or DEFAULT_CAPACITY
    sku = dict(service.get_property("sku", default={})) if service is not None else {}
    sku = sku or {"name": SKU_NAMES[BASIC_TIER], "tier": BASIC_TIER}
    sku["capacity"] = capacity
    return {
        "sku": sku,
        "properties": {
            "active": bool(values["active"]),
            "source": _deployment_source(values, tier),
            "deploymentSettings": {
                "resourceRequests": _resource_requests(values["cpu"], values["memory_in_gb"]),
                "scale": {"maxReplicas": capacity},
            },
        },
    }


def _deployment_update_payload(changes: Dict[str, Any], origin: ResourceEntity) -> Optional[RawPayload]:
    properties: Dict[str, Any] = {}
    if "cpu" in changes or "memory_in_gb" in changes:
        cpu = changes["cpu"] if "cpu" in changes else SPRING_DEPLOYMENTS.fields["cpu"].read(origin)
        memory = (
            changes["memory_in_gb"] if "memory_in_gb" in changes else SPRING_DEPLOYMENTS.fields["memory_in_gb"].read(origin)
        )
        properties["deploymentSettings"] = {"resourceRequests": _resource_requests(cpu, memory)}
    if "runtime_version" in changes or "jvm_options" in changes:
        source = dict(origin.get_property("properties", "source", default={}))
        if "runtime_version" in changes:
            source["runtimeVersion"] = normalize_runtime_version(changes["runtime_version"])
        if "jvm_options" in changes:
            source["jvmOptions"] = changes["jvm_options"]
        properties["source"] = source
    if "active" in changes:
        properties["active"] = bool(changes["active"])

    payload: Dict[str, Any] = {}
    if properties:
        payload["properties"] = properties
    if "capacity" in changes:
        sku = dict(origin.get_property("sku", default={}))
        sku["capacity"] = changes["capacity"]
        payload["sku"] = sku
    return payload or None


SPRING_DEPLOYMENTS = ResourceKind(
    name="deployments",
    resource_type=SPRING_DEPLOYMENT_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_deployment_create_payload,
    to_update_payload=_deployment_update_payload,
    fields={
        "runtime_version": FieldSpec(
            read=lambda e: e.get_property("properties", "source", "runtimeVersion"), default=DEFAULT_RUNTIME_VERSION
        ),
        "cpu": FieldSpec(
            read=lambda e: parse_cpu(e.get_property("properties", "deploymentSettings", "resourceRequests", "cpu")),
            default=DEFAULT_CPU,
        ),
        "memory_in_gb": FieldSpec(
            read=lambda e: parse_memory(e.get_property("properties", "deploymentSettings", "resourceRequests", "memory")),
            default=DEFAULT_MEMORY_IN_GB,
        ),
        "capacity": FieldSpec(read=lambda e: e.get_property("sku", "capacity"), default=DEFAULT_CAPACITY),
        "jvm_options": FieldSpec(read=lambda e: e.get_property("properties", "source", "jvmOptions")),
        "active": FieldSpec(read=lambda e: bool(e.get_property("properties", "active", default=False)), default=False),
    },
)

SPRING_APPS = ResourceKind(
    name="apps",
    resource_type=SPRING_APP_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_app_create_payload,
    to_update_payload=_app_update_payload,
    fields={
        "public_endpoint_enabled": FieldSpec(
            read=lambda e: bool(e.get_property("properties", "public", default=False)), default=False
        ),
        "persistent_disk_enabled": FieldSpec(
            read=lambda e: (e.get_property("properties", "persistentDisk", "sizeInGB", default=0) or 0) > 0,
            default=False,
        ),
        "active_deployment_name": FieldSpec(
            read=lambda e: e.get_property("properties", "activeDeploymentName"), nullable=False
        ),
    },
    child_kinds=(SPRING_DEPLOYMENTS,),
    update_notice=UPDATE_APP_NOTICE,
)

SPRING_SERVICES = ResourceKind(
    name="spring_services",
    resource_type=SPRING_SERVICE_TYPE,
    to_entity=to_azure_entity,
    to_create_payload=_service_create_payload,
    to_update_payload=_service_update_payload,
    fields={
        "location": FieldSpec(read=lambda e: e.get_property("location"), required=True, create_only=True),
        "sku_tier": FieldSpec(read=service_tier, default=STANDARD_TIER, create_only=True),
        "tags": FieldSpec(read=lambda e: e.get_property("tags", default={}), default={}),
    },
    child_kinds=(SPRING_APPS,),
)


def stage_active_deployment(app_draft: "Draft", name: str = DEFAULT_DEPLOYMENT_NAME) -> "Draft":
    """
    Stage the deployment that serves an app, committed right after the app.

    The staged deployment is marked active; an existing deployment of that
    name is updated instead of created.
    """
    deployment = app_draft.stage_child(SPRING_DEPLOYMENTS.name, name)
    deployment.set("active", True)
    return deployment
