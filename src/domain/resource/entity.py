"""Resource entity - in-memory view of a materialized remote resource."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from src.domain.base.exceptions import UnknownKindError
from src.domain.base.ports import RawPayload
from src.domain.base.value_objects import ResourceId, ResourceStatus

if TYPE_CHECKING:
    from src.domain.resource.kind import ResourceKind
    from src.infrastructure.resource.module import ResourceModule


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class ResourceEntity:
    """A remote resource as last observed by its owning module."""

    name: str
    resource_group: Optional[str]
    parent_path: Tuple[str, ...] = ()
    remote_state: RawPayload = field(default_factory=dict)
    status: ResourceStatus = ResourceStatus.ACTIVE
    module: Optional["ResourceModule"] = field(default=None, repr=False)
    synced_at: datetime = field(default_factory=_utcnow)
    _sub_modules: Optional[Dict[str, "ResourceModule"]] = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def kind(self) -> Optional["ResourceKind"]:
        return self.module.kind if self.module else None

    @property
    def subscription_id(self) -> Optional[str]:
        return self.module.parent_identifiers.subscription_id if self.module else None

    @property
    def id(self) -> str:
        """Fully-qualified resource id, preferring the one reported remotely."""
        remote_id = self.remote_state.get("id")
        if remote_id:
            return remote_id
        if self.module is None:
            raise ValueError(f"Entity '{self.name}' is not attached to a module")
        return str(self.module.resource_id(self.name, self.resource_group))

    @property
    def is_deleted(self) -> bool:
        return self.status == ResourceStatus.DELETED

    @property
    def is_active(self) -> bool:
        return self.status == ResourceStatus.ACTIVE

    def get_property(self, *path: str, default: Any = None) -> Any:
        """Read a nested value from the remote payload."""
        current: Any = self.remote_state
        for key in path:
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return default if current is None else current

    def sub_modules(self) -> List["ResourceModule"]:
        """Child modules declared by this entity's kind, created on first use."""
        with self._lock:
            if self._sub_modules is None:
                if self.module is None:
                    self._sub_modules = {}
                else:
                    self._sub_modules = {
                        child.name: self.module.create_child_module(child, self)
                        for child in self.module.kind.child_kinds
                    }
            return list(self._sub_modules.values())

    def loaded_sub_modules(self) -> List["ResourceModule"]:
        """Child modules built so far, without creating the missing ones."""
        with self._lock:
            return list(self._sub_modules.values()) if self._sub_modules else []

    def sub_module(self, kind_name: str) -> "ResourceModule":
        modules = {module.name: module for module in self.sub_modules()}
        if kind_name not in modules:
            raise UnknownKindError(kind_name, list(modules))
        return modules[kind_name]

    def apply(self, other: ResourceEntity) -> None:
        """Take over the observed state of a fresher copy of the same resource."""
        self.resource_group = other.resource_group or self.resource_group
        self.remote_state = other.remote_state
        self.status = other.status
        self.synced_at = other.synced_at

    def same_resource(self, other: ResourceEntity) -> bool:
        return (
            self.name == other.name
            and self.parent_path == other.parent_path
            and (self.kind.resource_type if self.kind else None) == (other.kind.resource_type if other.kind else None)
        )

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they identify the same resource."""
        if not isinstance(other, ResourceEntity):
            return False
        return self.same_resource(other) and self.resource_group == other.resource_group

    def __hash__(self) -> int:
        return hash((self.name, self.parent_path))


def _parse_id(remote_id: Optional[str]) -> Optional[ResourceId]:
    if not remote_id:
        return None
    try:
        return ResourceId.parse(remote_id)
    except ValueError:
        return None


def entity_from_payload(raw: RawPayload, module: "ResourceModule", status: ResourceStatus = ResourceStatus.ACTIVE) -> ResourceEntity:
    """Default ``to_entity`` for payloads carrying ``name`` and optionally an ARM ``id``."""
    parent = module.parent_identifiers
    resource_id = _parse_id(raw.get("id"))
    resource_group = resource_id.resource_group if resource_id else parent.resource_group
    name = raw.get("name") or (resource_id.name if resource_id else None)
    if not name:
        raise ValueError(f"Payload for kind '{module.kind.name}' carries no resource name")
    return ResourceEntity(
        name=name,
        resource_group=resource_group,
        parent_path=parent.names,
        remote_state=raw,
        status=status,
        module=module,
    )
