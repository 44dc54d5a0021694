"""Resource kind - capability record that parameterizes modules and drafts.

Every resource kind (tables, apps, components, ...) is described by one
``ResourceKind``: how raw payloads become entities, which fields a draft may
set, how a create or update request is built from those fields, and which
child kinds an entity of this kind owns.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Tuple

from src.domain.base.ports import RawPayload

if TYPE_CHECKING:
    from src.domain.resource.entity import ResourceEntity
    from src.infrastructure.resource.module import ResourceModule


@dataclass(frozen=True)
class FieldSpec:
    """A draft-settable field.

    ``read`` extracts the field's current value from an origin entity.
    ``server_significant`` fields are the only ones forwarded to
    ``to_update_payload``; ``create_only`` fields cannot be overridden on an
    update draft; ``required`` fields must be non-empty when creating;
    fields that are not ``nullable`` reject blank values in ``Draft.set``.
    """

    read: Callable[["ResourceEntity"], Any]
    default: Any = None
    required: bool = False
    create_only: bool = False
    server_significant: bool = True
    nullable: bool = True


@dataclass(frozen=True)
class CreateContext:
    """What a create-payload mapper knows besides the field values."""

    name: str
    resource_group: Optional[str]
    parent: Optional["ResourceEntity"] = None


ToEntity = Callable[[RawPayload, "ResourceModule"], "ResourceEntity"]
ToCreatePayload = Callable[[Dict[str, Any], CreateContext], RawPayload]
ToUpdatePayload = Callable[[Dict[str, Any], "ResourceEntity"], Optional[RawPayload]]


def _update_not_supported(changes: Dict[str, Any], origin: "ResourceEntity") -> Optional[RawPayload]:
    return None


@dataclass(frozen=True)
class ResourceKind:
    name: str
    resource_type: str
    to_entity: ToEntity
    to_create_payload: ToCreatePayload
    to_update_payload: ToUpdatePayload = _update_not_supported
    supports_update: bool = True
    requires_resource_group: bool = True
    fields: Mapping[str, FieldSpec] = field(default_factory=dict)
    child_kinds: Tuple["ResourceKind", ...] = ()
    update_notice: Optional[str] = None

    def field_spec(self, field_name: str) -> Optional[FieldSpec]:
        return self.fields.get(field_name)

    def child_kind(self, name: str) -> Optional["ResourceKind"]:
        for child in self.child_kinds:
            if child.name == name:
                return child
        return None

    def __str__(self) -> str:
        return self.name
