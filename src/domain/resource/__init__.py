"""Resource bounded context - entities, kinds, overlays and listings."""

from .entity import ResourceEntity, entity_from_payload
from .kind import CreateContext, FieldSpec, ResourceKind
from .listing import ResourceListing
from .overlay import UNSET, Overlay

__all__ = [
    "ResourceEntity",
    "entity_from_payload",
    "CreateContext",
    "FieldSpec",
    "ResourceKind",
    "ResourceListing",
    "UNSET",
    "Overlay",
]
