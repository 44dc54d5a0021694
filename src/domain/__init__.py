"""
Domain Layer

This domain layer is organized by bounded contexts:
- base/: Shared kernel with exceptions, value objects and ports
- resource/: Resource entities, kinds, draft overlays and listings
"""

from .base import (
    DomainException,
    InvalidStateError,
    ParentPath,
    RemoteClientPort,
    RemoteOperationFailedError,
    ResourceId,
    ResourceStatus,
    ResourceValidationError,
    UnknownKindError,
    UnsupportedOperationError,
)
from .resource import FieldSpec, ResourceEntity, ResourceKind, ResourceListing

__all__ = [
    "DomainException",
    "InvalidStateError",
    "ResourceValidationError",
    "UnsupportedOperationError",
    "UnknownKindError",
    "RemoteOperationFailedError",
    "RemoteClientPort",
    "ParentPath",
    "ResourceId",
    "ResourceStatus",
    "FieldSpec",
    "ResourceEntity",
    "ResourceKind",
    "ResourceListing",
]
