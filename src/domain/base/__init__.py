"""Base domain layer - shared kernel for all resource kinds."""

from .exceptions import (
    ConfigurationError,
    DomainException,
    InvalidStateError,
    RemoteClientError,
    RemoteNotFoundError,
    RemoteOperationFailedError,
    ResourceValidationError,
    UnknownKindError,
    UnsupportedOperationError,
)
from .ports import Page, RawPayload, RemoteClientPort
from .value_objects import ParentPath, ResourceId, ResourceStatus

__all__ = [
    # Exceptions
    "DomainException",
    "InvalidStateError",
    "ResourceValidationError",
    "UnsupportedOperationError",
    "UnknownKindError",
    "RemoteOperationFailedError",
    "RemoteClientError",
    "RemoteNotFoundError",
    "ConfigurationError",
    # Ports
    "Page",
    "RawPayload",
    "RemoteClientPort",
    # Value objects
    "ParentPath",
    "ResourceId",
    "ResourceStatus",
]
