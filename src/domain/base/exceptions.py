"""Domain exceptions shared by every resource kind."""

from typing import Any, Dict, List, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class InvalidStateError(DomainException):
    """Raised when an operation is illegal for the current lifecycle state."""

    def __init__(self, message: str, resource_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_STATE", details)
        self.resource_name = resource_name


class ResourceValidationError(InvalidStateError):
    """Raised when a draft is missing mandatory input or names an unknown field."""

    def __init__(self, message: str, resource_name: Optional[str] = None, fields: Optional[List[str]] = None):
        super().__init__(message, resource_name, {"fields": fields or []})
        self.error_code = "VALIDATION_ERROR"
        self.fields = fields or []


class UnsupportedOperationError(DomainException):
    """Raised when a resource kind does not support the requested mutation."""

    def __init__(self, kind: str, operation: str):
        super().__init__(
            f"Operation '{operation}' is not supported for resource kind '{kind}'",
            "UNSUPPORTED_OPERATION",
            {"kind": kind, "operation": operation},
        )
        self.kind = kind
        self.operation = operation


class UnknownKindError(DomainException):
    """Raised when a module of an unregistered kind is requested."""

    def __init__(self, kind: str, available: Optional[List[str]] = None):
        super().__init__(
            f"No module registered for resource kind '{kind}'",
            "UNKNOWN_KIND",
            {"kind": kind, "available": available or []},
        )
        self.kind = kind
        self.available = available or []


class RemoteOperationFailedError(DomainException):
    """Raised when a remote control-plane call fails on a write path."""

    def __init__(self, operation: str, target: str, cause: Optional[BaseException] = None, context: Optional[Dict[str, Any]] = None):
        reason = str(cause) if cause is not None else "unknown error"
        super().__init__(
            f"Remote operation '{operation}' on '{target}' failed: {reason}",
            "REMOTE_OPERATION_FAILED",
            context,
        )
        self.operation = operation
        self.target = target
        self.cause = cause


class RemoteClientError(Exception):
    """Raised by remote client adapters when the provider call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class RemoteNotFoundError(RemoteClientError):
    """Raised by remote client adapters when the addressed resource does not exist."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, 404, details)


class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", {"missing_fields": missing_fields or []})
        self.missing_fields = missing_fields or []
