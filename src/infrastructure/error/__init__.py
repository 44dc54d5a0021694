"""Error handling infrastructure package."""

from src.infrastructure.error.context import ExceptionContext
from src.infrastructure.error.remote_operation import REMOTE_ERRORS, is_not_found, remote_operation

__all__ = [
    "ExceptionContext",
    "REMOTE_ERRORS",
    "is_not_found",
    "remote_operation",
]
