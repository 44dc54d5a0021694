"""Remote operation wrapper - logging, timing and error translation for provider calls."""

import time
from contextlib import contextmanager
from typing import Iterator

from azure.core.exceptions import AzureError
from azure.core.exceptions import ResourceNotFoundError as AzureResourceNotFoundError

from src.domain.base.exceptions import RemoteClientError, RemoteNotFoundError, RemoteOperationFailedError
from src.infrastructure.error.context import ExceptionContext
from src.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

# Errors a remote client may raise for a failed provider call.
REMOTE_ERRORS = (RemoteClientError, AzureError)


def is_not_found(error: BaseException) -> bool:
    """Whether a remote error means the addressed resource does not exist."""
    if isinstance(error, (RemoteNotFoundError, AzureResourceNotFoundError)):
        return True
    return getattr(error, "status_code", None) == 404


@contextmanager
def remote_operation(operation: str, target: str, **context) -> Iterator[ExceptionContext]:
    """
    Run a remote write call, logging its outcome.

    Provider errors raised inside the block are re-raised as
    ``RemoteOperationFailedError`` carrying the operation name, the target
    and the original error.

    Usage:
        with remote_operation("tables.delete", resource_id):
            client.delete(resource_id)
    """
    exception_context = ExceptionContext(operation, target, **context)
    start_time = time.time()
    logger.info("Remote operation started", operation=operation, target=target, **context)
    try:
        yield exception_context
    except REMOTE_ERRORS as e:
        elapsed = time.time() - start_time
        logger.error(
            "Remote operation failed",
            operation=operation,
            target=target,
            error=str(e),
            duration=f"{elapsed:.3f}s",
        )
        raise RemoteOperationFailedError(operation, target, e, exception_context.to_dict()) from e
    elapsed = time.time() - start_time
    logger.info("Remote operation succeeded", operation=operation, target=target, duration=f"{elapsed:.3f}s")
