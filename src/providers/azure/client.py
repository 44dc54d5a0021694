"""
Azure SDK remote client

Adapts the operation groups of the azure-mgmt-* management clients to the
``RemoteClientPort`` used by resource modules. Each client is built from four
callables that receive already-parsed identifiers, so one adapter class
serves every resource kind:

    list_operation(parent)                      -> ItemPaged
    get_operation(parent, name)                 -> model
    delete_operation(resource_id)               -> LROPoller | None
    create_or_update_operation(parent, name, p) -> LROPoller | model
    update_operation(parent, name, p)           -> LROPoller | model   (optional)

Kinds with a partial-update (PATCH) call pass ``update_operation``; without
one, updates go through ``create_or_update_operation`` and must carry the
whole document. Listings are paged through ``ItemPaged.by_page(continuation_token)``,
long-running operations are awaited through ``poller.result()`` and models
are flattened into REST-shaped dictionaries.
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Optional

from azure.core.exceptions import AzureError, HttpResponseError, ResourceNotFoundError

from src.domain.base.exceptions import RemoteClientError, RemoteNotFoundError
from src.domain.base.ports import Page, RawPayload, RemoteClientPort
from src.domain.base.value_objects import ParentPath, ResourceId
from src.infrastructure.logging.logger import get_logger

ListOperation = Callable[[ParentPath], Any]
GetOperation = Callable[[ParentPath, str], Any]
DeleteOperation = Callable[[ResourceId], Any]
CreateOrUpdateOperation = Callable[[ParentPath, str, RawPayload], Any]
UpdateOperation = Callable[[ParentPath, str, RawPayload], Any]

logger = get_logger(__name__)


def to_payload(model: Any) -> RawPayload:
    """Convert an SDK model (or an already plain dict) into a REST-shaped dictionary."""
    if isinstance(model, dict):
        return model
    if hasattr(model, "serialize"):
        return model.serialize(keep_readonly=True)
    if hasattr(model, "as_dict"):
        return model.as_dict()
    raise TypeError(f"Cannot convert {type(model).__name__} to a resource payload")


def wait_for(result: Any) -> Any:
    """Block on a long-running operation poller; plain results pass through."""
    if result is not None and callable(getattr(result, "result", None)):
        return result.result()
    return result


def find_by_name(items: Iterable[Any], name: str) -> Any:
    """
    Find an item by name in a listing.

    Used for single-name lookups of kinds whose ``get`` call needs a resource
    group the caller did not supply.

    Raises:
        ResourceNotFoundError: If no item carries the name
    """
    for item in items:
        item_name = item.get("name") if isinstance(item, dict) else getattr(item, "name", None)
        if item_name == name:
            return item
    raise ResourceNotFoundError(f"Resource '{name}' not found")


@contextmanager
def translate_azure_errors(action: str, target: str) -> Iterator[None]:
    """Re-raise Azure SDK errors as ``RemoteClientError`` / ``RemoteNotFoundError``."""
    try:
        yield
    except ResourceNotFoundError as e:
        raise RemoteNotFoundError(f"{action} '{target}': resource not found", details=e.message) from e
    except HttpResponseError as e:
        raise RemoteClientError(
            f"{action} '{target}' failed: {e.message}",
            status_code=e.status_code,
            details=getattr(e, "error", None),
        ) from e
    except AzureError as e:
        raise RemoteClientError(f"{action} '{target}' failed: {e.message}") from e


class AzureSdkRemoteClient(RemoteClientPort):
    """Remote client for one resource kind backed by an Azure management SDK operation group."""

    def __init__(
        self,
        list_operation: ListOperation,
        get_operation: GetOperation,
        delete_operation: DeleteOperation,
        create_or_update_operation: CreateOrUpdateOperation,
        update_operation: Optional[UpdateOperation] = None,
    ):
        self._list = list_operation
        self._get = get_operation
        self._delete = delete_operation
        self._create_or_update = create_or_update_operation
        self._update = update_operation

    def list_page(self, parent: ParentPath, page_token: Optional[str] = None, page_size: Optional[int] = None) -> Page:
        """
        Fetch one page of a listing.

        The management APIs choose their own page size, so ``page_size`` is
        not forwarded.
        """
        with translate_azure_errors("list", str(parent)):
            pages = self._list(parent).by_page(continuation_token=page_token)
            page = next(pages, None)
            items = [to_payload(item) for item in page] if page is not None else []
            next_token = getattr(pages, "continuation_token", None) if page is not None else None
        logger.debug("Listed page", parent=str(parent), items=len(items), has_more=bool(next_token))
        return Page(items=items, next_page_token=next_token)

    def get_one(self, parent: ParentPath, name: str) -> Optional[RawPayload]:
        try:
            with translate_azure_errors("get", f"{parent}/{name}"):
                model = self._get(parent, name)
        except RemoteNotFoundError:
            return None
        return to_payload(model) if model is not None else None

    def delete(self, resource_id: str) -> None:
        parsed = ResourceId.parse(resource_id)
        with translate_azure_errors("delete", resource_id):
            wait_for(self._delete(parsed))

    def create_or_update(self, parent: ParentPath, name: str, payload: RawPayload) -> RawPayload:
        with translate_azure_errors("create_or_update", f"{parent}/{name}"):
            return to_payload(wait_for(self._create_or_update(parent, name, payload)))

    def update(self, parent: ParentPath, name: str, payload: RawPayload) -> RawPayload:
        if self._update is None:
            return self.create_or_update(parent, name, payload)
        with translate_azure_errors("update", f"{parent}/{name}"):
            return to_payload(wait_for(self._update(parent, name, payload)))
