"""Remote client port for paginated control-plane CRUD operations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.domain.base.value_objects import ParentPath

RawPayload = Dict[str, Any]


@dataclass(frozen=True)
class Page:
    """One page of raw items returned by a listing call."""

    items: List[RawPayload] = field(default_factory=list)
    next_page_token: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_page_token)


class RemoteClientPort(ABC):
    """Port for the provider client of one resource kind.

    Implementations own authentication, retries and transport timeouts.
    Failures are raised as ``RemoteClientError`` (or the provider SDK's own
    error types); a missing resource is reported either as ``None`` from
    ``get_one`` or as ``RemoteNotFoundError``.
    """

    @abstractmethod
    def list_page(self, parent: ParentPath, page_token: Optional[str] = None, page_size: Optional[int] = None) -> Page:
        """Fetch one page of resources under the given parent."""

    @abstractmethod
    def get_one(self, parent: ParentPath, name: str) -> Optional[RawPayload]:
        """Fetch a single resource by name, or None when it does not exist."""

    @abstractmethod
    def delete(self, resource_id: str) -> None:
        """Delete the resource with the given fully-qualified id."""

    @abstractmethod
    def create_or_update(self, parent: ParentPath, name: str, payload: RawPayload) -> RawPayload:
        """Create or update a resource and return its materialized payload."""

    def update(self, parent: ParentPath, name: str, payload: RawPayload) -> RawPayload:
        """
        Apply an update payload to an existing resource and return its materialized payload.

        Providers with a partial-update call (PATCH) override this. The
        default sends the payload through ``create_or_update``, which suits
        kinds whose update payload is the whole document.
        """
        return self.create_or_update(parent, name, payload)
