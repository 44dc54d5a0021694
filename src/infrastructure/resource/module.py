"""Resource module - reads, deletes and draft creation for one resource kind under one parent."""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Union

from src.config.schemas.cache_schema import DEFAULT_PAGE_SIZE
from src.domain.base.exceptions import (
    InvalidStateError,
    RemoteOperationFailedError,
    ResourceValidationError,
    UnsupportedOperationError,
)
from src.domain.base.ports import RawPayload, RemoteClientPort
from src.domain.base.value_objects import ParentPath, ResourceId, ResourceStatus
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.kind import ResourceKind
from src.domain.resource.listing import ResourceListing
from src.infrastructure.cache.resource_cache import CacheKey, ResourceCache
from src.infrastructure.error.remote_operation import REMOTE_ERRORS, is_not_found, remote_operation
from src.infrastructure.logging.logger import get_logger
from src.infrastructure.resource.draft import Draft

if TYPE_CHECKING:
    from src.infrastructure.resource.manager import ResourceManager

ModuleParent = Union["ResourceManager", ResourceEntity]


class ResourceModule:
    """
    All resources of one kind under one parent.

    The parent is either a ``ResourceManager`` (top-level kinds such as
    resource groups or database accounts) or the ``ResourceEntity`` that owns
    the resources (keyspaces of an account, tables of a keyspace, ...).

    Reads go through the module's ``ResourceCache``; writes go through drafts
    created by ``create_draft`` / ``update_draft``.
    """

    def __init__(
        self,
        kind: ResourceKind,
        parent: ModuleParent,
        client: RemoteClientPort,
        page_size: int = DEFAULT_PAGE_SIZE,
        ttl_seconds: Optional[float] = None,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {page_size}")
        self.kind = kind
        self.parent = parent
        self.client = client
        self.page_size = page_size
        self.ttl_seconds = ttl_seconds
        group_scoped = kind.requires_resource_group and self.parent_identifiers.resource_group is None
        self.cache = ResourceCache(self._load_resource, self._load_resources, ttl_seconds, group_scoped=group_scoped)
        self._logger = get_logger(__name__)

    @property
    def name(self) -> str:
        return self.kind.name

    @property
    def parent_entity(self) -> Optional[ResourceEntity]:
        return self.parent if isinstance(self.parent, ResourceEntity) else None

    @property
    def manager(self) -> "ResourceManager":
        """The manager at the root of this module's parent chain."""
        parent = self.parent_entity
        if parent is None:
            return self.parent
        if parent.module is None:
            raise InvalidStateError(f"Parent '{parent.name}' of module '{self.name}' is detached", parent.name)
        return parent.module.manager

    @property
    def parent_identifiers(self) -> ParentPath:
        """Identifiers a remote listing of this module is scoped to."""
        parent = self.parent_entity
        if parent is None:
            return self.manager.parent_identifiers
        return parent.module.parent_identifiers.child(parent.name, parent.resource_group)

    def scope(self, resource_group: Optional[str] = None) -> ParentPath:
        """Parent identifiers, narrowed to ``resource_group`` when one is given."""
        parent = self.parent_identifiers
        if resource_group and resource_group != parent.resource_group:
            return ParentPath(parent.subscription_id, resource_group, parent.names)
        return parent

    def list(self) -> ResourceListing:
        """
        List all resources of this kind under the parent.

        Returns:
            Non-deleted entities; ``degraded`` is set when a remote failure cut
            the listing short
        """
        return self.cache.list()

    def get(self, name: str, resource_group: Optional[str] = None) -> Optional[ResourceEntity]:
        """
        Get a resource by name.

        Args:
            name: Resource name
            resource_group: Resource group to look in when the parent does not fix one

        Returns:
            The entity, or None if the resource does not exist

        Raises:
            RemoteOperationFailedError: If the lookup failed for a reason other than not-found
        """
        return self.cache.get(name, resource_group)

    def exists(self, name: str, resource_group: Optional[str] = None) -> bool:
        return self.get(name, resource_group) is not None

    def refresh(self) -> None:
        """
        Forget everything cached; the next read goes to the remote source.

        Child modules already built by cached entities are refreshed too, so
        callers holding those entities do not keep reading stale children.
        """
        for entity in self.cache.cached_entities():
            for module in entity.loaded_sub_modules():
                module.refresh()
        self.cache.invalidate()

    def delete(self, name: str, resource_group: Optional[str] = None) -> None:
        """
        Delete a resource and evict it from the cache.

        Deleting a name that does not exist is a no-op.

        Raises:
            RemoteOperationFailedError: If the remote delete failed
        """
        entity = self.get(name, resource_group)
        if entity is None:
            self._logger.info("Resource already absent, nothing to delete", kind=self.name, name=name)
            return

        resource_id = entity.id
        previous_status = entity.status
        entity.status = ResourceStatus.DELETING
        try:
            with remote_operation(f"{self.name}.delete", resource_id, kind=self.name):
                self.client.delete(resource_id)
        except RemoteOperationFailedError:
            entity.status = previous_status
            raise
        self.cache.evict(name, entity.resource_group)

    def resource_id(self, name: str, resource_group: Optional[str] = None) -> ResourceId:
        """Fully-qualified id of the resource ``name`` under this module's parent."""
        parent = self.parent_identifiers
        resource_group = resource_group or parent.resource_group
        if self.kind.requires_resource_group and not resource_group:
            raise ResourceValidationError(
                f"Resource group is required to address {self.name} '{name}'", name, ["resource_group"]
            )
        return ResourceId.for_resource(
            parent.subscription_id,
            resource_group or name,
            self.kind.resource_type,
            parent.names + (name,),
        )

    def create_draft(self, name: str, resource_group: Optional[str] = None) -> Draft:
        """
        Start a draft for a resource that does not exist yet.

        Args:
            name: Name of the resource to create
            resource_group: Target resource group; mandatory for most kinds

        Raises:
            ResourceValidationError: If the kind requires a resource group and none is given
            InvalidStateError: If an active resource with this name already exists
        """
        if self.kind.requires_resource_group and not resource_group:
            raise ResourceValidationError(
                f"Resource group is required to create {self.name} '{name}'", name, ["resource_group"]
            )
        existing = self.get(name, resource_group)
        if existing is not None and existing.status == ResourceStatus.ACTIVE:
            raise InvalidStateError(f"{self.name} '{name}' already exists", name)
        return Draft(self, name, resource_group)

    def update_draft(self, entity: ResourceEntity) -> Draft:
        """
        Start a draft that modifies an existing resource.

        Raises:
            UnsupportedOperationError: If resources of this kind are immutable after creation
            InvalidStateError: If the entity has been deleted
        """
        if not self.kind.supports_update:
            raise UnsupportedOperationError(self.name, "update")
        if entity.is_deleted:
            raise InvalidStateError(f"{self.name} '{entity.name}' has been deleted", entity.name)
        return Draft(self, entity.name, entity.resource_group, origin=entity)

    def update_or_create_draft(self, name: str, resource_group: Optional[str] = None) -> Draft:
        existing = self.get(name, resource_group)
        if existing is not None:
            return self.update_draft(existing)
        return self.create_draft(name, resource_group)

    def to_entity(self, raw: RawPayload) -> ResourceEntity:
        return self.kind.to_entity(raw, self)

    def create_child_module(self, kind: ResourceKind, parent: ResourceEntity) -> ResourceModule:
        """Build the module of a child kind owned by ``parent``."""
        return ResourceModule(
            kind,
            parent,
            self.manager.client_for(kind),
            page_size=self.page_size,
            ttl_seconds=self.ttl_seconds,
        )

    def _load_resources(self) -> ResourceListing:
        """Page through the remote listing, deduplicating by name."""
        parent = self.parent_identifiers
        entities: Dict[CacheKey, ResourceEntity] = {}
        pages = 0
        page_token = None
        try:
            while True:
                page = self.client.list_page(parent, page_token=page_token, page_size=self.page_size)
                pages += 1
                for raw in page.items:
                    entity = self.to_entity(raw)
                    entities[self.cache.key_of(entity)] = entity
                self._logger.debug(
                    "Fetched listing page", kind=self.name, parent=str(parent), page=pages, items=len(page.items)
                )
                if not page.has_more:
                    break
                page_token = page.next_page_token
        except REMOTE_ERRORS as e:
            self._logger.warning(
                "Listing cut short by remote failure",
                kind=self.name,
                parent=str(parent),
                pages_fetched=pages,
                loaded=len(entities),
                error=str(e),
            )
            return ResourceListing(entities.values(), degraded=True, error=e, pages_fetched=pages)
        return ResourceListing(entities.values(), pages_fetched=pages)

    def _load_resource(self, name: str, resource_group: Optional[str] = None) -> Optional[ResourceEntity]:
        parent = self.scope(resource_group)
        try:
            raw = self.client.get_one(parent, name)
        except REMOTE_ERRORS as e:
            if is_not_found(e):
                self._logger.debug("Resource not found", kind=self.name, name=name)
                return None
            raise RemoteOperationFailedError(f"{self.name}.get", name, e, {"parent": str(parent)}) from e
        if raw is None:
            self._logger.debug("Resource not found", kind=self.name, name=name)
            return None
        return self.to_entity(raw)

    def __repr__(self) -> str:
        return f"ResourceModule(kind={self.name!r}, parent={str(self.parent_identifiers)!r})"
