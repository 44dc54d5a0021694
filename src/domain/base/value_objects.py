"""Value objects shared by every resource kind."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ResourceStatus(str, Enum):
    """Lifecycle status of a materialized resource."""

    PENDING = "Pending"
    CREATING = "Creating"
    ACTIVE = "Active"
    UPDATING = "Updating"
    DELETING = "Deleting"
    DELETED = "Deleted"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ResourceStatus.DELETED, ResourceStatus.FAILED)


@dataclass(frozen=True)
class ParentPath:
    """Identifiers of the ancestors a remote listing is scoped to.

    ``names`` holds the ancestor resource names from the outermost parent
    (e.g. the database account) to the direct parent (e.g. the keyspace).
    """

    subscription_id: str
    resource_group: Optional[str] = None
    names: Tuple[str, ...] = ()

    def child(self, name: str, resource_group: Optional[str] = None) -> ParentPath:
        return ParentPath(
            subscription_id=self.subscription_id,
            resource_group=resource_group or self.resource_group,
            names=self.names + (name,),
        )

    def __str__(self) -> str:
        parts = [self.subscription_id]
        if self.resource_group:
            parts.append(self.resource_group)
        parts.extend(self.names)
        return "/".join(parts)


_SUBSCRIPTIONS = "subscriptions"
_RESOURCE_GROUPS = "resourceGroups"
_PROVIDERS = "providers"


@dataclass(frozen=True)
class ResourceId:
    """Fully-qualified ARM resource identifier.

    Two shapes are supported:
      /subscriptions/{sub}/resourceGroups/{rg}
      /subscriptions/{sub}/resourceGroups/{rg}/providers/{namespace}/{type}/{name}[/{type}/{name}...]
    """

    subscription_id: str
    resource_group: str
    namespace: Optional[str] = None
    types: Tuple[str, ...] = ()
    names: Tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if len(self.types) != len(self.names):
            raise ValueError("Resource id must have one name per resource type segment")
        if self.types and not self.namespace:
            raise ValueError("Resource id with type segments requires a provider namespace")

    @classmethod
    def for_resource(
        cls,
        subscription_id: str,
        resource_group: str,
        resource_type: str,
        names: Tuple[str, ...],
    ) -> ResourceId:
        """Build an id from a full resource type such as
        ``Microsoft.DocumentDB/databaseAccounts/cassandraKeyspaces/tables``."""
        if resource_type.lower() == "microsoft.resources/resourcegroups":
            return cls(subscription_id=subscription_id, resource_group=names[-1])
        namespace, _, type_path = resource_type.partition("/")
        return cls(
            subscription_id=subscription_id,
            resource_group=resource_group,
            namespace=namespace,
            types=tuple(type_path.split("/")),
            names=tuple(names),
        )

    @classmethod
    def parse(cls, resource_id: str) -> ResourceId:
        segments = [s for s in resource_id.strip().split("/") if s]
        if len(segments) < 4 or segments[0].lower() != _SUBSCRIPTIONS.lower() or segments[2].lower() != _RESOURCE_GROUPS.lower():
            raise ValueError(f"Invalid resource id: {resource_id}")

        subscription_id, resource_group = segments[1], segments[3]
        rest = segments[4:]
        if not rest:
            return cls(subscription_id=subscription_id, resource_group=resource_group)

        if rest[0].lower() != _PROVIDERS.lower() or len(rest) < 4 or (len(rest) - 2) % 2 != 0:
            raise ValueError(f"Invalid resource id: {resource_id}")

        pairs = rest[2:]
        return cls(
            subscription_id=subscription_id,
            resource_group=resource_group,
            namespace=rest[1],
            types=tuple(pairs[0::2]),
            names=tuple(pairs[1::2]),
        )

    @property
    def name(self) -> str:
        return self.names[-1] if self.names else self.resource_group

    @property
    def resource_type(self) -> str:
        if not self.types:
            return "Microsoft.Resources/resourceGroups"
        return "/".join((self.namespace,) + self.types)

    @property
    def parent(self) -> Optional[ResourceId]:
        """Id of the enclosing resource; None for resource groups."""
        if not self.types:
            return None
        if len(self.types) == 1:
            return ResourceId(subscription_id=self.subscription_id, resource_group=self.resource_group)
        return ResourceId(
            subscription_id=self.subscription_id,
            resource_group=self.resource_group,
            namespace=self.namespace,
            types=self.types[:-1],
            names=self.names[:-1],
        )

    def __str__(self) -> str:
        value = f"/{_SUBSCRIPTIONS}/{self.subscription_id}/{_RESOURCE_GROUPS}/{self.resource_group}"
        if self.types:
            value += f"/{_PROVIDERS}/{self.namespace}"
            for type_name, name in zip(self.types, self.names):
                value += f"/{type_name}/{name}"
        return value
