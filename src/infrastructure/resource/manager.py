"""Resource manager - fixed set of top-level modules for one subscription."""
from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional, Sequence, Tuple

from src.config.schemas.cache_schema import CacheConfig
from src.domain.base.exceptions import ConfigurationError, UnknownKindError
from src.domain.base.ports import RemoteClientPort
from src.domain.base.value_objects import ParentPath
from src.domain.resource.kind import ResourceKind
from src.domain.resource.listing import ResourceListing
from src.infrastructure.logging.logger import get_logger
from src.infrastructure.resource.module import ResourceModule


def _walk_kinds(kinds: Sequence[ResourceKind]) -> Iterator[ResourceKind]:
    for kind in kinds:
        yield kind
        yield from _walk_kinds(kind.child_kinds)


class ResourceManager:
    """
    Entry point for one service within one subscription.

    The top-level modules are created once, in the order of ``kinds``, and
    never change afterwards. Child modules are created on demand by the
    entities that own them. ``clients`` maps a kind name (or its resource
    type) to the remote client serving that kind.
    """

    service_name = "resources"

    def __init__(
        self,
        subscription_id: str,
        kinds: Sequence[ResourceKind],
        clients: Mapping[str, RemoteClientPort],
        cache_config: Optional[CacheConfig] = None,
    ):
        if not subscription_id:
            raise ConfigurationError("A subscription id is required", missing_fields=["subscription_id"])
        self.subscription_id = subscription_id
        self.cache_config = cache_config or CacheConfig()
        self._clients: Dict[str, RemoteClientPort] = dict(clients)
        self._logger = get_logger(__name__)

        for kind in _walk_kinds(kinds):
            self.client_for(kind)

        modules = tuple(self.create_module(kind) for kind in kinds)
        self._modules: Tuple[ResourceModule, ...] = modules
        self._modules_by_kind: Dict[str, ResourceModule] = {}
        for module in modules:
            if module.name in self._modules_by_kind:
                raise ConfigurationError(f"Resource kind '{module.name}' is registered twice")
            self._modules_by_kind[module.name] = module

        self._logger.debug(
            "Resource manager initialized",
            service=self.service_name,
            subscription_id=subscription_id,
            modules=[module.name for module in modules],
        )

    @property
    def parent_identifiers(self) -> ParentPath:
        return ParentPath(self.subscription_id)

    def client_for(self, kind: ResourceKind) -> RemoteClientPort:
        """
        Remote client serving ``kind``.

        Raises:
            ConfigurationError: If no client is registered for the kind
        """
        client = self._clients.get(kind.name) or self._clients.get(kind.resource_type)
        if client is None:
            raise ConfigurationError(
                f"No remote client registered for resource kind '{kind.name}' ({kind.resource_type})",
                missing_fields=[kind.name],
            )
        return client

    def create_module(self, kind: ResourceKind) -> ResourceModule:
        return ResourceModule(
            kind,
            self,
            self.client_for(kind),
            page_size=self.cache_config.page_size,
            ttl_seconds=self.cache_config.ttl_seconds,
        )

    def module(self, kind: str) -> ResourceModule:
        """
        Top-level module of the given kind.

        Raises:
            UnknownKindError: If no module of that kind was registered
        """
        module = self._modules_by_kind.get(kind)
        if module is None:
            raise UnknownKindError(kind, list(self._modules_by_kind))
        return module

    def all_modules(self) -> Tuple[ResourceModule, ...]:
        return self._modules

    def list_all(self) -> Dict[str, ResourceListing]:
        """List every top-level module, keyed by kind name in registration order."""
        return {module.name: module.list() for module in self._modules}

    def refresh(self) -> None:
        for module in self._modules:
            module.refresh()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(subscription_id={self.subscription_id!r})"
