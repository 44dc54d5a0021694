"""Draft - locally staged create or update of a resource."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from src.domain.base.exceptions import (
    InvalidStateError,
    ResourceValidationError,
    UnknownKindError,
    UnsupportedOperationError,
)
from src.domain.base.value_objects import ResourceStatus
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.kind import CreateContext, FieldSpec, ResourceKind
from src.domain.resource.overlay import UNSET, Overlay
from src.infrastructure.error.remote_operation import remote_operation
from src.infrastructure.logging.logger import get_logger

if TYPE_CHECKING:
    from src.infrastructure.resource.module import ResourceModule

logger = get_logger(__name__)

_EMPTY_VALUES = (None, "", [], {}, ())


class Draft:
    """
    Pending create (no origin) or update (with origin) of one resource.

    ``set`` only records values in the overlay; the single remote call happens
    in ``commit``. A failed commit leaves the overlay untouched so it can be
    retried. Drafts are not thread-safe and belong to the caller that
    created them.
    """

    def __init__(
        self,
        module: Optional["ResourceModule"],
        name: str,
        resource_group: Optional[str] = None,
        origin: Optional[ResourceEntity] = None,
        *,
        kind: Optional[ResourceKind] = None,
        parent_draft: Optional[Draft] = None,
    ):
        if module is None and (kind is None or parent_draft is None):
            raise ValueError("A draft without a module needs a kind and a parent draft")
        self._module = module
        self.kind: ResourceKind = kind or module.kind
        self.name = name
        self.resource_group = resource_group
        self.origin = origin
        self.overlay = Overlay()
        self._parent_draft = parent_draft
        self._staged: List[Draft] = []

    @property
    def module(self) -> "ResourceModule":
        """Owning module; for staged child drafts it exists once the parent is committed."""
        if self._module is None:
            parent = self._parent_draft.origin
            if parent is None:
                raise InvalidStateError(
                    f"Cannot resolve {self.kind.name} '{self.name}': parent '{self._parent_draft.name}' is not committed",
                    self.name,
                )
            self._module = parent.sub_module(self.kind.name)
        return self._module

    @property
    def is_create(self) -> bool:
        return self.origin is None

    def _field(self, field: str) -> FieldSpec:
        spec = self.kind.field_spec(field)
        if spec is None:
            raise ResourceValidationError(
                f"Unknown field '{field}' for resource kind '{self.kind.name}'", self.name, [field]
            )
        return spec

    def set(self, field: str, value: Any) -> Draft:
        """
        Override a field value. No remote call is made.

        Raises:
            ResourceValidationError: If the kind has no such field or the field cannot be blank
            UnsupportedOperationError: If the field can only be chosen at creation
        """
        spec = self._field(field)
        if spec.create_only and self.origin is not None:
            raise UnsupportedOperationError(self.kind.name, f"update of '{field}'")
        if not spec.nullable and value in _EMPTY_VALUES:
            raise ResourceValidationError(
                f"Field '{field}' of {self.kind.name} '{self.name}' cannot be blank", self.name, [field]
            )
        self.overlay.set(field, value)
        return self

    def unset(self, field: str) -> Draft:
        self._field(field)
        self.overlay.unset(field)
        return self

    def get(self, field: str) -> Any:
        """Effective value: the override if set, else the origin's value, else the default."""
        spec = self._field(field)
        value = self.overlay.get(field)
        if value is not UNSET:
            return value
        if self.origin is not None:
            return spec.read(self.origin)
        return spec.default

    def values(self) -> Dict[str, Any]:
        return {field: self.get(field) for field in self.kind.fields}

    def changes(self, significant_only: bool = True) -> Dict[str, Any]:
        """Overridden fields whose value differs from the origin."""
        result = {}
        for field, value in self.overlay.items():
            spec = self.kind.fields[field]
            if significant_only and not spec.server_significant:
                continue
            if self.origin is not None and spec.read(self.origin) == value:
                continue
            result[field] = value
        return result

    def is_modified(self) -> bool:
        if self.origin is None:
            return True
        return bool(self.changes(significant_only=False))

    def reset(self) -> None:
        """Discard all overrides and staged child drafts."""
        self.overlay.clear()
        self._staged.clear()

    def stage_child(self, kind_name: str, name: str) -> Draft:
        """
        Stage a draft for a child resource, committed right after this draft.

        The child's module only exists once this draft's resource exists, so
        it is resolved at commit time. An existing child becomes an update.

        Raises:
            UnknownKindError: If this kind declares no such child kind
        """
        child_kind = self.kind.child_kind(kind_name)
        if child_kind is None:
            raise UnknownKindError(kind_name, [child.name for child in self.kind.child_kinds])
        for staged in self._staged:
            if staged.kind.name == kind_name and staged.name == name:
                return staged
        child = Draft(None, name, self.resource_group, kind=child_kind, parent_draft=self)
        self._staged.append(child)
        return child

    @property
    def staged_children(self) -> List[Draft]:
        return list(self._staged)

    def commit(self) -> ResourceEntity:
        """
        Apply the draft remotely and cache the result.

        Creates send the full payload built from the overlay over the kind's
        defaults. Updates send only the changed server-significant fields;
        nothing is sent when there is nothing to change.

        Returns:
            The materialized entity

        Raises:
            ResourceValidationError: If mandatory input is missing
            UnsupportedOperationError: If the kind cannot be updated
            RemoteOperationFailedError: If the remote call failed; the draft keeps its overrides
        """
        if self._module is None:
            self._bind()
        entity = self._create() if self.origin is None else self._update()
        self.origin = entity
        self.overlay.clear()
        self._commit_staged()
        return entity

    def _bind(self) -> None:
        """Resolve a staged child draft against the committed parent."""
        module = self.module
        if self.origin is not None:
            return
        existing = module.get(self.name, self.resource_group)
        if existing is None:
            return
        if not self.kind.supports_update:
            raise InvalidStateError(f"{self.kind.name} '{self.name}' already exists", self.name)
        self.origin = existing

    def _commit_staged(self) -> None:
        while self._staged:
            self._staged[0].commit()
            self._staged.pop(0)

    def _create(self) -> ResourceEntity:
        kind = self.kind
        if kind.requires_resource_group and not self.resource_group:
            raise ResourceValidationError(
                f"Resource group is required to create {kind.name} '{self.name}'", self.name, ["resource_group"]
            )
        values = self.values()
        missing = [field for field, spec in kind.fields.items() if spec.required and values[field] in _EMPTY_VALUES]
        if missing:
            raise ResourceValidationError(
                f"Missing required fields for {kind.name} '{self.name}': {', '.join(missing)}", self.name, missing
            )

        module = self.module
        payload = kind.to_create_payload(values, CreateContext(self.name, self.resource_group, module.parent_entity))
        target = str(module.resource_id(self.name, self.resource_group))
        with remote_operation(f"{kind.name}.create", target, kind=kind.name):
            raw = module.client.create_or_update(module.scope(self.resource_group), self.name, payload)
        return module.cache.upsert(module.to_entity(raw))

    def _update(self) -> ResourceEntity:
        kind = self.kind
        origin = self.origin
        if origin.status == ResourceStatus.DELETED:
            raise InvalidStateError(f"{kind.name} '{origin.name}' has been deleted", origin.name)

        changes = self.changes()
        if not changes:
            logger.debug("Nothing to update", kind=kind.name, name=origin.name)
            return origin
        if not kind.supports_update:
            raise UnsupportedOperationError(kind.name, "update")

        payload = kind.to_update_payload(changes, origin)
        if payload is None:
            logger.debug("Changes have no remote effect", kind=kind.name, name=origin.name, fields=sorted(changes))
            return origin

        module = self.module
        with remote_operation(f"{kind.name}.update", origin.id, kind=kind.name, fields=sorted(changes)):
            raw = module.client.update(module.scope(origin.resource_group), origin.name, payload)
        entity = module.cache.upsert(module.to_entity(raw))
        if kind.update_notice:
            logger.warning(kind.update_notice, kind=kind.name, name=origin.name)
        return entity

    def __repr__(self) -> str:
        mode = "create" if self.origin is None else "update"
        return f"Draft({self.kind.name}:{self.name}, {mode}, overlay={self.overlay.to_dict()!r})"
