"""Listing result returned by modules and caches."""
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union, overload

from src.domain.resource.entity import ResourceEntity


class ResourceListing(Sequence[ResourceEntity]):
    """Immutable snapshot of the entities of one module.

    A listing is ``degraded`` when pagination was cut short by a remote
    failure; the entities fetched before the failure are still included and
    ``error`` holds the failure. A degraded listing is not exhaustive.
    """

    __slots__ = ("_items", "degraded", "error", "pages_fetched")

    def __init__(
        self,
        items: Iterable[ResourceEntity] = (),
        degraded: bool = False,
        error: Optional[BaseException] = None,
        pages_fetched: int = 0,
    ):
        self._items: Tuple[ResourceEntity, ...] = tuple(items)
        self.degraded = degraded
        self.error = error
        self.pages_fetched = pages_fetched

    @overload
    def __getitem__(self, index: int) -> ResourceEntity: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[ResourceEntity, ...]: ...

    def __getitem__(self, index: Union[int, slice]):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ResourceEntity]:
        return iter(self._items)

    def names(self) -> Tuple[str, ...]:
        return tuple(entity.name for entity in self._items)

    def __repr__(self) -> str:
        suffix = ", degraded" if self.degraded else ""
        return f"ResourceListing({list(self.names())}{suffix})"
