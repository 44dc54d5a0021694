"""Per-module in-memory cache of resource entities."""
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from src.domain.base.value_objects import ResourceStatus
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.listing import ResourceListing
from src.infrastructure.logging.logger import get_logger

LoadOne = Callable[[str, Optional[str]], Optional[ResourceEntity]]
LoadAll = Callable[[], ResourceListing]
CacheKey = Tuple[Optional[str], str]


class ResourceCache:
    """
    Entity store for one resource module.

    The cache is designed for:
    - Lazy full listing (one paginated load, then served from memory)
    - Single-name lookups that remember both hits and misses
    - Optimistic eviction after deletes
    - Optional staleness via ``ttl_seconds``

    Entries are keyed by ``(resource_group, name)``. When the module's parent
    fixes the resource group (child kinds, resource groups themselves) the
    group part is always None and names are unique on their own; a
    ``group_scoped`` cache serves a subscription-wide module where the same
    name may exist in several resource groups.

    A key mapped to ``None`` is a known absence, not a tombstone. Entities
    with status ``DELETED`` are tombstones; both are hidden from readers.

    ``get``-miss-then-store and ``list``-load-then-mark-loaded run under one
    re-entrant lock so concurrent callers never duplicate a remote load.
    """

    def __init__(
        self,
        load_one: LoadOne,
        load_all: LoadAll,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        group_scoped: bool = False,
    ):
        self._load_one = load_one
        self._load_all = load_all
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self.group_scoped = group_scoped
        self._entries: Dict[CacheKey, Optional[ResourceEntity]] = {}
        self._lock = threading.RLock()
        self._loaded_clock: Optional[float] = None
        self.fully_loaded = False
        self.loaded_at: Optional[datetime] = None
        self._logger = get_logger(__name__)

    def key(self, name: str, resource_group: Optional[str] = None) -> CacheKey:
        return (resource_group if self.group_scoped else None, name)

    def key_of(self, entity: ResourceEntity) -> CacheKey:
        return self.key(entity.name, entity.resource_group)

    def _is_stale(self) -> bool:
        if self._ttl_seconds is None or self._loaded_clock is None:
            return False
        return self._clock() - self._loaded_clock > self._ttl_seconds

    @staticmethod
    def _visible(entity: Optional[ResourceEntity]) -> Optional[ResourceEntity]:
        if entity is None or entity.status == ResourceStatus.DELETED:
            return None
        return entity

    def _live_entries(self) -> List[ResourceEntity]:
        return [entity for entity in self._entries.values() if self._visible(entity) is not None]

    def _lookup(self, name: str, resource_group: Optional[str]) -> Tuple[bool, Optional[ResourceEntity]]:
        """Cached answer for a lookup as ``(known, entity)``."""
        key = self.key(name, resource_group)
        if key in self._entries:
            return True, self._entries[key]
        if self.group_scoped and resource_group is None:
            # Without a group, any live entry of that name answers the lookup.
            for (_, entry_name), entity in self._entries.items():
                if entry_name == name and self._visible(entity) is not None:
                    return True, entity
        return False, None

    def get(self, name: str, resource_group: Optional[str] = None) -> Optional[ResourceEntity]:
        """
        Get an entity by name, loading it on a cache miss.

        Args:
            name: Resource name
            resource_group: Resource group to look in; part of the cache key
                for group-scoped caches, passed to the loader on a miss

        Returns:
            Cached or freshly loaded entity, None if the resource does not exist
        """
        with self._lock:
            known, entity = self._lookup(name, resource_group)
            if known:
                self._logger.debug("Cache hit", name=name, resource_group=resource_group, present=entity is not None)
                return self._visible(entity)

            self._logger.debug("Cache miss", name=name, resource_group=resource_group)
            loaded = self._load_one(name, resource_group)
            if loaded is None:
                self._entries[self.key(name, resource_group)] = None
                return None
            return self._visible(self._store(loaded))

    def list(self) -> ResourceListing:
        """
        List all non-deleted entities, performing a full load when needed.

        Returns:
            Snapshot of the cached entities; degraded if the load was cut short
        """
        with self._lock:
            if self.fully_loaded and not self._is_stale():
                return ResourceListing(self._live_entries())

            listing = self._load_all()
            if listing.degraded:
                for entity in listing:
                    self._store(entity)
                self._logger.warning(
                    "Serving degraded listing",
                    loaded=len(listing),
                    cached=len(self._live_entries()),
                    error=str(listing.error),
                )
                return ResourceListing(
                    self._live_entries(),
                    degraded=True,
                    error=listing.error,
                    pages_fetched=listing.pages_fetched,
                )

            previous = self._entries
            self._entries = {}
            for entity in listing:
                key = self.key_of(entity)
                existing = previous.get(key)
                if existing is not None:
                    existing.apply(entity)
                    entity = existing
                self._entries[key] = entity
            self.fully_loaded = True
            self.loaded_at = datetime.now(timezone.utc)
            self._loaded_clock = self._clock()
            self._logger.debug("Cache fully loaded", entries=len(self._entries), pages=listing.pages_fetched)
            return ResourceListing(self._live_entries(), pages_fetched=listing.pages_fetched)

    def upsert(self, entity: ResourceEntity) -> ResourceEntity:
        """
        Insert or replace an entry without any remote call.

        An already cached entity for the same key takes over the new state in
        place, so holders of the old reference see the update.

        Returns:
            The entity now held by the cache
        """
        with self._lock:
            return self._store(entity)

    def _store(self, entity: ResourceEntity) -> ResourceEntity:
        key = self.key_of(entity)
        if self.group_scoped and key[0] is not None:
            # A group-less absence no longer holds once the name exists somewhere.
            if (None, entity.name) in self._entries and self._entries[(None, entity.name)] is None:
                del self._entries[(None, entity.name)]
        existing = self._entries.get(key)
        if existing is not None and existing is not entity:
            existing.apply(entity)
            return existing
        self._entries[key] = entity
        return entity

    def evict(self, name: str, resource_group: Optional[str] = None) -> None:
        """Record a confirmed or optimistic deletion: the key reads as absent."""
        with self._lock:
            key = self.key(name, resource_group)
            existing = self._entries.get(key)
            if existing is not None:
                existing.status = ResourceStatus.DELETED
            self._entries[key] = None
            if self.group_scoped and key[0] is not None:
                _, other = self._lookup(name, None)
                if self._visible(other) is None:
                    self._entries[(None, name)] = None

    def invalidate(self, name: Optional[str] = None, resource_group: Optional[str] = None) -> None:
        """
        Drop one entry, or everything when no name is given.

        Args:
            name: Entry to drop; the next get/list fetches it again
            resource_group: Group of the entry, for group-scoped caches
        """
        with self._lock:
            if name is not None:
                self._entries.pop(self.key(name, resource_group), None)
                # A full listing no longer covers the dropped name.
                self.fully_loaded = False
                return
            self._entries.clear()
            self.fully_loaded = False
            self.loaded_at = None
            self._loaded_clock = None

    def peek(self, name: str, resource_group: Optional[str] = None) -> Optional[ResourceEntity]:
        """Return the cached entity, if any, without loading."""
        with self._lock:
            return self._entries.get(self.key(name, resource_group))

    def cached_entities(self) -> List[ResourceEntity]:
        """Every entity currently held, tombstones included."""
        with self._lock:
            return [entity for entity in self._entries.values() if entity is not None]

    def get_stats(self) -> Dict[str, int]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        with self._lock:
            live = len(self._live_entries())
            absent = sum(1 for entity in self._entries.values() if entity is None)
            return {
                "cached_entries": live,
                "absent_entries": absent,
                "tombstones": len(self._entries) - live - absent,
                "fully_loaded": int(self.fully_loaded),
            }
