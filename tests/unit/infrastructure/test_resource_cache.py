"""Tests for the per-module resource cache."""

from unittest.mock import Mock

from src.domain.base.exceptions import RemoteClientError
from src.domain.base.value_objects import ResourceStatus
from src.domain.resource.entity import ResourceEntity
from src.domain.resource.listing import ResourceListing
from src.infrastructure.cache.resource_cache import ResourceCache


def _entity(name, **state):
    return ResourceEntity(name=name, resource_group="rg", remote_state=dict(state))


class TestResourceCache:
    """Test cache hits, misses, full loads and invalidation."""

    def setup_method(self):
        self.load_one = Mock(side_effect=lambda name, resource_group=None: _entity(name))
        self.load_all = Mock(return_value=ResourceListing([_entity("a"), _entity("b")], pages_fetched=1))
        self.now = [0.0]
        self.cache = ResourceCache(self.load_one, self.load_all, clock=lambda: self.now[0])

    def test_get_miss_loads_once_then_hits(self):
        """Test get miss loads once then hits."""
        first = self.cache.get("a")
        second = self.cache.get("a")

        assert first is second
        self.load_one.assert_called_once_with("a", None)

    def test_negative_result_is_cached(self):
        """Test negative result is cached."""
        self.load_one.side_effect = None
        self.load_one.return_value = None

        assert self.cache.get("ghost") is None
        assert self.cache.get("ghost") is None
        assert self.load_one.call_count == 1
        assert self.cache.get_stats()["absent_entries"] == 1

    def test_single_get_does_not_mark_fully_loaded(self):
        """Test single get does not mark fully loaded."""
        self.cache.get("a")
        assert not self.cache.fully_loaded

        listing = self.cache.list()
        assert listing.names() == ("a", "b")
        self.load_all.assert_called_once()

    def test_list_served_from_memory_after_full_load(self):
        """Test list served from memory after full load."""
        self.cache.list()
        self.cache.list()
        self.cache.get("b")

        assert self.cache.fully_loaded
        assert self.cache.loaded_at is not None
        self.load_all.assert_called_once()
        self.load_one.assert_not_called()

    def test_full_load_keeps_entity_instances_fresh(self):
        """Test full load keeps entity instances fresh."""
        cached = self.cache.get("a")
        self.load_all.return_value = ResourceListing([_entity("a", version=2)])

        listing = self.cache.list()

        assert listing[0] is cached
        assert cached.remote_state == {"version": 2}

    def test_full_load_drops_entries_missing_remotely(self):
        """Test full load drops entries missing remotely."""
        self.cache.get("gone")
        listing = self.cache.list()

        assert "gone" not in listing.names()
        assert self.cache.peek("gone") is None

    def test_degraded_load_is_not_marked_loaded(self):
        """Test degraded load is not marked loaded."""
        error = RemoteClientError("throttled", status_code=429)
        self.load_all.return_value = ResourceListing([_entity("a")], degraded=True, error=error, pages_fetched=1)

        listing = self.cache.list()

        assert listing.degraded
        assert listing.error is error
        assert listing.names() == ("a",)
        assert not self.cache.fully_loaded
        self.cache.list()
        assert self.load_all.call_count == 2

    def test_evict_hides_entity_and_marks_tombstone(self):
        """Test evict hides entity and marks tombstone."""
        entity = self.cache.get("a")
        self.cache.evict("a")

        assert entity.status == ResourceStatus.DELETED
        assert self.cache.get("a") is None
        assert self.load_one.call_count == 1

    def test_deleted_entities_are_not_listed(self):
        """Test deleted entities are not listed."""
        self.load_all.return_value = ResourceListing(
            [_entity("a"), ResourceEntity(name="b", resource_group="rg", status=ResourceStatus.DELETED)]
        )
        assert self.cache.list().names() == ("a",)

    def test_invalidate_single_name_refetches(self):
        """Test invalidate single name refetches."""
        self.cache.list()
        self.cache.invalidate("a")
        self.cache.get("a")

        self.load_one.assert_called_once_with("a", None)

    def test_invalidate_all_resets_full_load(self):
        """Test invalidate all resets full load."""
        self.cache.list()
        self.cache.invalidate()

        assert not self.cache.fully_loaded
        assert self.cache.loaded_at is None
        self.cache.list()
        assert self.load_all.call_count == 2

    def test_upsert_is_local_and_updates_in_place(self):
        """Test upsert is local and updates in place."""
        cached = self.cache.get("a")
        result = self.cache.upsert(_entity("a", tags={"env": "prod"}))

        assert result is cached
        assert cached.remote_state == {"tags": {"env": "prod"}}
        assert self.load_one.call_count == 1
        self.load_all.assert_not_called()

    def test_ttl_expiry_triggers_reload(self):
        """Test TTL expiry triggers reload."""
        cache = ResourceCache(self.load_one, self.load_all, ttl_seconds=60, clock=lambda: self.now[0])
        cache.list()
        self.now[0] = 30.0
        cache.list()
        assert self.load_all.call_count == 1

        self.now[0] = 61.0
        cache.list()
        assert self.load_all.call_count == 2

    def test_group_scoped_cache_keeps_namesakes_apart(self):
        """Test group-scoped cache keeps namesakes apart."""
        self.load_all.return_value = ResourceListing(
            [ResourceEntity(name="w", resource_group="rg-a"), ResourceEntity(name="w", resource_group="rg-b")]
        )
        cache = ResourceCache(self.load_one, self.load_all, group_scoped=True)

        assert len(cache.list()) == 2
        assert cache.get("w", "rg-b").resource_group == "rg-b"
        assert cache.key("w", "rg-a") == ("rg-a", "w")
        self.load_one.assert_not_called()

    def test_group_less_get_falls_back_to_any_group(self):
        """Test group-less get falls back to any group."""
        cache = ResourceCache(self.load_one, self.load_all, group_scoped=True)
        cache.list()

        assert cache.get("b").resource_group == "rg"
        self.load_one.assert_not_called()
