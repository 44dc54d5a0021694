"""Tests for resource groups, Application Insights and the subscription-wide manager."""

import os
from unittest.mock import Mock, patch

import pytest

from src.config import ConfigurationManager
from src.domain.base.exceptions import ConfigurationError
from src.domain.base.value_objects import ParentPath, ResourceStatus
from src.providers.azure import (
    APPLICATION_INSIGHTS,
    RESOURCE_GROUPS,
    ApplicationInsightsResourceManager,
    AzureResourceManager,
    CosmosResourceManager,
    ResourcesResourceManager,
)
from tests.fakes import SUBSCRIPTION_ID, InMemoryRemoteClient


class TestResourceGroups:
    """Test resource groups, the one kind that needs no resource group of its own."""

    def setup_method(self):
        self.client = InMemoryRemoteClient(RESOURCE_GROUPS.resource_type)
        self.manager = ResourcesResourceManager(SUBSCRIPTION_ID, {RESOURCE_GROUPS.name: self.client})
        self.groups = self.manager.resource_groups()

    def test_create_without_resource_group_argument(self):
        """Test create without resource group argument."""
        group = self.groups.create_draft("my-rg").set("location", "westus").commit()

        parent, name, payload = self.client.write_calls[-1]
        assert parent == ParentPath(SUBSCRIPTION_ID)
        assert name == "my-rg"
        assert payload == {"location": "westus"}
        assert group.id == f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/my-rg"
        assert group.resource_group == "my-rg"

    def test_tag_update_resends_location(self):
        """Test tag update resends location."""
        self.client.add("my-rg", location="westus")
        group = self.groups.get("my-rg")

        self.groups.update_draft(group).set("tags", {"team": "data"}).commit()

        _, _, payload = self.client.write_calls[-1]
        assert payload == {"location": "westus", "tags": {"team": "data"}}

    def test_delete_then_get_is_none(self):
        """Test delete then get is None."""
        self.client.add("my-rg", location="westus")
        group = self.groups.get("my-rg")

        self.groups.delete("my-rg")

        assert self.client.delete_calls == [group.id]
        assert group.is_deleted
        assert self.groups.get("my-rg") is None
        assert self.groups.list().names() == ()

    def test_from_sdk_wires_resource_group_operations(self):
        """Test from_sdk wires resource group operations."""
        client = Mock()
        client.resource_groups.get.return_value = {
            "id": f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/my-rg",
            "name": "my-rg",
            "location": "westus",
            "properties": {"provisioningState": "Succeeded"},
        }
        groups = ResourcesResourceManager.from_sdk(SUBSCRIPTION_ID, client).resource_groups()

        group = groups.get("my-rg")
        groups.delete("my-rg")

        client.resource_groups.get.assert_called_once_with("my-rg")
        client.resource_groups.begin_delete.assert_called_once_with("my-rg")
        client.resource_groups.begin_delete.return_value.result.assert_called_once_with()
        assert group.resource_group == "my-rg"


class TestApplicationInsights:
    def setup_method(self):
        self.client = InMemoryRemoteClient(APPLICATION_INSIGHTS.resource_type)
        self.manager = ApplicationInsightsResourceManager(SUBSCRIPTION_ID, {APPLICATION_INSIGHTS.name: self.client})
        self.components = self.manager.application_insights()

    def test_create_uses_defaults(self):
        """Test create uses defaults."""
        self.components.create_draft("insights", "rg").set("location", "westus").commit()

        parent, _, payload = self.client.write_calls[-1]
        assert parent == ParentPath(SUBSCRIPTION_ID, "rg")
        assert payload == {
            "location": "westus",
            "kind": "web",
            "properties": {"Application_Type": "web", "RetentionInDays": 90},
        }

    def test_update_resends_the_whole_component(self):
        """Test update resends the whole component."""
        self.client.add(
            "insights", location="westus", kind="web", properties={"Application_Type": "web", "RetentionInDays": 90}
        )
        component = self.components.get("insights", "rg")

        self.components.update_draft(component).set("retention_in_days", 30).commit()

        _, _, payload = self.client.write_calls[-1]
        assert payload == {
            "location": "westus",
            "kind": "web",
            "properties": {"Application_Type": "web", "RetentionInDays": 30},
        }

    def test_provisioning_state_maps_to_status(self):
        """Test provisioning state maps to status."""
        self.client.add("insights", location="westus", properties={"provisioningState": "Failed"})

        assert self.components.get("insights", "rg").status == ResourceStatus.FAILED

    def test_namesakes_in_two_resource_groups_are_both_listed(self):
        """Test namesakes in two resource groups are both listed."""
        self.client.add("insights", resource_group="rg-a", location="westus")
        self.client.add("insights", resource_group="rg-b", location="eastus")

        listing = self.components.list()

        assert len(listing) == 2
        assert sorted(component.resource_group for component in listing) == ["rg-a", "rg-b"]
        assert self.components.get("insights", "rg-b").get_property("location") == "eastus"
        assert self.client.get_calls == []


class TestAzureResourceManager:
    """Test the subscription-wide grouping of service managers."""

    def test_from_sdk_builds_only_the_given_services(self):
        """Test from_sdk builds only the given services."""
        manager = AzureResourceManager.from_sdk(SUBSCRIPTION_ID, resource_client=Mock(), cosmos_client=Mock())

        assert isinstance(manager.resources, ResourcesResourceManager)
        assert isinstance(manager.cosmos, CosmosResourceManager)
        assert [module.name for module in manager.all_modules()] == ["resource_groups", "database_accounts"]
        with pytest.raises(ConfigurationError) as exc_info:
            manager.spring_cloud
        assert exc_info.value.missing_fields == ["springcloud"]

    def test_subscription_mismatch_is_rejected(self):
        """Test subscription mismatch is rejected."""
        other = ResourcesResourceManager(
            "11111111-1111-1111-1111-111111111111",
            {RESOURCE_GROUPS.name: InMemoryRemoteClient(RESOURCE_GROUPS.resource_type)},
        )

        with pytest.raises(ConfigurationError):
            AzureResourceManager(SUBSCRIPTION_ID, resources=other)

    def test_refresh_reaches_every_manager(self):
        """Test refresh reaches every manager."""
        resources = Mock(subscription_id=SUBSCRIPTION_ID)
        cosmos = Mock(subscription_id=SUBSCRIPTION_ID)
        manager = AzureResourceManager(SUBSCRIPTION_ID, resources=resources, cosmos=cosmos)

        manager.refresh()

        resources.refresh.assert_called_once_with()
        cosmos.refresh.assert_called_once_with()

    def test_from_config_uses_subscription_and_cache_settings(self):
        """Test from_config uses subscription and cache settings."""
        env = {"AZRT_SUBSCRIPTION_ID": SUBSCRIPTION_ID, "AZRT_CACHE_PAGE_SIZE": "7"}
        with patch.dict(os.environ, env, clear=True):
            manager = AzureResourceManager.from_config(ConfigurationManager(), resource_client=Mock())

        assert manager.subscription_id == SUBSCRIPTION_ID
        assert manager.resources.resource_groups().page_size == 7
        assert [service.service_name for service in manager.managers()] == ["resources"]

    def test_from_config_requires_a_subscription(self):
        """Test from_config requires a subscription."""
        with patch.dict(os.environ, {}, clear=True), pytest.raises(ConfigurationError) as exc_info:
            AzureResourceManager.from_config(ConfigurationManager(), resource_client=Mock())

        assert exc_info.value.missing_fields == ["subscription_id"]
