"""Tests for Spring Apps services, apps and deployments."""

from unittest.mock import Mock, patch

import pytest

from src.domain.base.exceptions import ResourceValidationError, UnsupportedOperationError
from src.domain.base.value_objects import ParentPath
from src.providers.azure.springcloud import (
    SPRING_APPS,
    SPRING_DEPLOYMENTS,
    SPRING_SERVICES,
    SpringCloudResourceManager,
    stage_active_deployment,
)
from src.providers.azure.springcloud.kinds import (
    UPDATE_APP_NOTICE,
    normalize_runtime_version,
    parse_cpu,
    parse_memory,
    to_cpu_string,
    to_memory_string,
)
from tests.fakes import SUBSCRIPTION_ID

TEMP_DISK = {"sizeInGB": 5, "mountPath": "/tmp"}


def _service(spring_manager, spring_clients, name, tier):
    spring_clients[SPRING_SERVICES.name].add(name, location="eastus", sku={"name": "S0", "tier": tier})
    return spring_manager.services().get(name)


class TestSpringApps:
    """Test app payloads and the update notice."""

    def test_create_on_standard_tier(self, spring_service, spring_clients):
        """Test create on standard tier."""
        apps = spring_service.sub_module(SPRING_APPS.name)

        apps.create_draft("app1", "rg").set("public_endpoint_enabled", True).set("persistent_disk_enabled", True).commit()

        parent, name, payload = spring_clients[SPRING_APPS.name].write_calls[-1]
        assert parent == ParentPath(SUBSCRIPTION_ID, "rg", ("svc",))
        assert name == "app1"
        assert payload == {
            "properties": {
                "public": True,
                "persistentDisk": {"sizeInGB": 50, "mountPath": "/persistent"},
                "temporaryDisk": TEMP_DISK,
            }
        }

    @pytest.mark.parametrize(
        "tier,expected",
        [
            ("Basic", {"public": False, "persistentDisk": {"sizeInGB": 1, "mountPath": "/persistent"}, "temporaryDisk": TEMP_DISK}),
            ("StandardGen2", {"public": False, "temporaryDisk": TEMP_DISK}),
            ("Enterprise", {"public": False}),
        ],
    )
    def test_disks_depend_on_service_tier(self, spring_manager, spring_clients, tier, expected):
        """Test disks depend on service tier."""
        service = _service(spring_manager, spring_clients, f"{tier.lower()}-svc", tier)

        service.sub_module(SPRING_APPS.name).create_draft("app1", "rg").set("persistent_disk_enabled", True).commit()

        _, _, payload = spring_clients[SPRING_APPS.name].write_calls[-1]
        assert payload == {"properties": expected}

    def test_update_sends_only_the_changed_property(self, spring_service, spring_clients):
        """Test update sends only the changed property."""
        spring_clients[SPRING_APPS.name].add(
            "app1", parent_names=("svc",), properties={"public": False, "temporaryDisk": TEMP_DISK}
        )
        apps = spring_service.sub_module(SPRING_APPS.name)

        with patch("src.infrastructure.resource.draft.logger") as logger:
            app = apps.update_draft(apps.get("app1")).set("public_endpoint_enabled", True).commit()

        _, _, payload = spring_clients[SPRING_APPS.name].write_calls[-1]
        assert payload == {"properties": {"public": True}}
        assert app.get_property("properties", "public") is True
        logger.warning.assert_called_once_with(UPDATE_APP_NOTICE, kind=SPRING_APPS.name, name="app1")

    def test_update_without_changes_makes_no_remote_call(self, spring_service, spring_clients):
        """Test update without changes makes no remote call."""
        spring_clients[SPRING_APPS.name].add("app1", parent_names=("svc",), properties={"public": True})
        apps = spring_service.sub_module(SPRING_APPS.name)

        apps.update_draft(apps.get("app1")).set("public_endpoint_enabled", True).commit()

        assert spring_clients[SPRING_APPS.name].write_calls == []

    def test_disabling_persistent_disk(self, spring_service, spring_clients):
        """Test disabling persistent disk."""
        spring_clients[SPRING_APPS.name].add(
            "app1", parent_names=("svc",), properties={"persistentDisk": {"sizeInGB": 50, "mountPath": "/persistent"}}
        )
        apps = spring_service.sub_module(SPRING_APPS.name)
        draft = apps.update_draft(apps.get("app1"))

        assert draft.get("persistent_disk_enabled") is True
        draft.set("persistent_disk_enabled", False).commit()

        _, _, payload = spring_clients[SPRING_APPS.name].write_calls[-1]
        assert payload == {"properties": {"persistentDisk": {"sizeInGB": 0, "mountPath": "/persistent"}}}

    def test_blank_active_deployment_is_rejected(self, spring_service, spring_clients):
        """Test blank active deployment is rejected."""
        spring_clients[SPRING_APPS.name].add(
            "app1", parent_names=("svc",), properties={"activeDeploymentName": "default"}
        )
        apps = spring_service.sub_module(SPRING_APPS.name)
        draft = apps.update_draft(apps.get("app1"))

        for blank in (None, ""):
            with pytest.raises(ResourceValidationError) as exc_info:
                draft.set("active_deployment_name", blank)
            assert exc_info.value.fields == ["active_deployment_name"]
        assert draft.changes() == {}

    def test_active_deployment_switch_is_sent(self, spring_service, spring_clients):
        """Test active deployment switch is sent."""
        spring_clients[SPRING_APPS.name].add(
            "app1", parent_names=("svc",), properties={"activeDeploymentName": "default"}
        )
        apps = spring_service.sub_module(SPRING_APPS.name)

        apps.update_draft(apps.get("app1")).set("active_deployment_name", "green").commit()

        _, _, payload = spring_clients[SPRING_APPS.name].update_calls[-1]
        assert payload == {"properties": {"activeDeploymentName": "green"}}


class TestSpringFromSdk:
    """Test that updates reach the PATCH and set-active-deployment calls of the SDK."""

    def setup_method(self):
        base = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/rg/providers/Microsoft.AppPlatform/Spring/svc"
        self.app_id = f"{base}/apps/app1"
        self.sdk = Mock()
        self.sdk.services.get.return_value = {
            "id": base,
            "name": "svc",
            "location": "eastus",
            "sku": {"name": "S0", "tier": "Standard"},
        }
        self.sdk.apps.get.return_value = self._app(public=False, active="blue")
        self.sdk.deployments.get.return_value = {
            "id": f"{self.app_id}/deployments/blue",
            "name": "blue",
            "sku": {"name": "S0", "tier": "Standard", "capacity": 1},
            "properties": {"active": True},
        }
        manager = SpringCloudResourceManager.from_sdk(SUBSCRIPTION_ID, self.sdk)
        self.service = manager.services().get("svc", "rg")
        self.apps = self.service.sub_module(SPRING_APPS.name)

    def _app(self, public, active):
        return {
            "id": self.app_id,
            "name": "app1",
            "properties": {"public": public, "activeDeploymentName": active},
        }

    def test_app_update_is_a_patch(self):
        """Test app update is a PATCH."""
        self.sdk.apps.begin_update.return_value.result.return_value = self._app(public=True, active="blue")

        app = self.apps.update_draft(self.apps.get("app1")).set("public_endpoint_enabled", True).commit()

        self.sdk.apps.begin_update.assert_called_once_with("rg", "svc", "app1", {"properties": {"public": True}})
        self.sdk.apps.begin_create_or_update.assert_not_called()
        self.sdk.apps.begin_set_active_deployments.assert_not_called()
        assert app.get_property("properties", "public") is True

    def test_deployment_switch_uses_set_active_deployments(self):
        """Test deployment switch uses set_active_deployments."""
        self.sdk.apps.begin_update.return_value.result.return_value = self._app(public=True, active="blue")
        self.sdk.apps.begin_set_active_deployments.return_value.result.return_value = self._app(
            public=True, active="green"
        )
        draft = self.apps.update_draft(self.apps.get("app1"))

        app = draft.set("public_endpoint_enabled", True).set("active_deployment_name", "green").commit()

        self.sdk.apps.begin_update.assert_called_once_with("rg", "svc", "app1", {"properties": {"public": True}})
        self.sdk.apps.begin_set_active_deployments.assert_called_once_with(
            "rg", "svc", "app1", {"activeDeploymentNames": ["green"]}
        )
        self.sdk.apps.begin_create_or_update.assert_not_called()
        assert app.get_property("properties", "activeDeploymentName") == "green"

    def test_deployment_switch_alone_skips_the_patch(self):
        """Test deployment switch alone skips the PATCH."""
        self.sdk.apps.begin_set_active_deployments.return_value.result.return_value = self._app(
            public=False, active="green"
        )

        self.apps.update_draft(self.apps.get("app1")).set("active_deployment_name", "green").commit()

        self.sdk.apps.begin_update.assert_not_called()
        self.sdk.apps.begin_set_active_deployments.assert_called_once()

    def test_deployment_update_is_a_patch(self):
        """Test deployment update is a PATCH."""
        deployments = self.apps.get("app1").sub_module(SPRING_DEPLOYMENTS.name)
        self.sdk.deployments.begin_update.return_value.result.return_value = {
            "id": f"{self.app_id}/deployments/blue",
            "name": "blue",
            "sku": {"name": "S0", "tier": "Standard", "capacity": 3},
        }

        deployments.update_draft(deployments.get("blue")).set("capacity", 3).commit()

        self.sdk.deployments.begin_update.assert_called_once_with(
            "rg", "svc", "app1", "blue", {"sku": {"name": "S0", "tier": "Standard", "capacity": 3}}
        )
        self.sdk.deployments.begin_create_or_update.assert_not_called()


class TestSpringDeployments:
    """Test deployments staged with their app and direct deployment updates."""

    def test_staged_active_deployment_is_created_after_the_app(self, spring_service, spring_clients):
        """Test staged active deployment is created after the app."""
        draft = spring_service.sub_module(SPRING_APPS.name).create_draft("app1", "rg")
        deployment = stage_active_deployment(draft)
        deployment.set("cpu", 0.5).set("memory_in_gb", 1).set("runtime_version", "Java 11")

        app = draft.commit()

        _, _, app_payload = spring_clients[SPRING_APPS.name].write_calls[-1]
        assert "activeDeploymentName" not in app_payload["properties"]
        parent, name, payload = spring_clients[SPRING_DEPLOYMENTS.name].write_calls[-1]
        assert parent == ParentPath(SUBSCRIPTION_ID, "rg", ("svc", "app1"))
        assert name == "default"
        assert payload == {
            "sku": {"name": "S0", "tier": "Standard", "capacity": 1},
            "properties": {
                "active": True,
                "source": {"type": "Jar", "relativePath": "<default>", "runtimeVersion": "Java_11"},
                "deploymentSettings": {
                    "resourceRequests": {"cpu": "500m", "memory": "1Gi"},
                    "scale": {"maxReplicas": 1},
                },
            },
        }
        assert app.sub_module(SPRING_DEPLOYMENTS.name).get("default").get_property("properties", "active") is True
        assert draft.staged_children == []

    def test_enterprise_deployments_use_build_results(self, spring_manager, spring_clients):
        """Test enterprise deployments use build results."""
        service = _service(spring_manager, spring_clients, "ent-svc", "Enterprise")
        draft = service.sub_module(SPRING_APPS.name).create_draft("app1", "rg")
        stage_active_deployment(draft, "blue")

        draft.commit()

        _, name, payload = spring_clients[SPRING_DEPLOYMENTS.name].write_calls[-1]
        assert name == "blue"
        assert payload["properties"]["source"] == {"type": "BuildResult", "buildResultId": "<default>"}

    def test_staging_an_existing_deployment_activates_it(self, spring_service, spring_clients):
        """Test staging an existing deployment activates it."""
        spring_clients[SPRING_APPS.name].add("app1", parent_names=("svc",), properties={"public": False})
        spring_clients[SPRING_DEPLOYMENTS.name].add("default", parent_names=("svc", "app1"), properties={"active": False})
        apps = spring_service.sub_module(SPRING_APPS.name)
        draft = apps.update_draft(apps.get("app1"))
        stage_active_deployment(draft)

        draft.commit()

        assert spring_clients[SPRING_APPS.name].write_calls == []
        _, name, payload = spring_clients[SPRING_DEPLOYMENTS.name].write_calls[-1]
        assert name == "default"
        assert payload == {"properties": {"active": True}}

    def test_resource_update_keeps_the_unchanged_request(self, spring_service, spring_clients):
        """Test resource update keeps the unchanged request."""
        spring_clients[SPRING_APPS.name].add("app1", parent_names=("svc",))
        spring_clients[SPRING_DEPLOYMENTS.name].add(
            "default",
            parent_names=("svc", "app1"),
            sku={"name": "S0", "tier": "Standard", "capacity": 1},
            properties={"deploymentSettings": {"resourceRequests": {"cpu": "1", "memory": "2Gi"}}},
        )
        deployments = spring_service.sub_module(SPRING_APPS.name).get("app1").sub_module(SPRING_DEPLOYMENTS.name)
        draft = deployments.update_draft(deployments.get("default"))

        draft.set("cpu", 0.5).set("capacity", 3).commit()

        _, _, payload = spring_clients[SPRING_DEPLOYMENTS.name].write_calls[-1]
        assert payload == {
            "properties": {"deploymentSettings": {"resourceRequests": {"cpu": "500m", "memory": "2Gi"}}},
            "sku": {"name": "S0", "tier": "Standard", "capacity": 3},
        }


class TestSpringServices:
    def test_create_sets_sku_for_tier(self, spring_manager, spring_clients):
        """Test create sets SKU for tier."""
        spring_manager.services().create_draft("svc2", "rg").set("location", "westus").set("sku_tier", "Enterprise").commit()

        _, _, payload = spring_clients[SPRING_SERVICES.name].write_calls[-1]
        assert payload == {"location": "westus", "sku": {"name": "E0", "tier": "Enterprise"}}

    def test_tier_is_fixed_at_creation(self, spring_manager, spring_service):
        """Test tier is fixed at creation."""
        draft = spring_manager.services().update_draft(spring_service)

        with pytest.raises(UnsupportedOperationError):
            draft.set("sku_tier", "Basic")


class TestSpringConversions:
    def test_cpu_strings(self):
        """Test CPU strings."""
        assert to_cpu_string(0.5) == "500m"
        assert to_cpu_string(1.0) == "1"
        assert to_cpu_string(1.5) == "1.5"
        assert parse_cpu("500m") == 0.5
        assert parse_cpu("2") == 2.0
        assert parse_cpu(None) is None

    def test_memory_strings(self):
        """Test memory strings."""
        assert to_memory_string(0.5) == "512Mi"
        assert to_memory_string(2) == "2Gi"
        assert parse_memory("512Mi") == 0.5
        assert parse_memory("2Gi") == 2.0

    @pytest.mark.parametrize(
        "version,expected",
        [("Java 11", "Java_11"), ("java_17", "Java_17"), ("21", "Java_21"), (None, "Java_17"), ("latest", "Java_17")],
    )
    def test_runtime_version_normalization(self, version, expected):
        """Test runtime version normalization."""
        assert normalize_runtime_version(version) == expected
