"""Unit tests for CheckRegistry."""

import pytest

from vsphere_detector.checks.check_registry import CheckRegistry
from vsphere_detector.core.exceptions import ConfigurationError


@pytest.fixture
def registry() -> CheckRegistry:
    """Provide an empty registry."""
    return CheckRegistry()


class TestRegistration:
    """Tests for registering checks."""

    def test_register_cluster_check(self, registry, cluster_check_class) -> None:
        """Test registering a cluster check under its own name."""
        check = cluster_check_class("CheckTaskPermissions")

        registry.register_cluster_check(check)

        assert registry.get_cluster_check("CheckTaskPermissions") is check
        assert registry.cluster_check_names() == ["CheckTaskPermissions"]
        assert len(registry) == 1

    def test_register_under_explicit_name(self, registry, cluster_check_class) -> None:
        """Test an explicit name overrides the check's own name."""
        check = cluster_check_class("internal")

        registry.register_cluster_check(check, name="CheckDefaultDatastore")

        assert registry.get_cluster_check("CheckDefaultDatastore") is check
        assert registry.get_cluster_check("internal") is None

    def test_duplicate_cluster_check_rejected(self, registry, cluster_check_class) -> None:
        """Test names are unique within the cluster mapping."""
        registry.register_cluster_check(cluster_check_class("A"))

        with pytest.raises(ConfigurationError, match="already registered"):
            registry.register_cluster_check(cluster_check_class("A"))

    def test_same_name_allowed_across_classes(
        self, registry, cluster_check_class, node_check_class
    ) -> None:
        """Test the two mappings are independent."""
        registry.register_cluster_check(cluster_check_class("Shared"))
        registry.register_node_check(node_check_class("Shared"))

        assert registry.cluster_check_names() == ["Shared"]
        assert registry.node_check_names() == ["Shared"]
        assert len(registry) == 2

    def test_duplicate_node_check_rejected(self, registry, node_check_class) -> None:
        """Test names are unique within the node mapping."""
        registry.register_node_check(node_check_class("CheckNodeDiskUUID"))

        with pytest.raises(ConfigurationError):
            registry.register_node_check(node_check_class("CheckNodeDiskUUID"))

    def test_node_check_within_prefetch_set_accepted(
        self, registry, node_check_class, prefetch_properties
    ) -> None:
        """Test a node check may declare any prefetched property."""
        registry.register_node_check(node_check_class("N", properties=prefetch_properties))

        assert registry.get_node_check("N") is not None

    def test_node_check_outside_prefetch_set_rejected(self, registry, node_check_class) -> None:
        """Test a node check needing an unprefetched property cannot register."""
        check = node_check_class("N", properties=("config.extraConfig", "runtime.host"))

        with pytest.raises(ConfigurationError, match="runtime.host"):
            registry.register_node_check(check)

        assert registry.node_check_names() == []


class TestOrdering:
    """Tests for deterministic iteration."""

    def test_cluster_checks_sorted_by_name(self, registry, cluster_check_class) -> None:
        """Test execution order is lexicographic regardless of registration order."""
        for name in ["CheckStorageClasses", "ClusterInfo", "CheckPVs", "CheckDefaultDatastore"]:
            registry.register_cluster_check(cluster_check_class(name))

        names = [name for name, _ in registry.cluster_checks()]

        assert names == ["CheckDefaultDatastore", "CheckPVs", "CheckStorageClasses", "ClusterInfo"]

    def test_node_checks_sorted_by_name(self, registry, node_check_class) -> None:
        """Test node check order is lexicographic."""
        registry.register_node_check(node_check_class("b"))
        registry.register_node_check(node_check_class("a"))

        assert [name for name, _ in registry.node_checks()] == ["a", "b"]

    def test_snapshot_unaffected_by_later_registration(
        self, registry, cluster_check_class
    ) -> None:
        """Test a snapshot taken for a run does not change afterwards."""
        registry.register_cluster_check(cluster_check_class("A"))
        snapshot = registry.cluster_checks()

        registry.register_cluster_check(cluster_check_class("B"))

        assert [name for name, _ in snapshot] == ["A"]

    def test_empty_registry(self, registry) -> None:
        """Test an empty registry has nothing to run."""
        assert registry.cluster_checks() == []
        assert registry.node_checks() == []
        assert len(registry) == 0
