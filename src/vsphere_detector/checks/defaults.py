"""Default check registry."""

from vsphere_detector.checks.check_registry import CheckRegistry
from vsphere_detector.checks.kubernetes import ClusterInfoCheck
from vsphere_detector.checks.vsphere import NodeDiskUUIDCheck


def default_registry() -> CheckRegistry:
    """Build a registry holding all built-in checks."""
    registry = CheckRegistry()
    registry.register_cluster_check(ClusterInfoCheck())
    registry.register_node_check(NodeDiskUUIDCheck())
    return registry
