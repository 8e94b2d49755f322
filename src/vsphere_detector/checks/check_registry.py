"""Registry for cluster-level and node-level checks."""

from vsphere_detector.core.exceptions import ConfigurationError
from vsphere_detector.interfaces.check import NODE_PROPERTIES, ClusterCheck, NodeCheck
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)


class CheckRegistry:
    """Registry of checks, one mapping per check class.

    Names are unique within each mapping. Execution order is lexicographic
    by name; runners take a snapshot at the start of a run.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._cluster_checks: dict[str, ClusterCheck] = {}
        self._node_checks: dict[str, NodeCheck] = {}
        logger.debug("check_registry_initialized")

    def register_cluster_check(self, check: ClusterCheck, name: str | None = None) -> None:
        """Register a cluster-level check.

        Args:
            check: Check to register
            name: Name to register under (default: check.name)

        Raises:
            ConfigurationError: If the name is already registered
        """
        check_name = name or check.name
        if check_name in self._cluster_checks:
            raise ConfigurationError(f"Cluster check already registered: {check_name}")

        self._cluster_checks[check_name] = check
        logger.debug("cluster_check_registered", check_name=check_name)

    def register_node_check(self, check: NodeCheck, name: str | None = None) -> None:
        """Register a node-level check.

        Args:
            check: Check to register
            name: Name to register under (default: check.name)

        Raises:
            ConfigurationError: If the name is already registered or the check
                needs VM properties outside NODE_PROPERTIES
        """
        check_name = name or check.name
        if check_name in self._node_checks:
            raise ConfigurationError(f"Node check already registered: {check_name}")

        missing = [p for p in check.required_properties if p not in NODE_PROPERTIES]
        if missing:
            raise ConfigurationError(
                f"Node check {check_name} requires VM properties outside the prefetch set: "
                f"{', '.join(missing)}"
            )

        self._node_checks[check_name] = check
        logger.debug("node_check_registered", check_name=check_name)

    def get_cluster_check(self, name: str) -> ClusterCheck | None:
        """Get a cluster check by name."""
        return self._cluster_checks.get(name)

    def get_node_check(self, name: str) -> NodeCheck | None:
        """Get a node check by name."""
        return self._node_checks.get(name)

    def cluster_check_names(self) -> list[str]:
        """Names of all cluster checks, sorted."""
        return sorted(self._cluster_checks)

    def node_check_names(self) -> list[str]:
        """Names of all node checks, sorted."""
        return sorted(self._node_checks)

    def cluster_checks(self) -> list[tuple[str, ClusterCheck]]:
        """Snapshot of (name, check) pairs in execution order."""
        return [(name, self._cluster_checks[name]) for name in self.cluster_check_names()]

    def node_checks(self) -> list[tuple[str, NodeCheck]]:
        """Snapshot of (name, check) pairs in execution order."""
        return [(name, self._node_checks[name]) for name in self.node_check_names()]

    def __len__(self) -> int:
        """Get number of registered checks of both classes."""
        return len(self._cluster_checks) + len(self._node_checks)
