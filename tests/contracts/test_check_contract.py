"""Contract tests for the check interfaces.

All ClusterCheck and NodeCheck implementations must pass these tests to
ensure substitutability.
"""

from types import SimpleNamespace

import pytest

from vsphere_detector.checks.kubernetes import ClusterInfoCheck
from vsphere_detector.checks.vsphere import NodeDiskUUIDCheck
from vsphere_detector.core.models import Outcome
from vsphere_detector.interfaces.check import (
    NODE_PROPERTIES,
    ClusterCheck,
    NodeCheck,
    VirtualMachineSnapshot,
)
from vsphere_detector.interfaces.kube_client import Node


class CheckContract:
    """Contract shared by both check classes."""

    @pytest.fixture
    def check(self):
        """Subclass must provide concrete check implementation."""
        raise NotImplementedError("Subclass must implement check fixture")

    def test_check_has_name(self, check):
        """Check must have a name."""
        assert isinstance(check.name, str)
        assert len(check.name) > 0

    def test_check_has_description(self, check):
        """Check must have a description."""
        assert isinstance(check.description, str)
        assert len(check.description) > 0


class ClusterCheckContract(CheckContract):
    """Base contract tests for ClusterCheck interface."""

    def test_is_cluster_check(self, check):
        """Check must implement ClusterCheck."""
        assert isinstance(check, ClusterCheck)

    @pytest.mark.asyncio
    async def test_run_returns_outcome(self, check, make_context):
        """Run must return an Outcome."""
        outcome = await check.run(make_context())

        assert isinstance(outcome, Outcome)
        assert isinstance(outcome.message, str)


class NodeCheckContract(CheckContract):
    """Base contract tests for NodeCheck interface."""

    def test_is_node_check(self, check):
        """Check must implement NodeCheck."""
        assert isinstance(check, NodeCheck)

    def test_required_properties_prefetched(self, check):
        """Check may only rely on prefetched VM properties."""
        assert set(check.required_properties) <= set(NODE_PROPERTIES)

    @pytest.mark.asyncio
    async def test_run_returns_outcome(self, check, make_context):
        """Run must return an Outcome for a healthy snapshot."""
        node = Node(name="worker-0", provider_id="vsphere://4237a1b2-0000-0000-0000-000000000002")
        vm = VirtualMachineSnapshot(
            ref="vm-42",
            properties={
                "config.extraConfig": [SimpleNamespace(key="disk.EnableUUID", value="TRUE")],
                "config.flags": None,
            },
        )

        outcome = await check.run(make_context(), node, vm)

        assert isinstance(outcome, Outcome)


class TestClusterInfoCheckContract(ClusterCheckContract):
    @pytest.fixture
    def check(self):
        return ClusterInfoCheck()


class TestNodeDiskUUIDCheckContract(NodeCheckContract):
    @pytest.fixture
    def check(self):
        return NodeDiskUUIDCheck()
