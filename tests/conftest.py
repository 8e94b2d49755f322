"""Pytest configuration and shared fixtures."""

import asyncio
import time
from collections.abc import Sequence
from types import SimpleNamespace
from typing import Any

import pytest

from vsphere_detector.core.config import RunConfig, VSphereConfig
from vsphere_detector.core.exceptions import CheckFailure
from vsphere_detector.core.models import Outcome
from vsphere_detector.interfaces.check import (
    NODE_PROPERTIES,
    ClusterCheck,
    NodeCheck,
    RunContext,
    VirtualMachineSnapshot,
)
from vsphere_detector.interfaces.kube_client import (
    InfrastructureDescriptor,
    KubeClient,
    Node,
    PersistentVolume,
    StorageClass,
)
from vsphere_detector.interfaces.vsphere import VSphereConnection, VSphereConnector

# ==============================================================================
# Fakes for external collaborators
# ==============================================================================


class FakeKubeClient(KubeClient):
    """In-memory cluster reader.

    Reads honour the run deadline like the real adapter unless ``cached`` is
    set, which models an informer cache answering without a remote call.
    """

    def __init__(
        self,
        nodes: list[Node] | None = None,
        infrastructure: InfrastructureDescriptor | None = None,
        list_nodes_error: Exception | None = None,
        cached: bool = False,
    ):
        self.nodes = nodes or []
        self.infrastructure = infrastructure or InfrastructureDescriptor(
            name="cluster", platform="VSphere", infrastructure_name="test-abc12"
        )
        self.list_nodes_error = list_nodes_error
        self.cached = cached
        self.list_nodes_calls = 0

    def _read(self, ctx: RunContext, operation: str) -> None:
        if not self.cached:
            ctx.check_deadline(operation)

    async def get_infrastructure(self, ctx: RunContext) -> InfrastructureDescriptor:
        self._read(ctx, "get_infrastructure")
        return self.infrastructure

    async def list_nodes(self, ctx: RunContext) -> list[Node]:
        self.list_nodes_calls += 1
        self._read(ctx, "list_node")
        if self.list_nodes_error:
            raise self.list_nodes_error
        return list(self.nodes)

    async def list_storage_classes(self, ctx: RunContext) -> list[StorageClass]:
        return []

    async def list_pvs(self, ctx: RunContext) -> list[PersistentVolume]:
        return []


class FakeVSphereConnection(VSphereConnection):
    """vCenter stand-in recording every lookup and property fetch."""

    def __init__(self, vms: dict[str, dict[str, Any]] | None = None):
        self.vms = vms or {}
        self.lookups: list[tuple[str, str]] = []
        self.fetches: list[tuple[Any, list[str]]] = []
        self.close_calls = 0

    async def find_vm_by_uuid(self, ctx: RunContext, datacenter: str, uuid: str) -> Any | None:
        ctx.check_deadline("find_vm_by_uuid")
        self.lookups.append((datacenter, uuid))
        return f"vm-{uuid}" if uuid in self.vms else None

    async def retrieve_properties(
        self, ctx: RunContext, obj: Any, paths: Sequence[str]
    ) -> dict[str, Any]:
        ctx.check_deadline("retrieve_properties")
        self.fetches.append((obj, list(paths)))
        properties = self.vms[obj.removeprefix("vm-")]
        return {path: value for path, value in properties.items() if path in paths}

    def close(self) -> None:
        self.close_calls += 1


class FakeConnector(VSphereConnector):
    """Connector handing out one prepared connection after an optional delay, or failing."""

    def __init__(
        self, connection: VSphereConnection, error: Exception | None = None, delay: float = 0.0
    ):
        self.connection = connection
        self.error = error
        self.delay = delay
        self.connect_calls: list[float] = []

    def connect(self, config: VSphereConfig, timeout: float) -> VSphereConnection:
        self.connect_calls.append(timeout)
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return self.connection


# ==============================================================================
# Mock checks
# ==============================================================================


class MockClusterCheck(ClusterCheck):
    """Cluster check with a scripted result."""

    def __init__(
        self,
        check_name: str,
        message: str | None = None,
        will_raise: Exception | None = None,
        execution_delay: float = 0.0,
    ):
        """Initialize mock check.

        Args:
            check_name: Name of the check
            message: Failure message; None means the check passes
            will_raise: Exception to raise during execution
            execution_delay: Delay before returning (seconds)
        """
        self._name = check_name
        self._message = message
        self._will_raise = will_raise
        self._execution_delay = execution_delay
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def run(self, ctx: RunContext) -> Outcome:
        self.calls += 1
        if self._execution_delay > 0:
            await asyncio.sleep(self._execution_delay)
        if self._will_raise:
            raise self._will_raise
        if self._message is not None:
            return Outcome.failure(self._message)
        return Outcome.success()


class MockNodeCheck(NodeCheck):
    """Node check recording the nodes and snapshots it was given."""

    def __init__(
        self,
        check_name: str,
        failing_nodes: Sequence[str] = (),
        will_raise: Exception | None = None,
        properties: tuple[str, ...] = (),
    ):
        self._name = check_name
        self._failing_nodes = set(failing_nodes)
        self._will_raise = will_raise
        self._properties = properties
        self.seen: list[tuple[str, VirtualMachineSnapshot]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def required_properties(self) -> tuple[str, ...]:
        return self._properties

    async def run(self, ctx: RunContext, node: Node, vm: VirtualMachineSnapshot) -> Outcome:
        self.seen.append((node.name, vm))
        if self._will_raise:
            raise self._will_raise
        if node.name in self._failing_nodes:
            raise CheckFailure(f"{self._name} failed on {node.name}")
        return Outcome.success()


# ==============================================================================
# Fixtures
# ==============================================================================


def make_node(name: str, uuid: str) -> Node:
    """Build a node whose provider ID points at a vSphere VM."""
    return Node(name=name, provider_id=f"vsphere://{uuid}")


def disk_uuid_option(value: str = "TRUE") -> SimpleNamespace:
    """Build an extraConfig entry shaped like vim.option.OptionValue."""
    return SimpleNamespace(key="disk.EnableUUID", value=value)


@pytest.fixture
def vsphere_config() -> VSphereConfig:
    """Provide a sample vSphere configuration."""
    return VSphereConfig(
        server="vcenter.example.com",
        user="detector@vsphere.local",
        password="secret",
        datacenter="DC0",
    )


@pytest.fixture
def run_config() -> RunConfig:
    """Provide run settings with a generous timeout."""
    return RunConfig(timeout_seconds=30)


@pytest.fixture
def nodes() -> list[Node]:
    """Three nodes backed by three VMs."""
    return [
        make_node("master-0", "4237a1b2-0000-0000-0000-000000000000"),
        make_node("worker-1", "4237a1b2-0000-0000-0000-000000000001"),
        make_node("worker-0", "4237a1b2-0000-0000-0000-000000000002"),
    ]


@pytest.fixture
def fake_vsphere(nodes: list[Node]) -> FakeVSphereConnection:
    """vCenter holding one healthy VM per node."""
    return FakeVSphereConnection(
        vms={
            node.vm_uuid: {
                "config.extraConfig": [disk_uuid_option()],
                "config.flags": SimpleNamespace(diskUuidEnabled=True),
                "config.hardware": "not requested",
            }
            for node in nodes
        }
    )


@pytest.fixture
def fake_kube(nodes: list[Node]) -> FakeKubeClient:
    """Cluster reader listing the sample nodes."""
    return FakeKubeClient(nodes=nodes)


@pytest.fixture
def connector(fake_vsphere: FakeVSphereConnection) -> FakeConnector:
    """Connector returning the fake vCenter."""
    return FakeConnector(fake_vsphere)


@pytest.fixture
def make_context(vsphere_config, fake_vsphere, fake_kube):
    """Factory for run contexts with a given time budget."""

    def _make(timeout: float = 30.0) -> RunContext:
        return RunContext(
            deadline=time.monotonic() + timeout,
            vsphere_config=vsphere_config,
            vsphere=fake_vsphere,
            kube=fake_kube,
        )

    return _make


@pytest.fixture
def cluster_check_class() -> type[MockClusterCheck]:
    """Provide the mock cluster check class."""
    return MockClusterCheck


@pytest.fixture
def node_check_class() -> type[MockNodeCheck]:
    """Provide the mock node check class."""
    return MockNodeCheck


@pytest.fixture
def fake_kube_class() -> type[FakeKubeClient]:
    """Provide the fake cluster reader class."""
    return FakeKubeClient


@pytest.fixture
def fake_connector_class() -> type[FakeConnector]:
    """Provide the fake connector class."""
    return FakeConnector


@pytest.fixture
def prefetch_properties() -> tuple[str, ...]:
    """The VM properties node checks may rely on."""
    return NODE_PROPERTIES
