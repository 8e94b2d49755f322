"""Check interfaces and the per-run context handed to every check."""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from vsphere_detector.core.config import VSphereConfig
from vsphere_detector.core.exceptions import PropertyNotPrefetchedError, TimeoutFailure
from vsphere_detector.core.models import Outcome
from vsphere_detector.interfaces.kube_client import KubeClient, Node
from vsphere_detector.interfaces.vsphere import VSphereConnection

T = TypeVar("T")

# VM properties node checks may rely on being populated. A node check that
# needs another property must add it here.
NODE_PROPERTIES: tuple[str, ...] = ("config.extraConfig", "config.flags")


@dataclass(frozen=True)
class RunContext:
    """Immutable bundle shared read-only by all checks of one run.

    ``deadline`` is a ``time.monotonic()`` timestamp; every remote call made
    during the run must finish before it.
    """

    deadline: float
    vsphere_config: VSphereConfig
    vsphere: VSphereConnection
    kube: KubeClient

    def remaining(self) -> float:
        """Seconds left until the deadline, never negative."""
        return max(0.0, self.deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        """Whether the deadline has passed."""
        return time.monotonic() >= self.deadline

    def check_deadline(self, operation: str) -> None:
        """Fail fast if the deadline has already passed.

        Args:
            operation: Name of the call about to be made, for the error message

        Raises:
            TimeoutFailure: If the deadline has passed
        """
        if self.expired:
            raise TimeoutFailure(f"run deadline exceeded before {operation}")

    async def call(self, func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        """Run a blocking client call in a worker thread, bounded by the deadline.

        On expiry the caller gets TimeoutFailure at once but the thread is not
        interrupted; the client must bound its own I/O (a request timeout) and
        fence the session against teardown while the call is still running.

        Args:
            func: Blocking callable
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            Whatever func returns

        Raises:
            TimeoutFailure: If the deadline passes before or during the call
        """
        operation = getattr(func, "__name__", repr(func))
        self.check_deadline(operation)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args, **kwargs),
                timeout=self.remaining(),
            )
        except TimeoutFailure:
            raise
        except TimeoutError as e:
            raise TimeoutFailure(f"run deadline exceeded during {operation}") from e


@dataclass(frozen=True)
class VirtualMachineSnapshot:
    """Partial view of a VM holding only prefetched properties."""

    ref: Any
    properties: Mapping[str, Any] = field(default_factory=dict)
    prefetched: tuple[str, ...] = NODE_PROPERTIES

    def get(self, path: str, default: Any = None) -> Any:
        """Get a prefetched property value.

        Args:
            path: Property path, e.g. ``config.extraConfig``
            default: Value returned when the property was fetched but is unset

        Returns:
            Property value

        Raises:
            PropertyNotPrefetchedError: If path is outside the prefetch set
        """
        if path not in self.prefetched:
            raise PropertyNotPrefetchedError(path)
        return self.properties.get(path, default)


class ClusterCheck(ABC):
    """A cluster-level check, run once per run."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name of the check."""

    @property
    def description(self) -> str:
        """What the check validates."""
        return ""

    @abstractmethod
    async def run(self, ctx: RunContext) -> Outcome:
        """Execute the check.

        Args:
            ctx: Run context

        Returns:
            Outcome of the check

        Raises:
            CheckFailure: The check's rule was violated (alternative to a failed Outcome)
            InfrastructureError: vSphere or Kubernetes could not be queried
            TimeoutFailure: The run deadline expired
        """


class NodeCheck(ABC):
    """A node-level check, run once per node against that node's VM.

    Reasons for keeping node checks separate from cluster checks:
    results are reported per node, and the VM is fetched from vSphere
    once per node no matter how many node checks need it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name of the check."""

    @property
    def description(self) -> str:
        """What the check validates."""
        return ""

    @property
    def required_properties(self) -> tuple[str, ...]:
        """VM properties read by this check; must be a subset of NODE_PROPERTIES."""
        return ()

    @abstractmethod
    async def run(self, ctx: RunContext, node: Node, vm: VirtualMachineSnapshot) -> Outcome:
        """Execute the check against one node.

        Args:
            ctx: Run context
            node: Node under check
            vm: Prefetched snapshot of the node's VM

        Returns:
            Outcome of the check
        """
