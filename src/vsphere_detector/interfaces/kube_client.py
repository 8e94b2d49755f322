"""Cluster-read interface used by the orchestrator and by checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vsphere_detector.interfaces.check import RunContext

VSPHERE_PROVIDER_PREFIX = "vsphere://"


@dataclass(frozen=True)
class Node:
    """Normalized node information."""

    name: str
    provider_id: str = ""
    system_uuid: str = ""
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def vm_uuid(self) -> str | None:
        """BIOS UUID of the VM backing this node, if known.

        Taken from a ``vsphere://<uuid>`` provider ID, falling back to the
        system UUID reported by the kubelet.
        """
        if self.provider_id.startswith(VSPHERE_PROVIDER_PREFIX):
            uuid = self.provider_id[len(VSPHERE_PROVIDER_PREFIX) :].strip("/")
            if uuid:
                return uuid.lower()
        if self.system_uuid:
            return self.system_uuid.lower()
        return None


@dataclass(frozen=True)
class StorageClass:
    """Normalized storage class information."""

    name: str
    provisioner: str
    parameters: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PersistentVolume:
    """Normalized persistent volume information."""

    name: str
    storage_class: str | None = None
    vsphere_volume_path: str | None = None
    csi_driver: str | None = None
    csi_volume_handle: str | None = None


@dataclass(frozen=True)
class InfrastructureDescriptor:
    """Cluster-wide infrastructure metadata (OpenShift ``infrastructures/cluster``)."""

    name: str
    platform: str
    infrastructure_name: str = ""
    api_server_url: str = ""


class KubeClient(ABC):
    """Abstract read-only interface between checks and the Kubernetes API.

    Every method is bound by the run deadline carried in ``ctx``.
    Implementations raise InfrastructureError on API failures and
    TimeoutFailure when the deadline expires.
    """

    @abstractmethod
    async def get_infrastructure(self, ctx: RunContext) -> InfrastructureDescriptor:
        """Get the current Infrastructure instance.

        Raises:
            InfrastructureError: If the infrastructure cannot be retrieved
        """

    @abstractmethod
    async def list_nodes(self, ctx: RunContext) -> list[Node]:
        """Get all nodes in the cluster, in API order.

        Raises:
            InfrastructureError: If nodes cannot be listed
        """

    @abstractmethod
    async def list_storage_classes(self, ctx: RunContext) -> list[StorageClass]:
        """Get all storage classes in the cluster.

        Raises:
            InfrastructureError: If storage classes cannot be listed
        """

    @abstractmethod
    async def list_pvs(self, ctx: RunContext) -> list[PersistentVolume]:
        """Get all persistent volumes in the cluster.

        Raises:
            InfrastructureError: If persistent volumes cannot be listed
        """
