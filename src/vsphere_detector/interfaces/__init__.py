"""Interface definitions between the orchestrator, checks and external systems."""

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

__all__ = [
    "NODE_PROPERTIES",
    "ClusterCheck",
    "NodeCheck",
    "RunContext",
    "VirtualMachineSnapshot",
    "InfrastructureDescriptor",
    "KubeClient",
    "Node",
    "PersistentVolume",
    "StorageClass",
    "VSphereConnection",
    "VSphereConnector",
]
