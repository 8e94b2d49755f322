"""Adapter implementations for external services."""

from vsphere_detector.adapters.k8s_adapter import KubernetesAdapter
from vsphere_detector.adapters.vsphere_adapter import VSphereAdapter, VSphereAdapterConnector

__all__ = [
    "KubernetesAdapter",
    "VSphereAdapter",
    "VSphereAdapterConnector",
]
