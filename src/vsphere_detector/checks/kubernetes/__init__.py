"""Cluster-level checks backed by the Kubernetes API."""

from vsphere_detector.checks.kubernetes.cluster_info import ClusterInfoCheck

__all__ = [
    "ClusterInfoCheck",
]
