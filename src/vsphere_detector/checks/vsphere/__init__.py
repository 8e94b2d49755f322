"""Node-level checks backed by vSphere VM properties."""

from vsphere_detector.checks.vsphere.disk_uuid import NodeDiskUUIDCheck

__all__ = [
    "NodeDiskUUIDCheck",
]
