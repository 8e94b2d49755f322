"""Kubernetes adapter implementing the KubeClient interface."""

from collections.abc import Callable
from typing import Any, TypeVar

from vsphere_detector.clients.kubernetes_client import KubernetesClient
from vsphere_detector.core.exceptions import InfrastructureError, TimeoutFailure
from vsphere_detector.interfaces.check import RunContext
from vsphere_detector.interfaces.kube_client import (
    InfrastructureDescriptor,
    KubeClient,
    Node,
    PersistentVolume,
    StorageClass,
)
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class KubernetesAdapter(KubeClient):
    """Adapter wrapping KubernetesClient to implement KubeClient.

    Client calls run in a worker thread through ``RunContext.call`` and
    carry the remaining run time as their HTTP request timeout. Responses
    are normalized into dataclasses.
    """

    def __init__(self, kubeconfig_path: str | None = None, context: str | None = None):
        """Initialize Kubernetes adapter.

        Args:
            kubeconfig_path: Path to kubeconfig file (optional)
            context: Kubernetes context to use (optional)

        Raises:
            InfrastructureError: If the client cannot be configured
        """
        try:
            self.client = KubernetesClient(kubeconfig_path=kubeconfig_path, context=context)
            logger.debug("k8s_adapter_initialized", context=context)
        except Exception as e:
            raise InfrastructureError(f"Failed to initialize K8s adapter: {e}") from e

    async def _call(self, ctx: RunContext, func: Callable[..., T]) -> T:
        """Call a client method bounded by the run deadline.

        Raises:
            TimeoutFailure: If the deadline expires
            InfrastructureError: On any other client failure
        """
        operation = getattr(func, "__name__", repr(func))
        try:
            return await ctx.call(func, request_timeout=ctx.remaining())
        except (TimeoutFailure, InfrastructureError):
            raise
        except Exception as e:
            logger.error("k8s_call_failed", operation=operation, error=str(e))
            raise InfrastructureError(f"Kubernetes API call {operation} failed: {e}") from e

    async def get_infrastructure(self, ctx: RunContext) -> InfrastructureDescriptor:
        """Get the current Infrastructure instance."""
        raw = await self._call(ctx, self.client.get_infrastructure)
        return _to_infrastructure(raw)

    async def list_nodes(self, ctx: RunContext) -> list[Node]:
        """Get all nodes in the cluster, in API order."""
        nodes = await self._call(ctx, self.client.get_nodes)

        node_infos = []
        for node in nodes:
            node_info = Node(
                name=node.metadata.name,
                provider_id=(node.spec.provider_id if node.spec else None) or "",
                system_uuid=(
                    (node.status.node_info.system_uuid or "")
                    if node.status and node.status.node_info
                    else ""
                ),
                labels=dict(node.metadata.labels or {}),
            )
            node_infos.append(node_info)

        return node_infos

    async def list_storage_classes(self, ctx: RunContext) -> list[StorageClass]:
        """Get all storage classes in the cluster."""
        storage_classes = await self._call(ctx, self.client.get_storage_classes)

        return [
            StorageClass(
                name=sc.metadata.name,
                provisioner=sc.provisioner,
                parameters=dict(sc.parameters or {}),
            )
            for sc in storage_classes
        ]

    async def list_pvs(self, ctx: RunContext) -> list[PersistentVolume]:
        """Get all persistent volumes in the cluster."""
        pvs = await self._call(ctx, self.client.get_persistent_volumes)

        volumes = []
        for pv in pvs:
            spec = pv.spec
            vsphere_volume = spec.vsphere_volume if spec else None
            csi = spec.csi if spec else None
            volumes.append(
                PersistentVolume(
                    name=pv.metadata.name,
                    storage_class=spec.storage_class_name if spec else None,
                    vsphere_volume_path=vsphere_volume.volume_path if vsphere_volume else None,
                    csi_driver=csi.driver if csi else None,
                    csi_volume_handle=csi.volume_handle if csi else None,
                )
            )

        return volumes


def _to_infrastructure(raw: dict[str, Any]) -> InfrastructureDescriptor:
    metadata = raw.get("metadata") or {}
    status = raw.get("status") or {}
    platform_status = status.get("platformStatus") or {}

    return InfrastructureDescriptor(
        name=metadata.get("name", ""),
        platform=platform_status.get("type") or status.get("platform") or "",
        infrastructure_name=status.get("infrastructureName", ""),
        api_server_url=status.get("apiServerURL", ""),
    )
