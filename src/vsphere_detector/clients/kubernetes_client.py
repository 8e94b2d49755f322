"""Kubernetes client for cluster read operations."""

from typing import Any

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.client.models import V1Node, V1PersistentVolume, V1StorageClass

from vsphere_detector.core.exceptions import InfrastructureError
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)

INFRASTRUCTURE_GROUP = "config.openshift.io"
INFRASTRUCTURE_VERSION = "v1"
INFRASTRUCTURE_PLURAL = "infrastructures"
INFRASTRUCTURE_NAME = "cluster"


class KubernetesClient:
    """Kubernetes client wrapper.

    Every call takes a ``request_timeout`` in seconds, passed through to
    the underlying HTTP request.
    """

    def __init__(self, kubeconfig_path: str | None = None, context: str | None = None):
        """Initialize Kubernetes client.

        Args:
            kubeconfig_path: Path to kubeconfig file (optional)
            context: Kubernetes context to use (optional)
        """
        try:
            if kubeconfig_path:
                config.load_kube_config(config_file=kubeconfig_path, context=context)
            else:
                # Try to load from default location or in-cluster config
                try:
                    config.load_kube_config(context=context)
                except config.ConfigException:
                    config.load_incluster_config()

            self.core_v1 = client.CoreV1Api()
            self.storage_v1 = client.StorageV1Api()
            self.custom_objects = client.CustomObjectsApi()

            logger.debug("k8s_client_initialized", context=context)

        except Exception as e:
            logger.error("k8s_client_initialization_failed", error=str(e))
            raise InfrastructureError("Failed to initialize Kubernetes client") from e

    def get_nodes(self, request_timeout: float | None = None) -> list[V1Node]:
        """Get all nodes in the cluster.

        Returns:
            List of V1Node objects

        Raises:
            InfrastructureError: If nodes cannot be retrieved
        """
        try:
            response = self.core_v1.list_node(_request_timeout=request_timeout)
            nodes = response.items

            logger.debug("nodes_retrieved", count=len(nodes))
            return nodes

        except ApiException as e:
            logger.error("get_nodes_failed", status=e.status, reason=e.reason)
            raise InfrastructureError(f"Failed to list nodes: {e.reason}") from e

    def get_storage_classes(self, request_timeout: float | None = None) -> list[V1StorageClass]:
        """Get all storage classes.

        Raises:
            InfrastructureError: If storage classes cannot be retrieved
        """
        try:
            response = self.storage_v1.list_storage_class(_request_timeout=request_timeout)
            return response.items

        except ApiException as e:
            logger.error("get_storage_classes_failed", status=e.status, reason=e.reason)
            raise InfrastructureError(f"Failed to list storage classes: {e.reason}") from e

    def get_persistent_volumes(
        self, request_timeout: float | None = None
    ) -> list[V1PersistentVolume]:
        """Get all persistent volumes.

        Raises:
            InfrastructureError: If persistent volumes cannot be retrieved
        """
        try:
            response = self.core_v1.list_persistent_volume(_request_timeout=request_timeout)
            return response.items

        except ApiException as e:
            logger.error("get_persistent_volumes_failed", status=e.status, reason=e.reason)
            raise InfrastructureError(f"Failed to list persistent volumes: {e.reason}") from e

    def get_infrastructure(self, request_timeout: float | None = None) -> dict[str, Any]:
        """Get the cluster-scoped OpenShift Infrastructure object.

        Returns:
            Raw Infrastructure object

        Raises:
            InfrastructureError: If the object cannot be retrieved
        """
        try:
            return self.custom_objects.get_cluster_custom_object(
                INFRASTRUCTURE_GROUP,
                INFRASTRUCTURE_VERSION,
                INFRASTRUCTURE_PLURAL,
                INFRASTRUCTURE_NAME,
                _request_timeout=request_timeout,
            )

        except ApiException as e:
            logger.error("get_infrastructure_failed", status=e.status, reason=e.reason)
            raise InfrastructureError(f"Failed to get infrastructure: {e.reason}") from e
