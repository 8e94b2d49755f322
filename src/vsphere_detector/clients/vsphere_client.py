"""vCenter client for VM lookups and property retrieval."""

from collections.abc import Sequence
from typing import Any

from pyVim.connect import Disconnect, SmartConnect
from pyVmomi import vim, vmodl

from vsphere_detector.core.config import CONNECT_TIMEOUT_FLOOR, DEFAULT_TIMEOUT_SECONDS
from vsphere_detector.core.exceptions import InfrastructureError
from vsphere_detector.utils.logging import get_logger
from vsphere_detector.utils.retry import retry_on_exception

logger = get_logger(__name__)


class VSphereClient:
    """pyVmomi session wrapper.

    Calls are blocking. The session is not safe for concurrent use.
    """

    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        port: int = 443,
        insecure: bool = False,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Log in to vCenter.

        Transient socket errors are retried until ``timeout`` runs out. The
        timeout is never below CONNECT_TIMEOUT_FLOOR, so sockets always have a
        finite timeout.

        Args:
            host: vCenter host name or address
            user: User name
            password: Password
            port: HTTPS port
            insecure: Skip TLS certificate validation
            timeout: Connection and per-request socket timeout (seconds)

        Raises:
            InfrastructureError: If login fails
        """
        self.host = host
        self._datacenters: dict[str, Any] = {}
        http_timeout = max(timeout, CONNECT_TIMEOUT_FLOOR)

        login = retry_on_exception(
            exceptions=(ConnectionError, OSError),
            max_attempts=3,
            max_delay=http_timeout,
            min_wait=0.5,
            max_wait=2,
        )(SmartConnect)

        try:
            self.service_instance = login(
                host=host,
                user=user,
                pwd=password,
                port=port,
                disableSslCertValidation=insecure,
                httpConnectionTimeout=http_timeout,
            )
            self.content = self.service_instance.RetrieveContent()
            logger.debug("vsphere_client_initialized", host=host)

        except vim.fault.InvalidLogin as e:
            logger.error("vsphere_login_rejected", host=host)
            raise InfrastructureError(f"vCenter {host} rejected the credentials: {e.msg}") from e
        except Exception as e:
            logger.error("vsphere_client_initialization_failed", host=host, error=str(e))
            raise InfrastructureError(f"Failed to connect to vCenter {host}: {e}") from e

    def get_datacenter(self, name: str) -> Any:
        """Get a datacenter by inventory path, caching the result.

        Raises:
            InfrastructureError: If the datacenter does not exist or lookup fails
        """
        if name in self._datacenters:
            return self._datacenters[name]

        try:
            datacenter = self.content.searchIndex.FindByInventoryPath(name)
        except vmodl.MethodFault as e:
            logger.error("get_datacenter_failed", datacenter=name, error=e.msg)
            raise InfrastructureError(f"Failed to look up datacenter {name}: {e.msg}") from e

        if not isinstance(datacenter, vim.Datacenter):
            raise InfrastructureError(f"Datacenter {name} not found")

        self._datacenters[name] = datacenter
        return datacenter

    def find_vm_by_uuid(self, datacenter: str, uuid: str) -> Any | None:
        """Find a VM by BIOS UUID within a datacenter.

        Returns:
            vim.VirtualMachine or None

        Raises:
            InfrastructureError: If the search fails
        """
        dc = self.get_datacenter(datacenter)
        try:
            vm = self.content.searchIndex.FindByUuid(dc, uuid, True, False)
        except vmodl.MethodFault as e:
            logger.error("find_vm_failed", uuid=uuid, error=e.msg)
            raise InfrastructureError(f"Failed to search VM {uuid}: {e.msg}") from e

        logger.debug("vm_lookup", uuid=uuid, found=vm is not None)
        return vm

    def retrieve_properties(self, obj: Any, paths: Sequence[str]) -> dict[str, Any]:
        """Fetch only the given property paths of one managed object.

        Returns:
            Mapping of path to value for every path set on the server

        Raises:
            InfrastructureError: If the property collector call fails
        """
        object_spec = vmodl.query.PropertyCollector.ObjectSpec(obj=obj, skip=False)
        property_spec = vmodl.query.PropertyCollector.PropertySpec(
            type=type(obj), all=False, pathSet=list(paths)
        )
        filter_spec = vmodl.query.PropertyCollector.FilterSpec(
            objectSet=[object_spec], propSet=[property_spec]
        )

        try:
            contents = self.content.propertyCollector.RetrieveContents([filter_spec])
        except vmodl.MethodFault as e:
            logger.error("retrieve_properties_failed", paths=list(paths), error=e.msg)
            raise InfrastructureError(
                f"Failed to retrieve properties {list(paths)}: {e.msg}"
            ) from e

        properties: dict[str, Any] = {}
        for content in contents or []:
            for prop in content.propSet:
                properties[prop.name] = prop.val
        return properties

    def disconnect(self) -> None:
        """Log out of vCenter."""
        Disconnect(self.service_instance)
        logger.debug("vsphere_client_disconnected", host=self.host)
