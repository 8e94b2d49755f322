"""vSphere adapter implementing the VSphereConnection interface."""

import functools
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from vsphere_detector.clients.vsphere_client import VSphereClient
from vsphere_detector.core.config import VSphereConfig
from vsphere_detector.core.exceptions import InfrastructureError, TimeoutFailure
from vsphere_detector.interfaces.check import RunContext
from vsphere_detector.interfaces.vsphere import VSphereConnection, VSphereConnector
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class VSphereAdapter(VSphereConnection):
    """Adapter wrapping VSphereClient to implement VSphereConnection.

    Blocking client calls run through ``RunContext.call`` so they are
    bounded by the run deadline. A call abandoned at the deadline keeps its
    worker thread until the socket times out, so every client call and
    ``close`` hold the same lock: the session is never used concurrently and
    is never logged out under a call still in flight.
    """

    def __init__(self, client: VSphereClient):
        """Initialize adapter.

        Args:
            client: Logged-in vCenter client
        """
        self.client = client
        self._lock = threading.Lock()
        self._closed = False

    def _serialized(self, func: Callable[..., T]) -> Callable[..., T]:
        """Wrap a client method so it runs under the session lock."""

        @functools.wraps(func)
        def call(*args: Any) -> T:
            with self._lock:
                if self._closed:
                    raise InfrastructureError("vCenter session is closed")
                return func(*args)

        return call

    async def find_vm_by_uuid(self, ctx: RunContext, datacenter: str, uuid: str) -> Any | None:
        """Find a virtual machine by BIOS UUID."""
        try:
            return await ctx.call(self._serialized(self.client.find_vm_by_uuid), datacenter, uuid)
        except (TimeoutFailure, InfrastructureError):
            raise
        except Exception as e:
            raise InfrastructureError(f"Failed to find VM {uuid}: {e}") from e

    async def retrieve_properties(
        self, ctx: RunContext, obj: Any, paths: Sequence[str]
    ) -> dict[str, Any]:
        """Fetch only the given property paths of a managed object."""
        try:
            return await ctx.call(
                self._serialized(self.client.retrieve_properties), obj, list(paths)
            )
        except (TimeoutFailure, InfrastructureError):
            raise
        except Exception as e:
            raise InfrastructureError(f"Failed to retrieve VM properties: {e}") from e

    def close(self) -> None:
        """Log out once any in-flight call has returned; further calls are no-ops."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self.client.disconnect()


class VSphereAdapterConnector(VSphereConnector):
    """Opens pyVmomi-backed sessions."""

    def connect(self, config: VSphereConfig, timeout: float) -> VSphereAdapter:
        """Log in to the vCenter named in config.

        Raises:
            InfrastructureError: If login fails
        """
        client = VSphereClient(
            host=config.server,
            user=config.user,
            password=config.password,
            port=config.port,
            insecure=config.insecure,
            timeout=timeout,
        )
        logger.info("vsphere_connected", server=config.server)
        return VSphereAdapter(client)
