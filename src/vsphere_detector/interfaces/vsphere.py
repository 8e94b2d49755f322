"""vSphere connection interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vsphere_detector.core.config import VSphereConfig
    from vsphere_detector.interfaces.check import RunContext


class VSphereConnection(ABC):
    """An authenticated vCenter session.

    The session is not assumed to be safe for concurrent use.
    """

    @abstractmethod
    async def find_vm_by_uuid(self, ctx: RunContext, datacenter: str, uuid: str) -> Any | None:
        """Find a virtual machine by BIOS UUID.

        Args:
            ctx: Run context bounding the call
            datacenter: Datacenter inventory path
            uuid: BIOS UUID of the VM

        Returns:
            Opaque VM reference, or None if no VM matches

        Raises:
            InfrastructureError: If the lookup fails
            TimeoutFailure: If the run deadline expires
        """

    @abstractmethod
    async def retrieve_properties(
        self, ctx: RunContext, obj: Any, paths: Sequence[str]
    ) -> dict[str, Any]:
        """Fetch only the given property paths of a managed object.

        Args:
            ctx: Run context bounding the call
            obj: Managed object reference
            paths: Property paths to populate

        Returns:
            Mapping of property path to value; paths unset on the server are absent

        Raises:
            InfrastructureError: If the retrieval fails
            TimeoutFailure: If the run deadline expires
        """

    @abstractmethod
    def close(self) -> None:
        """Log out and release the session."""


class VSphereConnector(ABC):
    """Factory for vCenter sessions."""

    @abstractmethod
    def connect(self, config: VSphereConfig, timeout: float) -> VSphereConnection:
        """Open a session.

        Args:
            config: vSphere configuration
            timeout: Time budget for establishing the session (seconds)

        Returns:
            Connected session

        Raises:
            InfrastructureError: If the session cannot be established
        """
