"""Node VM disk UUID check."""

from vsphere_detector.core.models import Outcome
from vsphere_detector.interfaces.check import NodeCheck, RunContext, VirtualMachineSnapshot
from vsphere_detector.interfaces.kube_client import Node

DISK_UUID_KEY = "disk.EnableUUID"


class NodeDiskUUIDCheck(NodeCheck):
    """Check that the node VM exposes stable disk UUIDs to the guest.

    Without ``disk.EnableUUID=TRUE`` in the VM's advanced settings the
    guest cannot identify attached volumes and volume mounts fail.
    """

    @property
    def name(self) -> str:
        """Get check name."""
        return "CheckNodeDiskUUID"

    @property
    def description(self) -> str:
        """Get check description."""
        return f"Validates {DISK_UUID_KEY} is TRUE on every node VM"

    @property
    def required_properties(self) -> tuple[str, ...]:
        return ("config.extraConfig",)

    async def run(self, ctx: RunContext, node: Node, vm: VirtualMachineSnapshot) -> Outcome:
        """Execute disk UUID check.

        Args:
            ctx: Run context
            node: Node under check
            vm: Prefetched VM snapshot

        Returns:
            Outcome indicating pass/fail
        """
        for option in vm.get("config.extraConfig") or []:
            if option.key.lower() != DISK_UUID_KEY.lower():
                continue
            if str(option.value).upper() == "TRUE":
                return Outcome.success(f"{DISK_UUID_KEY} is enabled")
            return Outcome.failure(
                f"{DISK_UUID_KEY} is {option.value!r} on the VM of node {node.name}, expected TRUE"
            )

        return Outcome.failure(f"{DISK_UUID_KEY} is not set on the VM of node {node.name}")
