"""Cluster information check."""

from vsphere_detector.core.models import Outcome
from vsphere_detector.interfaces.check import ClusterCheck, RunContext
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)

VSPHERE_PLATFORM = "VSphere"


class ClusterInfoCheck(ClusterCheck):
    """Collect basic cluster information and confirm it runs on vSphere."""

    @property
    def name(self) -> str:
        """Get check name."""
        return "ClusterInfo"

    @property
    def description(self) -> str:
        """Get check description."""
        return "Validates the cluster reports vSphere as its infrastructure platform"

    async def run(self, ctx: RunContext) -> Outcome:
        """Execute cluster info check.

        Args:
            ctx: Run context

        Returns:
            Outcome indicating pass/fail
        """
        infrastructure = await ctx.kube.get_infrastructure(ctx)
        nodes = await ctx.kube.list_nodes(ctx)

        logger.info(
            "cluster_info",
            infrastructure_name=infrastructure.infrastructure_name,
            platform=infrastructure.platform,
            node_count=len(nodes),
        )

        if infrastructure.platform.lower() != VSPHERE_PLATFORM.lower():
            return Outcome.failure(
                f"Cluster platform is {infrastructure.platform or 'unknown'}, "
                f"expected {VSPHERE_PLATFORM}"
            )

        return Outcome.success(
            f"{VSPHERE_PLATFORM} cluster {infrastructure.infrastructure_name} "
            f"with {len(nodes)} nodes"
        )
