"""Runs every registered cluster-level check once."""

from vsphere_detector.checks.check_registry import CheckRegistry
from vsphere_detector.checks.execution import execute_check
from vsphere_detector.checks.result_aggregator import ResultAggregator
from vsphere_detector.interfaces.check import RunContext
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)


class ClusterCheckRunner:
    """Executes cluster checks in name order, isolating failures per check.

    An expired deadline does not stop the loop: later checks are still
    invoked and report TimeoutFailure.
    """

    def __init__(self, registry: CheckRegistry):
        """Initialize runner.

        Args:
            registry: Registry to read cluster checks from
        """
        self.registry = registry

    async def run(self, ctx: RunContext, aggregator: ResultAggregator) -> None:
        """Run all cluster checks and record their results.

        Args:
            ctx: Run context
            aggregator: Collector for the results
        """
        checks = self.registry.cluster_checks()
        logger.info("running_cluster_checks", count=len(checks))

        failed = 0
        for name, check in checks:
            result = await execute_check(ctx, name, lambda check=check: check.run(ctx))
            aggregator.add(result)
            if not result.passed:
                failed += 1

        logger.info("cluster_checks_completed", total=len(checks), failed=failed)
