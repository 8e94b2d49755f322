"""Runs every registered node-level check against every node."""

import asyncio

from vsphere_detector.checks.check_registry import CheckRegistry
from vsphere_detector.checks.execution import execute_check
from vsphere_detector.checks.result_aggregator import ResultAggregator
from vsphere_detector.core.exceptions import InfrastructureError
from vsphere_detector.core.models import CheckResult, FailureKind, Outcome
from vsphere_detector.interfaces.check import NODE_PROPERTIES, RunContext, VirtualMachineSnapshot
from vsphere_detector.interfaces.kube_client import Node
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)

# Check name used for the single result recorded when nodes cannot be listed.
NODE_PHASE = "NodeChecks"


def _infrastructure_outcome(error: Exception, message: str) -> Outcome:
    if isinstance(error, TimeoutError):
        reason = str(error) or "run deadline exceeded"
        return Outcome.failure(f"{message}: {reason}", FailureKind.TIMEOUT)
    return Outcome.failure(f"{message}: {error}", FailureKind.INFRASTRUCTURE)


class NodeCheckRunner:
    """Executes node checks per node with one VM property fetch per node.

    For each node in listing order the VM is resolved and only the
    properties in ``properties`` are fetched, once, no matter how many node
    checks are registered. Every node check then gets the same snapshot.
    """

    def __init__(self, registry: CheckRegistry, properties: tuple[str, ...] = NODE_PROPERTIES):
        """Initialize runner.

        Args:
            registry: Registry to read node checks from
            properties: VM property paths to prefetch
        """
        self.registry = registry
        self.properties = properties

    async def fetch_vm(self, ctx: RunContext, node: Node) -> VirtualMachineSnapshot:
        """Resolve the VM backing a node and fetch its prefetch properties.

        Args:
            ctx: Run context
            node: Node whose VM to fetch

        Returns:
            Snapshot holding only the prefetched properties

        Raises:
            InfrastructureError: If the VM cannot be identified or fetched
            TimeoutFailure: If the run deadline expires
        """
        uuid = node.vm_uuid
        if not uuid:
            raise InfrastructureError(f"node {node.name} has no provider ID or system UUID")

        ref = await ctx.vsphere.find_vm_by_uuid(ctx, ctx.vsphere_config.datacenter, uuid)
        if ref is None:
            raise InfrastructureError(
                f"no VM with UUID {uuid} in datacenter {ctx.vsphere_config.datacenter}"
            )

        properties = await ctx.vsphere.retrieve_properties(ctx, ref, list(self.properties))
        return VirtualMachineSnapshot(
            ref=ref, properties=dict(properties), prefetched=self.properties
        )

    async def run(self, ctx: RunContext, aggregator: ResultAggregator) -> None:
        """Run all node checks on all nodes and record their results.

        A node listing failure stops the phase: an infrastructure error is
        recorded once under NODE_PHASE, a timeout once per node check with no
        node. A VM resolution failure is recorded for each node check of that
        node and the phase moves on to the next node.

        Args:
            ctx: Run context
            aggregator: Collector for the results
        """
        checks = self.registry.node_checks()
        if not checks:
            logger.info("no_node_checks_registered")
            return

        try:
            nodes = await ctx.kube.list_nodes(ctx)
        except Exception as e:
            logger.error("list_nodes_failed", error=str(e))
            outcome = _infrastructure_outcome(e, "failed to list nodes")
            if outcome.kind == FailureKind.TIMEOUT:
                aggregator.extend([CheckResult.from_outcome(name, outcome) for name, _ in checks])
            else:
                aggregator.add(CheckResult.from_outcome(NODE_PHASE, outcome))
            return

        logger.info("running_node_checks", node_count=len(nodes), check_count=len(checks))

        for node in nodes:
            try:
                async with asyncio.timeout(ctx.remaining()):
                    vm = await self.fetch_vm(ctx, node)
            except Exception as e:
                logger.warning("vm_resolution_failed", node_name=node.name, error=str(e))
                outcome = _infrastructure_outcome(e, f"failed to get VM for node {node.name}")
                aggregator.extend(
                    [
                        CheckResult.from_outcome(name, outcome, node_name=node.name)
                        for name, _ in checks
                    ]
                )
                continue

            for name, check in checks:
                result = await execute_check(
                    ctx,
                    name,
                    lambda check=check: check.run(ctx, node, vm),
                    node_name=node.name,
                )
                aggregator.add(result)

        logger.info("node_checks_completed", node_count=len(nodes))
