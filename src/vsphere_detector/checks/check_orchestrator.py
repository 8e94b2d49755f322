"""Check orchestrator: the single entry point for running all checks."""

from vsphere_detector.checks.check_registry import CheckRegistry
from vsphere_detector.checks.cluster_runner import ClusterCheckRunner
from vsphere_detector.checks.node_runner import NodeCheckRunner
from vsphere_detector.checks.result_aggregator import ResultAggregator
from vsphere_detector.checks.run_context import open_run_context
from vsphere_detector.core.config import DetectorConfig, RunConfig, VSphereConfig
from vsphere_detector.core.models import Report
from vsphere_detector.interfaces.kube_client import KubeClient
from vsphere_detector.interfaces.vsphere import VSphereConnector
from vsphere_detector.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


class CheckOrchestrator:
    """Orchestrates one run of all registered checks.

    The orchestrator handles:
    - Building the run context and releasing its vCenter session
    - Running cluster checks, then node checks
    - Failure isolation per check
    - Result aggregation into a Report

    It does not decide how often to run or how the Report is exposed.
    """

    def __init__(
        self,
        registry: CheckRegistry,
        connector: VSphereConnector,
        run_config: RunConfig | None = None,
    ):
        """Initialize check orchestrator.

        Args:
            registry: Registry containing cluster and node checks
            connector: Factory for vCenter sessions
            run_config: Run settings (default: RunConfig())
        """
        self.registry = registry
        self.connector = connector
        self.run_config = run_config or RunConfig()
        self.cluster_runner = ClusterCheckRunner(registry)
        self.node_runner = NodeCheckRunner(registry)
        logger.debug(
            "check_orchestrator_initialized",
            cluster_checks=len(registry.cluster_check_names()),
            node_checks=len(registry.node_check_names()),
            timeout=self.run_config.timeout_seconds,
        )

    async def run(self, vsphere_config: VSphereConfig, kube: KubeClient) -> Report:
        """Run all checks and return their results.

        Args:
            vsphere_config: vSphere configuration
            kube: Cluster-read adapter

        Returns:
            Report with cluster results first, then node results grouped by node

        Raises:
            InfrastructureError: If the vCenter session cannot be established
        """
        logger.info("run_started", server=vsphere_config.server)
        aggregator = ResultAggregator()

        async with open_run_context(vsphere_config, kube, self.connector, self.run_config) as ctx:
            await self.cluster_runner.run(ctx, aggregator)
            await self.node_runner.run(ctx, aggregator)

        report = aggregator.report()
        logger.info("run_completed", **report.summary())
        return report


async def run_all_checks(
    config: DetectorConfig,
    registry: CheckRegistry | None = None,
    kube: KubeClient | None = None,
    connector: VSphereConnector | None = None,
) -> Report:
    """Run all checks with logging and adapters built from configuration.

    Args:
        config: Detector configuration
        registry: Checks to run (default: default_registry())
        kube: Cluster-read adapter (default: KubernetesAdapter from config)
        connector: vCenter session factory (default: VSphereAdapterConnector)

    Returns:
        Report of the run

    Raises:
        InfrastructureError: If vCenter or Kubernetes cannot be reached at setup
    """
    setup_logging(**config.logging.model_dump())

    if registry is None:
        from vsphere_detector.checks.defaults import default_registry

        registry = default_registry()

    if kube is None:
        from vsphere_detector.adapters.k8s_adapter import KubernetesAdapter

        kube = KubernetesAdapter(
            kubeconfig_path=config.kubernetes.kubeconfig_path,
            context=config.kubernetes.context,
        )

    if connector is None:
        from vsphere_detector.adapters.vsphere_adapter import VSphereAdapterConnector

        connector = VSphereAdapterConnector()

    orchestrator = CheckOrchestrator(registry, connector, config.run)
    return await orchestrator.run(config.vsphere, kube)
