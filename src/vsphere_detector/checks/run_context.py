"""Building and tearing down the per-run context."""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from vsphere_detector.core.config import CONNECT_TIMEOUT_FLOOR, RunConfig, VSphereConfig
from vsphere_detector.core.exceptions import InfrastructureError
from vsphere_detector.interfaces.check import RunContext
from vsphere_detector.interfaces.kube_client import KubeClient
from vsphere_detector.interfaces.vsphere import VSphereConnection, VSphereConnector
from vsphere_detector.utils.logging import get_logger

logger = get_logger(__name__)


async def build_run_context(
    vsphere_config: VSphereConfig,
    kube: KubeClient,
    connector: VSphereConnector,
    run_config: RunConfig | None = None,
) -> RunContext:
    """Connect to vCenter and bundle everything a run needs.

    The deadline starts counting when this is called. Login is bounded by the
    run timeout, but never by less than CONNECT_TIMEOUT_FLOOR, so a run with
    an exhausted budget still gets a session and reports its checks as
    TimeoutFailure. A session that arrives after the bound is released.

    Args:
        vsphere_config: vSphere configuration
        kube: Cluster-read adapter
        connector: Factory for the vCenter session
        run_config: Run settings (default: RunConfig())

    Returns:
        RunContext owning an open vCenter session

    Raises:
        InfrastructureError: If the vCenter session cannot be established
    """
    run_config = run_config or RunConfig()
    timeout = run_config.timeout_seconds
    deadline = time.monotonic() + timeout
    connect_timeout = max(timeout, CONNECT_TIMEOUT_FLOOR)

    logger.info(
        "connecting_to_vsphere",
        server=vsphere_config.server,
        datacenter=vsphere_config.datacenter,
        timeout=timeout,
    )

    connect = asyncio.ensure_future(
        asyncio.to_thread(connector.connect, vsphere_config, connect_timeout)
    )
    try:
        done, _ = await asyncio.wait({connect}, timeout=connect_timeout)
    except asyncio.CancelledError:
        connect.add_done_callback(_release_late_connection)
        raise
    if not done:
        connect.add_done_callback(_release_late_connection)
        logger.error(
            "vsphere_connection_timed_out", server=vsphere_config.server, timeout=connect_timeout
        )
        raise InfrastructureError(
            f"Timed out connecting to vCenter {vsphere_config.server} after {connect_timeout}s"
        )

    try:
        connection = connect.result()
    except InfrastructureError:
        logger.error("vsphere_connection_failed", server=vsphere_config.server)
        raise
    except Exception as e:
        logger.error("vsphere_connection_failed", server=vsphere_config.server, error=str(e))
        raise InfrastructureError(
            f"Failed to connect to vCenter {vsphere_config.server}: {e}"
        ) from e

    return RunContext(
        deadline=deadline,
        vsphere_config=vsphere_config,
        vsphere=connection,
        kube=kube,
    )


def release_connection(connection: VSphereConnection) -> None:
    """Close a vCenter session, logging instead of raising on failure."""
    try:
        connection.close()
        logger.debug("vsphere_connection_released")
    except Exception as e:
        logger.warning("vsphere_connection_release_failed", error=str(e))


def _release_late_connection(connect: asyncio.Future) -> None:
    if connect.cancelled() or connect.exception() is not None:
        return
    logger.warning("vsphere_late_connection_released")
    release_connection(connect.result())


@asynccontextmanager
async def open_run_context(
    vsphere_config: VSphereConfig,
    kube: KubeClient,
    connector: VSphereConnector,
    run_config: RunConfig | None = None,
) -> AsyncIterator[RunContext]:
    """Context manager yielding a RunContext and releasing its session on exit.

    The session is released exactly once, whether the body succeeds or raises.
    Release runs off the event loop since it may wait for a call abandoned at
    the deadline to return.
    """
    ctx = await build_run_context(vsphere_config, kube, connector, run_config)
    try:
        yield ctx
    finally:
        await asyncio.to_thread(release_connection, ctx.vsphere)
