"""Single-check execution boundary shared by both runners."""

import asyncio
import time
from collections.abc import Awaitable, Callable

from vsphere_detector.core.exceptions import CheckFailure, InfrastructureError
from vsphere_detector.core.models import CheckResult, FailureKind, Outcome
from vsphere_detector.interfaces.check import RunContext
from vsphere_detector.utils.logging import get_logger, log_error

logger = get_logger(__name__)


def outcome_from_exception(error: Exception) -> Outcome:
    """Classify an exception raised by a check or a remote call.

    Args:
        error: Exception to classify

    Returns:
        Failed outcome with the matching FailureKind
    """
    if isinstance(error, TimeoutError):
        return Outcome.failure(str(error) or "run deadline exceeded", FailureKind.TIMEOUT)
    if isinstance(error, InfrastructureError):
        return Outcome.failure(str(error), FailureKind.INFRASTRUCTURE)
    if isinstance(error, CheckFailure):
        return Outcome.failure(str(error), FailureKind.CHECK)
    return Outcome.failure(f"{type(error).__name__}: {error}", FailureKind.CHECK)


async def execute_check(
    ctx: RunContext,
    check_name: str,
    invoke: Callable[[], Awaitable[Outcome]],
    node_name: str | None = None,
) -> CheckResult:
    """Invoke one check under the run deadline and record its result.

    The check is always started, even once the deadline has passed, so its
    first remote call fails fast. A check started after the deadline is
    recorded as TimeoutFailure whatever it returns. Nothing raised by the
    check escapes, except task cancellation.

    Args:
        ctx: Run context whose deadline bounds the check
        check_name: Registered name of the check
        invoke: Zero-argument callable starting the check
        node_name: Node the check runs against, if any

    Returns:
        CheckResult for this invocation
    """
    logger.debug("executing_check", check_name=check_name, node_name=node_name)
    start_time = time.perf_counter()
    started_late = ctx.expired

    try:
        async with asyncio.timeout(ctx.remaining()):
            outcome = await invoke()
    except TimeoutError as e:
        outcome = outcome_from_exception(e)
    except (InfrastructureError, CheckFailure) as e:
        outcome = outcome_from_exception(e)
    except Exception as e:
        log_error(logger, e, operation="check", check_name=check_name, node_name=node_name)
        outcome = outcome_from_exception(e)

    if not isinstance(outcome, Outcome):
        outcome = Outcome.failure(f"check returned {type(outcome).__name__} instead of an Outcome")

    if started_late and outcome.kind != FailureKind.TIMEOUT:
        outcome = Outcome.failure(
            "run deadline exceeded before the check started", FailureKind.TIMEOUT
        )

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    result = CheckResult.from_outcome(
        check_name, outcome, node_name=node_name, duration_ms=duration_ms
    )

    if result.passed:
        logger.info("check_passed", check_name=check_name, node_name=node_name)
    else:
        logger.warning(
            "check_failed",
            check_name=check_name,
            node_name=node_name,
            kind=result.kind.value,
            message=result.message,
        )
    return result
