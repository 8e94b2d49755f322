"""Core data models for check outcomes and run reports."""

from collections import Counter
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FailureKind(str, Enum):
    """Classification of a failed check."""

    INFRASTRUCTURE = "InfrastructureError"
    TIMEOUT = "TimeoutFailure"
    CHECK = "CheckFailure"


class Outcome(BaseModel):
    """What a single check invocation produced: success or a typed failure."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    kind: FailureKind | None = None
    message: str = ""

    @model_validator(mode="after")
    def validate_kind(self) -> "Outcome":
        """Ensure failures carry a kind and successes do not.

        Raises:
            ValueError: If passed and kind disagree
        """
        if self.passed and self.kind is not None:
            raise ValueError("A passed outcome cannot carry a failure kind")
        if not self.passed and self.kind is None:
            raise ValueError("A failed outcome requires a failure kind")
        return self

    @classmethod
    def success(cls, message: str = "") -> "Outcome":
        """Build a passed outcome."""
        return cls(passed=True, message=message)

    @classmethod
    def failure(cls, message: str, kind: FailureKind = FailureKind.CHECK) -> "Outcome":
        """Build a failed outcome.

        Args:
            message: Human-readable reason
            kind: Failure classification (default: CheckFailure)
        """
        return cls(passed=False, kind=kind, message=message)


class CheckResult(BaseModel):
    """Result of one check against one target.

    ``node_name`` is None for cluster checks and for phase-level failures.
    """

    model_config = ConfigDict(frozen=True)

    check_name: str
    node_name: str | None = None
    passed: bool
    kind: FailureKind | None = None
    message: str = ""
    duration_ms: int = 0
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_outcome(
        cls,
        check_name: str,
        outcome: Outcome,
        node_name: str | None = None,
        duration_ms: int = 0,
    ) -> "CheckResult":
        """Create a result from a check outcome.

        Args:
            check_name: Registered name of the check
            outcome: Outcome of the invocation
            node_name: Node the check ran against, if any
            duration_ms: Execution time in milliseconds

        Returns:
            CheckResult
        """
        return cls(
            check_name=check_name,
            node_name=node_name,
            passed=outcome.passed,
            kind=outcome.kind,
            message=outcome.message,
            duration_ms=duration_ms,
        )

    @property
    def outcome(self) -> Outcome:
        """Outcome this result was recorded from."""
        return Outcome(passed=self.passed, kind=self.kind, message=self.message)


class Report(BaseModel):
    """Ordered, read-only collection of the results of one run."""

    model_config = ConfigDict(frozen=True)

    results: tuple[CheckResult, ...] = ()
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime = Field(default_factory=_utcnow)

    def __len__(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> bool:
        """True when every recorded result passed."""
        return all(r.passed for r in self.results)

    def failures(self) -> list[CheckResult]:
        """Get failed results in report order."""
        return [r for r in self.results if not r.passed]

    def for_node(self, node_name: str) -> list[CheckResult]:
        """Get results recorded against a node."""
        return [r for r in self.results if r.node_name == node_name]

    def for_check(self, check_name: str) -> list[CheckResult]:
        """Get results recorded for a check, across all nodes."""
        return [r for r in self.results if r.check_name == check_name]

    def summary(self) -> dict[str, int]:
        """Count results by status and failure kind.

        Returns:
            Dictionary with total, passed, failed and one entry per failure kind
        """
        kinds = Counter(r.kind.value for r in self.results if r.kind is not None)
        passed = sum(1 for r in self.results if r.passed)
        return {
            "total": len(self.results),
            "passed": passed,
            "failed": len(self.results) - passed,
            **{kind.value: kinds.get(kind.value, 0) for kind in FailureKind},
        }
