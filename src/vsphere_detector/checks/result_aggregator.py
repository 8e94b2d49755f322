"""Collects check results of one run into a Report."""

from datetime import datetime, timezone

from vsphere_detector.core.models import CheckResult, Report


class ResultAggregator:
    """Accumulates results in the order the runners produce them."""

    def __init__(self) -> None:
        self._results: list[CheckResult] = []
        self._started_at = datetime.now(timezone.utc)

    def add(self, result: CheckResult) -> None:
        """Append one result."""
        self._results.append(result)

    def extend(self, results: list[CheckResult]) -> None:
        """Append several results, keeping their order."""
        self._results.extend(results)

    def __len__(self) -> int:
        return len(self._results)

    def report(self) -> Report:
        """Build the read-only report of everything collected so far."""
        return Report(
            results=tuple(self._results),
            started_at=self._started_at,
            finished_at=datetime.now(timezone.utc),
        )
