"""FindingAggregator: merge findings and collapse repeated detections."""

from __future__ import annotations

from collections.abc import Iterable

from jsmells.analysis.models import Finding


class FindingAggregator:
    """Deduplicate findings by ``(file, line, smell)``.

    The first finding seen for a key wins; later ones with the same key are
    dropped whatever their description. Not thread-safe: the batch driver
    merges per-unit aggregators from a single writer.
    """

    def __init__(self) -> None:
        self._findings: dict[tuple[str, int, str], Finding] = {}

    def __len__(self) -> int:
        return len(self._findings)

    def add(self, finding: Finding) -> bool:
        """Add one finding. Returns False if its key was already present."""
        key = (finding.file, finding.line, finding.smell)
        if key in self._findings:
            return False
        self._findings[key] = finding
        return True

    def extend(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.add(finding)

    def merge(self, other: FindingAggregator) -> None:
        """Fold another aggregator's findings into this one."""
        self.extend(other._findings.values())

    def findings(self) -> list[Finding]:
        """Merged findings, stably ordered by file then line."""
        return sorted(self._findings.values(), key=lambda f: (f.file, f.line))
