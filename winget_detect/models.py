"""
Data models shared by the lookup strategies and the detection orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ComparisonResult(Enum):
    """Outcome of classifying one version string against another."""
    LOWER = "lower"
    EQUAL = "equal"
    HIGHER = "higher"


class DetectionOutcome(Enum):
    """Final detection verdict.

    The value is the process exit code reported to the deployment agent.
    """
    SATISFIED = 0
    VERSION_TOO_LOW = 4
    NOT_DETECTED = 10

    @property
    def exit_code(self) -> int:
        return self.value


@dataclass(frozen=True)
class PackageCandidate:
    """
    Normalized package record produced by a lookup strategy.

    Attributes:
        name: Display name (may be empty)
        id: Package identifier as reported by the tool
        version: Raw version string (not guaranteed numeric, e.g. "Unknown")
        source: Catalog the package came from, None when the output has no source
    """
    name: str
    id: str
    version: str
    source: str | None = None

    def __str__(self) -> str:
        source_str = f" [{self.source}]" if self.source else ""
        return f"{self.id} {self.version or '?'}{source_str}"


@dataclass(frozen=True)
class DetectionResult:
    """
    Result of one detection run.

    Attributes:
        package_id: Identifier that was queried
        expected_version: Minimum version requested (empty means any)
        outcome: Final verdict
        tool_path: Resolved package-manager executable, None if not found
        candidate: Package record from the winning strategy
        strategy: Name of the strategy that produced the candidate
        comparison: Installed version relative to the expected one
    """
    package_id: str
    expected_version: str
    outcome: DetectionOutcome
    tool_path: str | None = None
    candidate: PackageCandidate | None = None
    strategy: str | None = None
    comparison: ComparisonResult | None = None

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code
