"""
Detection orchestrator.

Locates the package manager, tries each lookup strategy in order until one
returns a candidate, then checks the installed version against the expected
minimum. The outcome maps directly to the process exit code:

    0  - installed, version requirement met (or none given)
    4  - installed, version lower than required
    10 - package manager missing, or package not found by any strategy
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from .locator import TOOL_NAME, locate_tool
from .models import ComparisonResult, DetectionOutcome, DetectionResult, PackageCandidate
from .runner import DEFAULT_TIMEOUT_SECONDS, ToolRunner
from .strategies import DEFAULT_STRATEGIES, LookupStrategy
from .versioning import compare_versions, is_blank

EXIT_SATISFIED = DetectionOutcome.SATISFIED.exit_code
EXIT_VERSION_TOO_LOW = DetectionOutcome.VERSION_TOO_LOW.exit_code
EXIT_NOT_DETECTED = DetectionOutcome.NOT_DETECTED.exit_code


def classify(candidate: PackageCandidate | None, expected_version: str | None) -> tuple[DetectionOutcome, ComparisonResult | None]:
    """
    Turn a lookup result into a detection outcome.

    Args:
        candidate: Package found by a strategy, or None
        expected_version: Required minimum version (blank means any)

    Returns:
        (outcome, comparison) where comparison is None when no version check ran
    """
    if candidate is None:
        return DetectionOutcome.NOT_DETECTED, None

    if is_blank(expected_version):
        return DetectionOutcome.SATISFIED, None

    comparison = compare_versions(candidate.version, expected_version)
    if comparison is ComparisonResult.LOWER:
        return DetectionOutcome.VERSION_TOO_LOW, comparison
    # A newer install than required is compliant
    return DetectionOutcome.SATISFIED, comparison


class Detector:
    """
    Runs the ordered lookup strategies for one package.

    Holds configuration only; every detect() call starts from scratch, so
    repeated runs against the same tool output give the same result.
    """

    def __init__(
        self,
        strategies: Sequence[LookupStrategy] = DEFAULT_STRATEGIES,
        locate: Callable[..., str | None] = locate_tool,
        runner: ToolRunner | None = None,
        logger: logging.Logger | None = None,
        tool_name: str = TOOL_NAME,
        tool_path: str | None = None,
        search_paths: Sequence[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        accept_source_agreements: bool = True,
    ):
        self.logger = logger or logging.getLogger("winget_detect")
        self.strategies = tuple(strategies)
        self.locate = locate
        self.runner = runner or ToolRunner(timeout=timeout, logger=self.logger)
        self.tool_name = tool_name
        self.tool_path = tool_path
        self.search_paths = search_paths
        self.accept_source_agreements = accept_source_agreements

    def find_tool(self) -> str | None:
        """Resolve the package-manager executable."""
        return self.locate(
            tool_name=self.tool_name,
            search_paths=self.search_paths,
            explicit_path=self.tool_path,
            logger=self.logger,
        )

    def find_package(self, tool_path: str, package_id: str) -> tuple[PackageCandidate | None, str | None]:
        """
        Try each strategy in order; the first candidate wins.

        Args:
            tool_path: Package-manager executable
            package_id: Identifier to look up

        Returns:
            (candidate, strategy_name), or (None, None) if nothing matched
        """
        for strategy in self.strategies:
            self.logger.debug(f"Trying {strategy.name} lookup for {package_id}")
            try:
                candidate = strategy.lookup(
                    self.runner,
                    tool_path,
                    package_id,
                    accept_source_agreements=self.accept_source_agreements,
                )
            except Exception as e:
                self.logger.error(f"{strategy.name} lookup failed for {package_id}: {e}")
                continue
            if candidate is not None:
                return candidate, strategy.name
        return None, None

    def detect(self, package_id: str, expected_version: str | None = "") -> DetectionResult:
        """
        Detect whether a package is installed at a satisfying version.

        Args:
            package_id: Exact package identifier
            expected_version: Minimum acceptable version (blank means any)

        Returns:
            DetectionResult; its exit_code is the value to report
        """
        expected_version = (expected_version or "").strip()
        self.logger.info(
            f"Detecting {package_id} (minimum version: {expected_version or 'any'})"
        )

        tool_path = self.find_tool()
        if tool_path is None:
            self.logger.error(f"{self.tool_name} not found, cannot detect {package_id}")
            return DetectionResult(
                package_id=package_id,
                expected_version=expected_version,
                outcome=DetectionOutcome.NOT_DETECTED,
            )
        self.logger.info(f"Using {self.tool_name} at {tool_path}")

        candidate, strategy_name = self.find_package(tool_path, package_id)
        outcome, comparison = classify(candidate, expected_version)

        if candidate is None:
            self.logger.warning(f"{package_id} not found by any lookup strategy")
        elif outcome is DetectionOutcome.VERSION_TOO_LOW:
            self.logger.warning(
                f"{package_id} installed version {candidate.version} is lower than {expected_version}"
            )
        else:
            self.logger.info(f"{package_id} detected (installed version: {candidate.version or 'unknown'})")

        return DetectionResult(
            package_id=package_id,
            expected_version=expected_version,
            outcome=outcome,
            tool_path=tool_path,
            candidate=candidate,
            strategy=strategy_name,
            comparison=comparison,
        )


def run_detection(
    package_id: str,
    expected_version: str | None = "",
    logger: logging.Logger | None = None,
    **detector_options,
) -> DetectionResult:
    """
    Detect a package with the default strategies.

    Args:
        package_id: Exact package identifier
        expected_version: Minimum acceptable version (blank means any)
        logger: Logger for diagnostics
        **detector_options: Extra Detector arguments (tool_path, timeout, ...)

    Returns:
        DetectionResult
    """
    detector = Detector(logger=logger, **detector_options)
    return detector.detect(package_id, expected_version)
