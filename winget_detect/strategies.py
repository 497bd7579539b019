"""
Lookup strategies for finding an installed package.

Strategies are ordered by decreasing reliability:
1. structured - exact id query with JSON output
2. broad      - free-text query with JSON output, filtered for an exact id/name
3. legacy     - exact id query with the default table output
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .models import PackageCandidate
from .parsing import OutputParseError, parse_structured_output, parse_table_output
from .runner import ToolRunner

ACCEPT_AGREEMENTS_FLAG = "--accept-source-agreements"

# Selects one candidate from tool output for the queried identifier.
# Structured parse errors propagate as OutputParseError.
Selector = Callable[[str, str], Optional[PackageCandidate]]


def select_first(output: str, package_id: str) -> PackageCandidate | None:
    """First record of exact-id structured output."""
    candidates = parse_structured_output(output)
    return candidates[0] if candidates else None


def select_exact_match(output: str, package_id: str) -> PackageCandidate | None:
    """First record whose id or name equals the queried identifier."""
    for candidate in parse_structured_output(output):
        if candidate.id == package_id or candidate.name == package_id:
            return candidate
    return None


def select_table_row(output: str, package_id: str) -> PackageCandidate | None:
    """Candidate sliced from the last row of tabular output."""
    return parse_table_output(output)


@dataclass(frozen=True)
class LookupStrategy:
    """
    One way of asking the package manager whether a package is installed.

    Attributes:
        name: Strategy identifier used in logs and results
        description: Human-readable summary
        command_template: Arguments after the executable ({package} placeholder)
        selector: Turns tool output into at most one candidate
    """
    name: str
    description: str
    command_template: tuple[str, ...]
    selector: Selector

    def get_command(
        self,
        tool_path: str,
        package_id: str,
        accept_source_agreements: bool = True,
    ) -> tuple[str, ...]:
        """
        Build the full command line for a package.

        Args:
            tool_path: Package-manager executable
            package_id: Identifier to query
            accept_source_agreements: Keep the non-interactive agreements flag

        Returns:
            Command tuple ready for subprocess
        """
        command = [tool_path]
        for part in self.command_template:
            if part == ACCEPT_AGREEMENTS_FLAG and not accept_source_agreements:
                continue
            command.append(part.replace("{package}", package_id))
        return tuple(command)

    def lookup(
        self,
        runner: ToolRunner,
        tool_path: str,
        package_id: str,
        accept_source_agreements: bool = True,
    ) -> PackageCandidate | None:
        """
        Run the query and select a candidate.

        Empty output and unparseable structured output both yield None.

        Args:
            runner: Runs the tool and returns its standard output
            tool_path: Package-manager executable
            package_id: Identifier to query
            accept_source_agreements: Pass the agreements flag to the tool

        Returns:
            PackageCandidate, or None if this strategy found nothing
        """
        logger = runner.logger
        output = runner.run(self.get_command(tool_path, package_id, accept_source_agreements))
        if not output.strip():
            logger.debug(f"[{self.name}] no output for {package_id}")
            return None

        try:
            candidate = self.selector(output, package_id)
        except OutputParseError as e:
            logger.warning(f"[{self.name}] could not parse output for {package_id}: {e}")
            return None

        if candidate is None:
            logger.debug(f"[{self.name}] no matching package for {package_id}")
        else:
            logger.info(f"[{self.name}] found {candidate}")
        return candidate


STRUCTURED = LookupStrategy(
    name="structured",
    description="Exact id query with JSON output",
    command_template=("list", "--id", "{package}", "--exact", ACCEPT_AGREEMENTS_FLAG, "--output", "json"),
    selector=select_first,
)

BROAD = LookupStrategy(
    name="broad",
    description="Free-text query with JSON output, exact id/name filter",
    command_template=("list", "{package}", ACCEPT_AGREEMENTS_FLAG, "--output", "json"),
    selector=select_exact_match,
)

LEGACY = LookupStrategy(
    name="legacy",
    description="Exact id query with table output",
    command_template=("list", "--id", "{package}", "--exact", ACCEPT_AGREEMENTS_FLAG),
    selector=select_table_row,
)

DEFAULT_STRATEGIES = (STRUCTURED, BROAD, LEGACY)
