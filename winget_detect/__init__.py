"""
winget-detect - Software presence detection for deployment agents.

Core Modules:
- Versioning: dotted-numeric comparison with a lexical fallback
- Locator: finds the package-manager executable
- Strategies: structured, broad and legacy package lookups
- Detection: runs the strategies in order and maps the outcome to an exit code
- Foundation: configuration and logging
"""

__version__ = "1.0.0"
__author__ = "winget-detect Contributors"

VERSION = __version__

from .models import ComparisonResult, DetectionOutcome, DetectionResult, PackageCandidate
from .versioning import compare_versions, is_blank, is_numeric_version
from .locator import DEFAULT_SEARCH_PATHS, TOOL_NAME, locate_tool
from .runner import ToolRunner
from .parsing import OutputParseError, parse_structured_output, parse_table_output
from .strategies import (
    BROAD,
    DEFAULT_STRATEGIES,
    LEGACY,
    STRUCTURED,
    LookupStrategy,
)
from .detection import (
    EXIT_NOT_DETECTED,
    EXIT_SATISFIED,
    EXIT_VERSION_TOO_LOW,
    Detector,
    classify,
    run_detection,
)
from .config import Config, LogSettings, PackageSettings, ToolSettings, load_config
from .logging_config import log_file_for, setup_logging

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Models
    "ComparisonResult",
    "DetectionOutcome",
    "DetectionResult",
    "PackageCandidate",
    # Versioning
    "compare_versions",
    "is_blank",
    "is_numeric_version",
    # Locator and runner
    "DEFAULT_SEARCH_PATHS",
    "TOOL_NAME",
    "locate_tool",
    "ToolRunner",
    # Parsing and strategies
    "OutputParseError",
    "parse_structured_output",
    "parse_table_output",
    "LookupStrategy",
    "STRUCTURED",
    "BROAD",
    "LEGACY",
    "DEFAULT_STRATEGIES",
    # Detection
    "Detector",
    "classify",
    "run_detection",
    "EXIT_SATISFIED",
    "EXIT_VERSION_TOO_LOW",
    "EXIT_NOT_DETECTED",
    # Foundation
    "Config",
    "PackageSettings",
    "ToolSettings",
    "LogSettings",
    "load_config",
    "log_file_for",
    "setup_logging",
]
