"""
Configuration file parsing and management.

Loads YAML configuration files and merges them from multiple sources
(custom path → project → user → machine → defaults), then applies
WINGET_DETECT_* environment overrides.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field, replace
from typing import Any

import yaml

from .locator import TOOL_NAME
from .runner import DEFAULT_TIMEOUT_SECONDS

PROGRAM_DATA = os.environ.get("ProgramData", "")

# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".winget-detect.yml",                                      # Working directory (highest priority)
    ".winget-detect.yaml",
    os.path.expanduser("~/.config/winget-detect/config.yml"),  # User global
    os.path.expanduser("~/.config/winget-detect/config.yaml"),
]
if PROGRAM_DATA:
    CONFIG_LOCATIONS += [
        os.path.join(PROGRAM_DATA, "winget-detect", "config.yml"),  # Machine global
        os.path.join(PROGRAM_DATA, "winget-detect", "config.yaml"),
    ]

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
DEFAULT_TIMEOUT = DEFAULT_TIMEOUT_SECONDS


def default_log_directory() -> str:
    """Machine-wide log directory, or the temp directory off Windows."""
    if PROGRAM_DATA:
        return os.path.join(PROGRAM_DATA, "winget-detect", "logs")
    return os.path.join(tempfile.gettempdir(), "winget-detect")


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config section as a mapping (a missing or null section is empty)."""
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Invalid '{name}' section: expected a mapping, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class PackageSettings:
    """
    Detection parameters substituted by the deployment agent.

    Attributes:
        id: Package identifier to detect
        version: Minimum acceptable version (empty means any)
    """
    id: str = ""
    version: str = ""

    @staticmethod
    def from_dict(data: dict[str, Any]) -> PackageSettings:
        """Create PackageSettings from dictionary."""
        return PackageSettings(
            id=str(data.get("id") or ""),
            version=str(data.get("version") or ""),
        )


@dataclass(frozen=True)
class ToolSettings:
    """
    How to find and run the package manager.

    Attributes:
        name: Executable name searched on PATH
        path: Explicit executable path (skips the search when it exists)
        search_paths: Fallback locations, None for the built-in list
        timeout_seconds: Per-invocation timeout
        accept_source_agreements: Pass --accept-source-agreements
    """
    name: str = TOOL_NAME
    path: str | None = None
    search_paths: tuple[str, ...] | None = None
    timeout_seconds: int = DEFAULT_TIMEOUT
    accept_source_agreements: bool = True

    def __post_init__(self):
        """Validate tool settings after initialization."""
        if not self.name:
            raise ValueError("Tool name must not be empty")

        if self.timeout_seconds < 1 or self.timeout_seconds > 600:
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 600"
            )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ToolSettings:
        """Create ToolSettings from dictionary."""
        search_paths = data.get("search_paths")
        if isinstance(search_paths, str):
            search_paths = [search_paths]
        elif search_paths is not None and not isinstance(search_paths, list):
            raise ValueError(
                f"Invalid search_paths: {search_paths!r}. Must be a list of paths"
            )
        return ToolSettings(
            name=data.get("name", TOOL_NAME),
            path=data.get("path"),
            search_paths=tuple(str(p) for p in search_paths) if search_paths is not None else None,
            timeout_seconds=int(data.get("timeout_seconds", DEFAULT_TIMEOUT)),
            accept_source_agreements=bool(data.get("accept_source_agreements", True)),
        )


@dataclass(frozen=True)
class LogSettings:
    """
    Log file and verbosity.

    Attributes:
        directory: Directory for per-package log files (None for the default)
        level: Console log level
        file: Write the per-package log file
    """
    directory: str | None = None
    level: str = "INFO"
    file: bool = True

    def __post_init__(self):
        """Validate log settings after initialization."""
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.level}. "
                f"Must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}"
            )

    @property
    def effective_directory(self) -> str:
        return self.directory or default_log_directory()

    @staticmethod
    def from_dict(data: dict[str, Any]) -> LogSettings:
        """Create LogSettings from dictionary."""
        return LogSettings(
            directory=data.get("directory"),
            level=str(data.get("level", "INFO")),
            file=bool(data.get("file", True)),
        )


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for a detection run.

    Attributes:
        version: Config schema version
        package: Detection parameters
        tool: Package-manager settings
        logging: Log settings
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    package: PackageSettings = field(default_factory=PackageSettings)
    tool: ToolSettings = field(default_factory=ToolSettings)
    logging: LogSettings = field(default_factory=LogSettings)
    source: str = ""

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        return Config(
            version=data.get("version", 1),
            package=PackageSettings.from_dict(_section(data, "package")),
            tool=ToolSettings.from_dict(_section(data, "tool")),
            logging=LogSettings.from_dict(_section(data, "logging")),
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        default_tool = ToolSettings()
        default_logging = LogSettings()

        def pick(mine, theirs, default):
            return mine if mine != default else theirs

        merged_package = PackageSettings(
            id=self.package.id or other.package.id,
            version=self.package.version if self.package.id else other.package.version,
        )

        merged_tool = ToolSettings(
            name=pick(self.tool.name, other.tool.name, default_tool.name),
            path=self.tool.path or other.tool.path,
            search_paths=self.tool.search_paths if self.tool.search_paths is not None else other.tool.search_paths,
            timeout_seconds=pick(self.tool.timeout_seconds, other.tool.timeout_seconds, default_tool.timeout_seconds),
            accept_source_agreements=self.tool.accept_source_agreements and other.tool.accept_source_agreements,
        )

        merged_logging = LogSettings(
            directory=self.logging.directory or other.logging.directory,
            level=pick(self.logging.level, other.logging.level, default_logging.level),
            file=self.logging.file and other.logging.file,
        )

        return Config(
            version=self.version,
            package=merged_package,
            tool=merged_tool,
            logging=merged_logging,
            source=self.source or other.source,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def load_config_file(file_path: str, logger=None) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file
        logger: Optional logger for diagnostics

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    if logger:
        logger.debug(f"Loading config from: {file_path}")

    data = _load_yaml(file_path)
    if data is None:
        if logger:
            logger.warning(f"Invalid config file: {file_path}")
        return None

    try:
        return Config.from_dict(data, source=file_path)
    except (ValueError, TypeError) as e:
        if logger:
            logger.warning(f"Config validation failed for {file_path}: {e}")
        return None


def apply_environment(config: Config, environ: dict[str, str] | None = None) -> Config:
    """
    Apply WINGET_DETECT_* environment overrides.

    Supported variables: WINGET_DETECT_PACKAGE_ID, WINGET_DETECT_VERSION,
    WINGET_DETECT_TOOL_PATH, WINGET_DETECT_TIMEOUT_SECONDS,
    WINGET_DETECT_LOG_DIR, WINGET_DETECT_DEBUG=1.

    Raises:
        ValueError: If a numeric override is not a valid integer
    """
    env = os.environ if environ is None else environ

    package = config.package
    if env.get("WINGET_DETECT_PACKAGE_ID"):
        package = PackageSettings(
            id=env["WINGET_DETECT_PACKAGE_ID"],
            version=env.get("WINGET_DETECT_VERSION", ""),
        )
    elif env.get("WINGET_DETECT_VERSION"):
        package = replace(package, version=env["WINGET_DETECT_VERSION"])

    tool = config.tool
    if env.get("WINGET_DETECT_TOOL_PATH"):
        tool = replace(tool, path=env["WINGET_DETECT_TOOL_PATH"])
    if env.get("WINGET_DETECT_TIMEOUT_SECONDS"):
        raw = env["WINGET_DETECT_TIMEOUT_SECONDS"]
        try:
            timeout = int(raw)
        except ValueError:
            raise ValueError(f"Invalid WINGET_DETECT_TIMEOUT_SECONDS: {raw}") from None
        tool = replace(tool, timeout_seconds=timeout)

    log_settings = config.logging
    if env.get("WINGET_DETECT_LOG_DIR"):
        log_settings = replace(log_settings, directory=env["WINGET_DETECT_LOG_DIR"])
    if env.get("WINGET_DETECT_DEBUG", "0") == "1":
        log_settings = replace(log_settings, level="DEBUG")

    return replace(config, package=package, tool=tool, logging=log_settings)


def load_config(
    custom_path: str | None = None,
    logger=None,
    environ: dict[str, str] | None = None,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Environment variables (WINGET_DETECT_*)
    2. Custom path (if provided)
    3. Working directory .winget-detect.yml
    4. User ~/.config/winget-detect/config.yml
    5. Machine %ProgramData%/winget-detect/config.yml
    6. Default configuration

    Args:
        custom_path: Optional path to custom configuration file
        logger: Optional logger for diagnostics
        environ: Environment mapping (default: os.environ)

    Returns:
        Merged Config object (never None, returns defaults if no config found)

    Raises:
        ValueError: If custom_path is provided but file cannot be loaded
    """
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path, logger)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, logger)
        if config is not None:
            configs.append(config)

    if not configs:
        merged = Config()
    else:
        merged = configs[0]
        for config in configs[1:]:
            merged = merged.merge_with(config)
        if logger:
            logger.debug(f"Merged {len(configs)} config files")

    return apply_environment(merged, environ)
