"""
Locate the package-manager executable.

Search order:
1. Explicit path (config or command line)
2. PATH lookup via shutil.which
3. Well-known install locations (per-machine App Installer package, then the
   per-user WindowsApps alias)
"""

from __future__ import annotations

import glob
import logging
import os
import shutil
from typing import Sequence

TOOL_NAME = "winget"

# Ordered fallback locations; environment variables are expanded and
# glob patterns are allowed.
DEFAULT_SEARCH_PATHS = (
    os.path.join(
        "%ProgramFiles%",
        "WindowsApps",
        "Microsoft.DesktopAppInstaller_*_x64__8wekyb3d8bbwe",
        "winget.exe",
    ),
    os.path.join("%LOCALAPPDATA%", "Microsoft", "WindowsApps", "winget.exe"),
)

_logger = logging.getLogger("winget_detect")


def expand_search_path(pattern: str) -> list[str]:
    """Expand one search location into existing files.

    Args:
        pattern: Path, possibly with environment variables and glob wildcards

    Returns:
        Matching files, highest (newest package version) first
    """
    expanded = os.path.expanduser(os.path.expandvars(pattern))
    # Unexpanded variables mean the location does not apply on this host
    if "%" in expanded or "$" in expanded:
        return []

    if any(ch in expanded for ch in "*?["):
        matches = sorted(glob.glob(expanded), reverse=True)
    else:
        matches = [expanded]
    return [m for m in matches if os.path.isfile(m)]


def locate_tool(
    tool_name: str = TOOL_NAME,
    search_paths: Sequence[str] | None = None,
    explicit_path: str | None = None,
    logger: logging.Logger | None = None,
) -> str | None:
    """
    Resolve the absolute path of the package-manager executable.

    Args:
        tool_name: Executable name to look up on PATH
        search_paths: Fallback locations (default: DEFAULT_SEARCH_PATHS)
        explicit_path: Path that takes precedence when it exists
        logger: Logger for diagnostics

    Returns:
        Absolute path, or None if the tool cannot be found
    """
    log = logger or _logger

    if explicit_path:
        if os.path.isfile(explicit_path):
            log.debug(f"Using explicit tool path: {explicit_path}")
            return os.path.abspath(explicit_path)
        log.warning(f"Configured tool path does not exist: {explicit_path}")

    found = shutil.which(tool_name)
    if found:
        log.debug(f"Found {tool_name} on PATH: {found}")
        return os.path.abspath(found)

    locations = DEFAULT_SEARCH_PATHS if search_paths is None else search_paths
    for location in locations:
        matches = expand_search_path(location)
        if matches:
            log.debug(f"Found {tool_name} at fallback location: {matches[0]}")
            return os.path.abspath(matches[0])

    log.debug(f"{tool_name} not found on PATH or in {len(locations)} fallback locations")
    return None
