"""
Centralized logging configuration for winget-detect.

Console output goes to stderr (stdout is left to the calling deployment
agent); every run is also appended, timestamped, to a per-package log file.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "winget_detect"
LOG_FILE_SUFFIX = "_detection.log"
_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def log_file_for(package_id: str, directory: str) -> Path:
    """
    Build the per-package log file path.

    Args:
        package_id: Package identifier (characters unsafe in file names are replaced)
        directory: Log directory

    Returns:
        Path like <directory>/Mozilla.Firefox_detection.log
    """
    safe_name = _UNSAFE_FILENAME_RE.sub("_", package_id).strip("._") or "package"
    return Path(directory) / f"{safe_name}{LOG_FILE_SUFFIX}"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output (appended)
        verbose: Enable verbose (DEBUG) output
        quiet: Suppress console output (file only)
        propagate: Allow log propagation (useful for testing)

    Returns:
        Configured logger instance

    Raises:
        OSError: If the log file or its directory cannot be created
    """
    if verbose:
        effective_level = "DEBUG"
    else:
        effective_level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file else getattr(logging, effective_level))

    # Close and drop handlers from a previous setup
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, effective_level))
        console_formatter = ColoredFormatter(
            "%(levelname_colored)s %(message)s",
            use_colors=sys.stderr.isatty()
        )
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        # Quiet with no log file: keep logging's last-resort handler off stderr
        logger.addHandler(logging.NullHandler())

    logger.propagate = propagate

    return logger


class ColoredFormatter(logging.Formatter):
    """
    Formatter with colored output for different log levels.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[1;31m', # Bold Red
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        if self.use_colors:
            color = self.COLORS.get(record.levelname, '')
            record.levelname_colored = f"{color}{record.levelname}{self.RESET}"
        else:
            record.levelname_colored = record.levelname

        return super().format(record)
