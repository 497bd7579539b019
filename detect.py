#!/usr/bin/env python3
"""
winget-detect - Detect whether a package is installed at a required version.

Meant to be run by a deployment agent as a detection script; the result is
reported only through the exit code.

Usage:
    detect.py Mozilla.Firefox                  # Installed at any version?
    detect.py Mozilla.Firefox --version 120.0  # Installed at 120.0 or newer?

Exit codes:
    0   Package installed and version requirement met
    4   Package installed but older than required
    10  Package manager missing or package not found
"""

import argparse
import os
import sys
from dataclasses import replace

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from winget_detect.config import Config, LogSettings, load_config
from winget_detect.detection import EXIT_NOT_DETECTED, Detector
from winget_detect.logging_config import log_file_for, setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Detect an installed package and report the result as an exit code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Exit codes: 0 satisfied, 4 version too low, 10 not detected",
    )
    parser.add_argument(
        "package_id",
        nargs="?",
        help="Exact package identifier (default: WINGET_DETECT_PACKAGE_ID or config)",
    )
    parser.add_argument(
        "--version", "--min-version",
        dest="expected_version",
        default=None,
        help="Minimum acceptable version (blank means any version)",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--tool-path",
        help="Explicit path to the winget executable",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        help="Timeout in seconds for each winget call",
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for the per-package log file",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Do not write the per-package log file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="No console output (log file only)",
    )
    return parser


def resolve_settings(args: argparse.Namespace, config):
    """Apply command-line overrides on top of the loaded configuration."""
    package = config.package
    if args.package_id:
        package = replace(package, id=args.package_id, version=args.expected_version or "")
    elif args.expected_version is not None:
        package = replace(package, version=args.expected_version)

    tool = config.tool
    if args.tool_path:
        tool = replace(tool, path=args.tool_path)
    if args.timeout is not None:
        tool = replace(tool, timeout_seconds=args.timeout)

    log_settings = config.logging
    if args.log_dir:
        log_settings = replace(log_settings, directory=args.log_dir)
    if args.no_log_file:
        log_settings = replace(log_settings, file=False)

    return replace(config, package=package, tool=tool, logging=log_settings)


def configure_logging(args: argparse.Namespace, config, package_id: str):
    """Set up console and per-package file logging.

    A log file that cannot be opened is reported and skipped; it never
    changes the detection result.
    """
    log_file = None
    if config.logging.file and package_id:
        log_file = str(log_file_for(package_id, config.logging.effective_directory))

    try:
        return setup_logging(
            level=config.logging.level,
            log_file=log_file,
            verbose=args.verbose,
            quiet=args.quiet,
        )
    except OSError as e:
        logger = setup_logging(level=config.logging.level, verbose=args.verbose, quiet=args.quiet)
        logger.warning(f"Could not open log file {log_file}: {e}")
        return logger


def fallback_config(args: argparse.Namespace) -> Config:
    """Log settings usable when the configuration itself could not be loaded."""
    return Config(
        logging=LogSettings(
            directory=args.log_dir or os.environ.get("WINGET_DETECT_LOG_DIR") or None,
            file=not args.no_log_file,
        ),
    )


def main(argv=None) -> int:
    """Main entry point for detection."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_settings(args, load_config(args.config))
    except Exception as e:
        package_id = (args.package_id or os.environ.get("WINGET_DETECT_PACKAGE_ID") or "").strip()
        logger = configure_logging(args, fallback_config(args), package_id)
        logger.error(f"Configuration error: {e}")
        return EXIT_NOT_DETECTED

    package_id = config.package.id.strip()
    logger = configure_logging(args, config, package_id)

    if not package_id:
        logger.error("No package identifier given (argument, WINGET_DETECT_PACKAGE_ID or config)")
        return EXIT_NOT_DETECTED

    if config.source:
        logger.debug(f"Loaded config: {config.source}")

    try:
        detector = Detector(
            logger=logger,
            tool_name=config.tool.name,
            tool_path=config.tool.path,
            search_paths=config.tool.search_paths,
            timeout=config.tool.timeout_seconds,
            accept_source_agreements=config.tool.accept_source_agreements,
        )
        result = detector.detect(package_id, config.package.version)
    except Exception as e:
        logger.error(f"Detection failed for {package_id}: {e}", exc_info=True)
        return EXIT_NOT_DETECTED

    logger.info(
        f"Result for {package_id}: {result.outcome.name} (exit code {result.exit_code})"
    )
    return result.exit_code


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
