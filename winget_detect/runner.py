"""
Run the package-manager executable with a bounded timeout.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Sequence

DEFAULT_TIMEOUT_SECONDS = 120


class ToolRunner:
    """
    Blocking child-process runner shared by all lookup strategies.

    Only standard output is returned; the diagnostic stream is discarded.
    A timeout, a missing executable or any OS error yields an empty string
    so the calling strategy simply sees "no output".
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS, logger: logging.Logger | None = None):
        self.timeout = timeout
        self.logger = logger or logging.getLogger("winget_detect")

    def run(self, args: Sequence[str]) -> str:
        """Run a command and return its standard output as text."""
        command = list(args)
        self.logger.debug(f"Running: {' '.join(command)}")
        try:
            proc = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,  # Isolate stdin
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
                env={**os.environ, "TERM": "dumb"},  # Disable ANSI/color output
            )
        except subprocess.TimeoutExpired:
            self.logger.warning(f"Command timed out after {self.timeout}s: {command[0]}")
            return ""
        except OSError as e:
            self.logger.warning(f"Could not run {command[0]}: {e}")
            return ""

        if proc.returncode != 0:
            # winget reports "no package found" through a non-zero exit code;
            # the output is still inspected by the strategy
            self.logger.debug(f"Command exited with code {proc.returncode}")
        return proc.stdout or ""
