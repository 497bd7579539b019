"""
Tests for tool invocation (winget_detect/runner.py).
"""

import subprocess
from unittest.mock import MagicMock, patch

from winget_detect.runner import DEFAULT_TIMEOUT_SECONDS, ToolRunner


class TestToolRunner:
    """Tests for ToolRunner.run."""

    def test_returns_stdout(self):
        with patch("winget_detect.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="output text", returncode=0)
            assert ToolRunner(timeout=5).run(["winget", "list"]) == "output text"

    def test_stderr_discarded_and_stdin_isolated(self):
        with patch("winget_detect.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="", returncode=0)
            ToolRunner(timeout=7).run(("winget", "list", "--id", "X"))

        args, kwargs = mock_run.call_args
        assert args[0] == ["winget", "list", "--id", "X"]
        assert kwargs["stderr"] == subprocess.DEVNULL
        assert kwargs["stdin"] == subprocess.DEVNULL
        assert kwargs["stdout"] == subprocess.PIPE
        assert kwargs["timeout"] == 7
        assert kwargs["check"] is False

    def test_nonzero_exit_still_returns_output(self):
        """winget signals "no package" via exit code; output is still used."""
        with patch("winget_detect.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="No installed package found", returncode=-1978335212)
            assert ToolRunner().run(["winget"]) == "No installed package found"

    def test_none_stdout_becomes_empty(self):
        with patch("winget_detect.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout=None, returncode=0)
            assert ToolRunner().run(["winget"]) == ""

    def test_timeout_returns_empty(self):
        logger = MagicMock()
        with patch("winget_detect.runner.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired(cmd="winget", timeout=1)
            assert ToolRunner(timeout=1, logger=logger).run(["winget"]) == ""
        logger.warning.assert_called_once()

    def test_missing_executable_returns_empty(self):
        with patch("winget_detect.runner.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("winget")
            assert ToolRunner().run(["winget"]) == ""

    def test_permission_error_returns_empty(self):
        with patch("winget_detect.runner.subprocess.run") as mock_run:
            mock_run.side_effect = PermissionError("denied")
            assert ToolRunner().run(["winget"]) == ""

    def test_default_timeout(self):
        assert ToolRunner().timeout == DEFAULT_TIMEOUT_SECONDS == 120

    def test_default_timeout_ignores_environment(self, monkeypatch):
        """The environment override is applied by the config layer only."""
        monkeypatch.setenv("WINGET_DETECT_TIMEOUT_SECONDS", "abc")
        assert ToolRunner().timeout == 120
