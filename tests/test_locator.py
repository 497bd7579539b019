"""
Tests for package-manager lookup (winget_detect/locator.py).
"""

import os
from unittest.mock import patch

import pytest

from winget_detect.locator import (
    DEFAULT_SEARCH_PATHS,
    TOOL_NAME,
    expand_search_path,
    locate_tool,
)


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    return path


class TestLocateTool:
    """Tests for locate_tool search order."""

    def test_found_on_path(self, tmp_path):
        exe = _touch(tmp_path / "winget.exe")
        with patch("winget_detect.locator.shutil.which", return_value=str(exe)) as mock_which:
            assert locate_tool() == os.path.abspath(str(exe))
        mock_which.assert_called_once_with(TOOL_NAME)

    def test_path_takes_precedence_over_fallbacks(self, tmp_path):
        on_path = _touch(tmp_path / "bin" / "winget.exe")
        fallback = _touch(tmp_path / "fallback" / "winget.exe")
        with patch("winget_detect.locator.shutil.which", return_value=str(on_path)):
            result = locate_tool(search_paths=[str(fallback)])
        assert result == os.path.abspath(str(on_path))

    def test_first_existing_fallback_wins(self, tmp_path):
        missing = tmp_path / "missing" / "winget.exe"
        second = _touch(tmp_path / "second" / "winget.exe")
        third = _touch(tmp_path / "third" / "winget.exe")
        with patch("winget_detect.locator.shutil.which", return_value=None):
            result = locate_tool(search_paths=[str(missing), str(second), str(third)])
        assert result == os.path.abspath(str(second))

    def test_not_found_returns_none(self, tmp_path):
        with patch("winget_detect.locator.shutil.which", return_value=None):
            assert locate_tool(search_paths=[str(tmp_path / "nope.exe")]) is None

    def test_empty_search_paths_disables_fallbacks(self):
        with patch("winget_detect.locator.shutil.which", return_value=None), \
             patch("winget_detect.locator.expand_search_path") as mock_expand:
            assert locate_tool(search_paths=[]) is None
        mock_expand.assert_not_called()

    def test_default_search_paths_used(self):
        with patch("winget_detect.locator.shutil.which", return_value=None), \
             patch("winget_detect.locator.expand_search_path", return_value=[]) as mock_expand:
            locate_tool()
        checked = [c.args[0] for c in mock_expand.call_args_list]
        assert checked == list(DEFAULT_SEARCH_PATHS)

    def test_explicit_path_wins(self, tmp_path):
        explicit = _touch(tmp_path / "custom" / "winget.exe")
        with patch("winget_detect.locator.shutil.which") as mock_which:
            assert locate_tool(explicit_path=str(explicit)) == os.path.abspath(str(explicit))
        mock_which.assert_not_called()

    def test_missing_explicit_path_falls_back_to_search(self, tmp_path):
        on_path = _touch(tmp_path / "winget.exe")
        with patch("winget_detect.locator.shutil.which", return_value=str(on_path)):
            result = locate_tool(explicit_path=str(tmp_path / "gone.exe"))
        assert result == os.path.abspath(str(on_path))

    def test_custom_tool_name(self):
        with patch("winget_detect.locator.shutil.which", return_value=None) as mock_which:
            locate_tool(tool_name="winget-preview", search_paths=[])
        mock_which.assert_called_once_with("winget-preview")


class TestExpandSearchPath:
    """Tests for fallback location expansion."""

    def test_plain_existing_file(self, tmp_path):
        exe = _touch(tmp_path / "winget.exe")
        assert expand_search_path(str(exe)) == [str(exe)]

    def test_plain_missing_file(self, tmp_path):
        assert expand_search_path(str(tmp_path / "winget.exe")) == []

    def test_directory_is_not_a_match(self, tmp_path):
        (tmp_path / "winget.exe").mkdir()
        assert expand_search_path(str(tmp_path / "winget.exe")) == []

    def test_glob_returns_highest_first(self, tmp_path):
        older = _touch(tmp_path / "Microsoft.DesktopAppInstaller_1.21.3482.0_x64__8wekyb3d8bbwe" / "winget.exe")
        newer = _touch(tmp_path / "Microsoft.DesktopAppInstaller_1.22.10582.0_x64__8wekyb3d8bbwe" / "winget.exe")
        pattern = str(tmp_path / "Microsoft.DesktopAppInstaller_*_x64__8wekyb3d8bbwe" / "winget.exe")
        assert expand_search_path(pattern) == [str(newer), str(older)]

    def test_environment_variable_expanded(self, tmp_path, monkeypatch):
        exe = _touch(tmp_path / "apps" / "winget.exe")
        monkeypatch.setenv("WINGET_DETECT_TEST_ROOT", str(tmp_path))
        pattern = os.path.join("$WINGET_DETECT_TEST_ROOT", "apps", "winget.exe")
        assert expand_search_path(pattern) == [str(exe)]

    def test_unset_variable_skipped(self, monkeypatch):
        monkeypatch.delenv("WINGET_DETECT_UNSET_ROOT", raising=False)
        assert expand_search_path(os.path.join("$WINGET_DETECT_UNSET_ROOT", "winget.exe")) == []

    @pytest.mark.skipif(os.name == "nt", reason="%VAR% expands on Windows")
    def test_windows_style_variable_skipped_elsewhere(self):
        assert expand_search_path(DEFAULT_SEARCH_PATHS[-1]) == []
