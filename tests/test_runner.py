"""Tests for svn_diff_commit.core.runner: subprocess execution."""

import logging
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from svn_diff_commit.core.runner import SubprocessRunner, redact_args
from svn_diff_commit.errors import ExternalCommandError


class TestRedactArgs:
    def test_masks_password_value(self):
        assert redact_args(["svn", "commit", "--password", "pw", "-q"]) == [
            "svn", "commit", "--password", "********", "-q",
        ]

    def test_trailing_password_flag_untouched(self):
        assert redact_args(["svn", "--password"]) == ["svn", "--password"]

    def test_input_not_modified(self):
        args = ["--password", "pw"]
        redact_args(args)
        assert args == ["--password", "pw"]


class TestSubprocessRunner:
    @patch("svn_diff_commit.core.runner.subprocess.run")
    def test_invoke_returns_exit_status(self, mock_run):
        mock_run.return_value = MagicMock(returncode=3)
        assert SubprocessRunner().invoke("svn", ["list", "file:///r"]) == 3
        mock_run.assert_called_once_with(["svn", "list", "file:///r"])

    @patch("svn_diff_commit.core.runner.subprocess.run")
    def test_capture_returns_stdout(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="!  a\n")
        assert SubprocessRunner().capture("svn", ["status", "wc"]) == (
            0,
            "!  a\n",
        )
        mock_run.assert_called_once_with(
            ["svn", "status", "wc"], stdout=subprocess.PIPE, text=True
        )

    @patch("svn_diff_commit.core.runner.subprocess.run")
    def test_missing_executable(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file", "svn")
        with pytest.raises(ExternalCommandError) as exc_info:
            SubprocessRunner().invoke("svn", ["list", "file:///r"])
        assert exc_info.value.returncode is None
        assert exc_info.value.operation == "list"
        assert "cannot execute svn" in str(exc_info.value)

    @patch("svn_diff_commit.core.runner.subprocess.run")
    def test_missing_executable_on_capture(self, mock_run):
        mock_run.side_effect = FileNotFoundError(2, "No such file", "svn")
        with pytest.raises(ExternalCommandError):
            SubprocessRunner().capture("svn", ["status", "wc"])

    @patch("svn_diff_commit.core.runner.subprocess.run")
    def test_permission_denied(self, mock_run):
        mock_run.side_effect = PermissionError(13, "Permission denied", "svn")
        with pytest.raises(ExternalCommandError) as exc_info:
            SubprocessRunner().invoke("svn", ["list", "file:///r"])
        assert exc_info.value.returncode is None
        assert "Permission denied" in str(exc_info.value)

    def test_directory_as_executable(self, tmp_path):
        with pytest.raises(ExternalCommandError) as exc_info:
            SubprocessRunner().invoke(str(tmp_path), ["list", "file:///r"])
        assert exc_info.value.returncode is None
        with pytest.raises(ExternalCommandError):
            SubprocessRunner().capture(str(tmp_path), ["status", "wc"])

    @patch("svn_diff_commit.core.runner.subprocess.run")
    def test_debug_log_masks_password(self, mock_run, caplog):
        mock_run.return_value = MagicMock(returncode=0)
        with caplog.at_level(logging.DEBUG, logger="svn_diff_commit"):
            SubprocessRunner().invoke(
                "svn", ["commit", "wc", "--password", "s3cret"]
            )
        assert "s3cret" not in caplog.text
        assert "********" in caplog.text
