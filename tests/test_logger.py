"""Tests for logger.py: setup_logging() and JsonFormatter.

Strategy: Mock logging.basicConfig to verify setup_logging passes correct
args, since pytest's log capture plugin interferes with actual basicConfig
calls.
"""

import json
import logging
import sys
from unittest.mock import patch

from svn_diff_commit.logger import JsonFormatter, setup_logging


class TestSetupLogging:
    """Tests for setup_logging()."""

    @patch("svn_diff_commit.logger.logging.basicConfig")
    def test_logs_to_stderr(self, mock_basic, monkeypatch):
        monkeypatch.delenv("SVNDC_LOG_LEVEL", raising=False)
        setup_logging()

        mock_basic.assert_called_once()
        kwargs = mock_basic.call_args[1]
        handlers = kwargs["handlers"]
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr
        assert kwargs["level"] == logging.INFO
        assert kwargs["force"] is True

    @patch("svn_diff_commit.logger.logging.basicConfig")
    def test_debug_overrides_level(self, mock_basic, monkeypatch):
        monkeypatch.setenv("SVNDC_LOG_LEVEL", "ERROR")
        setup_logging(debug=True)

        assert mock_basic.call_args[1]["level"] == logging.DEBUG

    @patch("svn_diff_commit.logger.logging.basicConfig")
    def test_env_log_level_honored(self, mock_basic, monkeypatch):
        monkeypatch.setenv("SVNDC_LOG_LEVEL", "warning")
        setup_logging(default_level="DEBUG")

        assert mock_basic.call_args[1]["level"] == logging.WARNING

    @patch("svn_diff_commit.logger.logging.basicConfig")
    def test_default_level_used_without_env(self, mock_basic, monkeypatch):
        monkeypatch.delenv("SVNDC_LOG_LEVEL", raising=False)
        setup_logging(default_level="ERROR")

        assert mock_basic.call_args[1]["level"] == logging.ERROR

    @patch("svn_diff_commit.logger.logging.basicConfig")
    def test_unknown_level_falls_back_to_info(self, mock_basic, monkeypatch):
        monkeypatch.setenv("SVNDC_LOG_LEVEL", "CHATTY")
        setup_logging()

        assert mock_basic.call_args[1]["level"] == logging.INFO

    @patch("svn_diff_commit.logger.logging.basicConfig")
    def test_log_file_adds_file_handler(self, mock_basic, tmp_path):
        log_file = str(tmp_path / "svndc.log")
        setup_logging(log_file=log_file)

        handlers = mock_basic.call_args[1]["handlers"]
        file_handlers = [
            h for h in handlers if isinstance(h, logging.FileHandler)
        ]
        assert len(handlers) == 2
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == log_file
        for h in file_handlers:
            h.close()

    @patch("svn_diff_commit.logger.logging.basicConfig")
    def test_json_format_uses_json_formatter(self, mock_basic):
        setup_logging(debug_format="json")

        handlers = mock_basic.call_args[1]["handlers"]
        assert all(isinstance(h.formatter, JsonFormatter) for h in handlers)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_output(self):
        formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")
        record = logging.LogRecord(
            name="svn_diff_commit.pipeline.engine",
            level=logging.INFO,
            pathname="engine.py",
            lineno=1,
            msg="Can list %s, proceeding with checkout.",
            args=("file:///r",),
            exc_info=None,
        )

        data = json.loads(formatter.format(record))

        assert "ts" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "svn_diff_commit.pipeline.engine"
        assert data["msg"] == "Can list file:///r, proceeding with checkout."
        assert "exc" not in data

    def test_includes_exception(self):
        formatter = JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S")

        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        record = logging.LogRecord(
            name="test",
            level=logging.ERROR,
            pathname="test.py",
            lineno=1,
            msg="An error occurred",
            args=(),
            exc_info=exc_info,
        )

        data = json.loads(formatter.format(record))
        assert "ValueError: test error" in data["exc"]
