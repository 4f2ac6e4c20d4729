"""Tests for the logging utilities module."""

import logging
import time
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from transresolve.logging_utils import ConsoleFormatter, FileFormatter, setup_logging


def _record(name: str = "transresolve.orchestrator", level: int = logging.INFO, msg: str = "Pass complete") -> logging.LogRecord:
    record = logging.LogRecord(name=name, level=level, pathname="orchestrator.py", lineno=42, msg=msg, args=(), exc_info=None)
    record.funcName = "resolve_text"
    record.created = 1234567890.123456
    return record


class TestFormatters(unittest.TestCase):
    """Test suite for the console and file formatters."""

    def test_console_formatter_includes_version(self) -> None:
        """1. Console: The product name and version prefix every message."""
        formatter = ConsoleFormatter("1.0.0")
        formatted = formatter.format(_record())
        assert formatter.converter == time.gmtime
        assert "TransResolve - 1.0.0" in formatted
        assert formatted.endswith("| Pass complete")

    def test_format_time_with_microseconds(self) -> None:
        """2. Time Format: UTC timestamps carry 6-digit microseconds and a 'Z' suffix."""
        formatter = ConsoleFormatter("1.0.0")
        formatted_time = formatter.formatTime(_record(), formatter.datefmt)
        assert formatted_time.startswith("2009-02-13T23:31:30.")
        assert formatted_time.endswith("Z")
        assert len(formatted_time.split(".")[-1].rstrip("Z")) == 6

    def test_file_formatter_detailed_format(self) -> None:
        """3. File: Includes logger name, function name, line number and level."""
        formatted = FileFormatter().format(_record(level=logging.DEBUG, msg="Detailed log"))
        assert "transresolve.orchestrator" in formatted
        assert "resolve_text" in formatted
        assert ":42" in formatted
        assert "DEBUG" in formatted
        assert "Detailed log" in formatted


class TestSetupLogging(unittest.TestCase):
    """Test suite for setup_logging function."""

    def tearDown(self) -> None:
        """Clean up logging state after each test."""
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(logging.WARNING)

    def test_default_mode(self) -> None:
        """1. Default Mode: One INFO console handler with the console formatter."""
        setup_logging("1.0.0")
        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.level == logging.INFO
        assert isinstance(handler.formatter, ConsoleFormatter)

    def test_clears_existing_handlers(self) -> None:
        """2. Handler Cleanup: Repeated calls replace old handlers."""
        dummy_handler = logging.StreamHandler()
        logging.getLogger().addHandler(dummy_handler)
        setup_logging("1.0.0")
        setup_logging("1.0.0")
        assert dummy_handler not in logging.getLogger().handlers
        assert len(logging.getLogger().handlers) == 1

    def test_debug_mode_adds_file_handler(self) -> None:
        """3. Debug Mode: A DEBUG file handler writes to the project's log directory."""
        log_dir = Path("/project/.transresolve/logs")
        file_handler = MagicMock()
        file_handler.level = logging.DEBUG

        with (
            patch("transresolve.logging_utils.paths.get_log_dir", return_value=log_dir) as mock_get_log_dir,
            patch("transresolve.logging_utils.paths.ensure_dir_exists") as mock_ensure_dir,
            patch("transresolve.logging_utils.FileHandler", return_value=file_handler) as mock_file_handler,
        ):
            setup_logging("1.0.0", debug=True, project_root=Path("/project"))

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert root_logger.handlers[0].level == logging.DEBUG
        mock_get_log_dir.assert_called_once_with(Path("/project"))
        mock_ensure_dir.assert_called_once_with(log_dir)
        mock_file_handler.assert_called_once_with(log_dir / "debug.log", mode="w", encoding="utf-8")
        assert isinstance(file_handler.setFormatter.call_args[0][0], FileFormatter)

    def test_debug_mode_without_project(self) -> None:
        """4. Failure: Without a project root, console logging still works."""
        with patch("transresolve.logging_utils.paths.get_log_dir", side_effect=FileNotFoundError("no project")):
            setup_logging("1.0.0", debug=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].level == logging.DEBUG


if __name__ == "__main__":
    unittest.main()
