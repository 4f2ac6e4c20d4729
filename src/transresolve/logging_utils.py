"""Custom logging utilities for TransResolve."""
# src/transresolve/logging_utils.py

import logging
import sys
import time
from logging import FileHandler
from pathlib import Path

from . import paths


class _UTCFormatter(logging.Formatter):
    """Formats timestamps in UTC with 6-digit microseconds and a 'Z' suffix."""

    converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with 6-digit microseconds and a 'Z' for UTC."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt, ct) if datefmt else time.strftime(self.default_time_format, ct)
        microseconds = int((record.created - int(record.created)) * 1_000_000)
        return f"{s}.{microseconds:06d}Z"


class ConsoleFormatter(_UTCFormatter):
    """A compact formatter for console output."""

    def __init__(self, version: str) -> None:
        """
        Initialize the formatter with the application version.

        Args:
            version: The TransResolve version.

        """
        super().__init__(
            fmt=f"%(asctime)s | TransResolve - {version} | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


class FileFormatter(_UTCFormatter):
    """A detailed formatter for debug log files."""

    def __init__(self) -> None:
        """Initialize the detailed file formatter."""
        super().__init__(
            fmt="%(asctime)s | %(name)-24s | %(funcName)-20s:%(lineno)-4d | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


def setup_logging(version: str, *, debug: bool = False, project_root: Path | None = None) -> None:
    """
    Configure the root logger for TransResolve.

    1.  Console: INFO by default, DEBUG if debug=True.
    2.  File: in debug mode, full DEBUG output goes to '.transresolve/logs/debug.log'.

    Args:
        version: The application version, included in console logs.
        debug: If True, enables file logging and sets the console level to DEBUG.
        project_root: Where to look for the '.transresolve' directory. Defaults to CWD.

    """
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    level = logging.DEBUG if debug else logging.INFO
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter(version))
    root_logger.addHandler(console_handler)

    if not debug:
        return

    try:
        log_dir = paths.get_log_dir(project_root)
        paths.ensure_dir_exists(log_dir)
        log_file_path = log_dir / "debug.log"

        file_handler = FileHandler(log_file_path, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        root_logger.addHandler(file_handler)

        logging.getLogger().info("Debug mode enabled. Detailed logs will be written to %s", log_file_path)
    except OSError:
        # Without a project root or a writable log dir, console logging still works.
        logging.getLogger().exception("Failed to create debug log file. Continuing with console logging only.")
