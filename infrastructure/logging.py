"""Logging initialization utilities using loguru."""

from __future__ import annotations

import os
from pathlib import Path
import sys

from loguru import logger

APP_DIR_NAME = "Daylog"


def _app_data_dir() -> Path:
    """Per-user application data directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    base = os.environ.get("XDG_STATE_HOME") or str(Path.home() / ".local" / "state")
    return Path(base) / APP_DIR_NAME.lower()


def get_log_directory() -> str:
    """Get the main log directory path (`DAYLOG_LOG_DIR` overrides it)."""
    override = os.environ.get("DAYLOG_LOG_DIR")
    if override:
        return override
    return str(_app_data_dir() / "logs")


def get_delete_log_directory() -> str:
    """Get the delete audit log directory path."""
    return str(_app_data_dir() / "delete_logs")


def init_logging(log_dir: str | None = None, level: str = "INFO") -> Path:
    """Initialize rotating file logging under the given directory.

    Returns:
        The directory the log files are written to.
    """
    log_path = Path(log_dir or get_log_directory())
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path / "app_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level,
    )
    return log_path


def _newest(directory: Path, pattern: str) -> Path | None:
    """Most recently modified file in `directory` matching `pattern`."""
    try:
        if not directory.exists():
            return None
        candidates = list(directory.glob(pattern))
        if not candidates:
            return None
        return max(candidates, key=lambda p: p.stat().st_mtime)
    except (OSError, ValueError):
        return None


def find_latest_log_file(log_dir: str | None = None) -> Path | None:
    """Find the latest `app_*.log` file in the log directory."""
    return _newest(Path(log_dir or get_log_directory()), "app_*.log")


def find_latest_delete_log_file(log_dir: str | None = None) -> Path | None:
    """Find the latest delete audit log file."""
    return _newest(Path(log_dir or get_delete_log_directory()), "delete_*.csv")
