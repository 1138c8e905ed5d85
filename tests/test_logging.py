from __future__ import annotations

import os
import time

from loguru import logger

from infrastructure.logging import (
    find_latest_delete_log_file,
    find_latest_log_file,
    get_log_directory,
    init_logging,
)


def test_init_logging_writes_to_directory(tmp_path) -> None:
    log_dir = tmp_path / "logs"
    try:
        assert init_logging(str(log_dir), level="DEBUG") == log_dir
        logger.info("hello from test")
        logger.complete()
    finally:
        logger.remove()

    latest = find_latest_log_file(str(log_dir))
    assert latest is not None
    assert "hello from test" in latest.read_text(encoding="utf-8")


def test_log_directory_override(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("DAYLOG_LOG_DIR", str(tmp_path))

    assert get_log_directory() == str(tmp_path)


def test_find_latest_picks_newest(tmp_path) -> None:
    old = tmp_path / "delete_20240101_000000.csv"
    new = tmp_path / "delete_20240102_000000.csv"
    old.write_text("x")
    new.write_text("y")
    past = time.time() - 100
    os.utime(old, (past, past))

    assert find_latest_delete_log_file(str(tmp_path)) == new
    assert find_latest_log_file(str(tmp_path)) is None
    assert find_latest_log_file(str(tmp_path / "absent")) is None
