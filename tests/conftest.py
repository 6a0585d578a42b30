"""Pytest configuration for the recordtable test suite."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import recordtable.log as log_module
from recordtable import i18n
from recordtable.log import LOG_DIR_ENV, logger


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep log files, handlers and the active catalogue local to one test."""
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path / "logs"))
    for name in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
        monkeypatch.delenv(name, raising=False)
    prev_handlers = list(logger.handlers)
    prev_level = logger.level
    prev_log_dir = log_module._log_dir
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    log_module._log_dir = None
    i18n.reset()
    try:
        yield
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.handlers.extend(prev_handlers)
        logger.setLevel(prev_level)
        log_module._log_dir = prev_log_dir
        i18n.reset()
