"""Проверки подсистемы логирования."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dockpanel.utils.logger import LOG_FILE_NAME, configure_logging, resolve_log_level


def test_configure_logging_creates_file(tmp_path: Path) -> None:
    """После конфигурации должны появиться файлы логов и запись в них."""

    log_dir = tmp_path / "logs"
    log_file = configure_logging(log_dir, level_name="INFO", max_bytes=1024, backup_count=1)

    logging.getLogger("dockpanel.test").info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == log_dir / LOG_FILE_NAME
    assert log_file.exists()
    assert "log entry" in log_file.read_text(encoding="utf-8")


def test_configure_logging_quiets_docker_sdk(tmp_path: Path) -> None:
    configure_logging(tmp_path, level_name="DEBUG")
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger().level == logging.DEBUG


def test_resolve_log_level_invalid() -> None:
    """Неизвестный уровень логирования приводит к ValueError."""

    with pytest.raises(ValueError):
        resolve_log_level("INVALID")


def test_resolve_log_level_case_insensitive() -> None:
    assert resolve_log_level("warning") == logging.WARNING
