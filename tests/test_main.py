"""Тесты вспомогательных функций модуля main."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dockpanel import main
from dockpanel.docker_cli.daemon import DaemonInfo
from dockpanel.docker_cli.exceptions import DaemonUnavailableError
from dockpanel.settings.groups import LoggingSettings
from dockpanel.settings.session import SessionDefaults
from dockpanel.utils.logger import LOG_FILE_NAME


class DummySettings:
    def __init__(self, enabled: bool = True, level: str = "INFO") -> None:
        self.logging = LoggingSettings()
        self.logging.set("enabled", enabled)
        self.logging.set("level", level)

    def get_group(self, name: str):  # type: ignore[override]
        if name == "logging":
            return self.logging
        raise KeyError(name)


def test_initialize_workdir_creates_structure(tmp_path: Path) -> None:
    base_dir = tmp_path / ".dockpanel"
    assert main.initialize_workdir(base_dir)
    assert (base_dir / "logs").is_dir()


def test_initialize_workdir_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    assert not main.initialize_workdir(blocker / "nested")


def test_setup_logging_enabled_creates_log(tmp_path: Path) -> None:
    logging.disable(logging.NOTSET)
    settings = DummySettings(enabled=True, level="INFO")
    main.setup_logging_from_settings(tmp_path, settings)
    logger = logging.getLogger("test")
    logger.info("log entry")
    for handler in logging.getLogger().handlers:
        handler.flush()
    log_file = tmp_path / "logs" / LOG_FILE_NAME
    assert log_file.exists()
    assert "log entry" in log_file.read_text(encoding="utf-8")


def test_setup_logging_disabled(tmp_path: Path) -> None:
    logging.disable(logging.NOTSET)
    settings = DummySettings(enabled=False)
    main.setup_logging_from_settings(tmp_path, settings)
    assert logging.root.manager.disable >= logging.CRITICAL
    logging.disable(logging.NOTSET)


def test_describe_daemon_skipped() -> None:
    assert main.describe_daemon(SessionDefaults(check_daemon=False)) == "Docker daemon not checked"


def test_describe_daemon_reachable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "check_daemon", lambda host: DaemonInfo("26.1.0", "1.45"))
    assert main.describe_daemon(SessionDefaults()) == "Docker 26.1.0 (API 1.45)"


def test_describe_daemon_unavailable_is_not_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def unavailable(host):
        raise DaemonUnavailableError(host, "connection refused")

    monkeypatch.setattr(main, "check_daemon", unavailable)
    status = main.describe_daemon(SessionDefaults(docker_host="tcp://h:2375"))
    assert status == "Docker daemon unavailable"
