"""Точка входа в приложение dockpanel."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dockpanel import __version__
from dockpanel.docker_cli.daemon import check_daemon
from dockpanel.docker_cli.exceptions import DaemonUnavailableError
from dockpanel.docker_cli.executor import DockerCliRunner
from dockpanel.settings.exceptions import SettingsError
from dockpanel.settings.registry import SettingsRegistry
from dockpanel.settings.session import SessionDefaults
from dockpanel.utils.logger import configure_logging

LOGGER = logging.getLogger(__name__)


def initialize_settings(config_path: Path) -> SettingsRegistry:
    """Получает singleton реестр настроек и загружает config.json."""

    registry = SettingsRegistry(config_path=config_path)
    registry.load_from_disk()
    return registry


def setup_logging_from_settings(base_dir: Path, settings: SettingsRegistry) -> None:
    """Настраивает логирование в соответствии с LoggingSettings."""

    logging_settings = settings.get_group("logging")
    if not logging_settings.get("enabled"):
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    configure_logging(
        log_dir=base_dir / "logs",
        level_name=logging_settings.get("level"),
        max_bytes=logging_settings.get("max_file_size_mb") * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files"),
    )


def initialize_workdir(base_dir: Path) -> bool:
    """Создаёт рабочую структуру (~/.dockpanel, logs)."""

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        (base_dir / "logs").mkdir(exist_ok=True)
        return True
    except OSError as exc:
        LOGGER.error("Cannot initialize working directory %s: %s", base_dir, exc)
        return False


def describe_daemon(defaults: SessionDefaults) -> str:
    """Проверяет daemon при старте; недоступность не мешает запуску интерфейса."""

    if not defaults.check_daemon:
        return "Docker daemon not checked"
    try:
        info = check_daemon(defaults.docker_host)
    except DaemonUnavailableError:
        return "Docker daemon unavailable"
    LOGGER.info("Docker daemon %s (API %s)", info.version, info.api_version)
    return f"Docker {info.version} (API {info.api_version})"


def main() -> int:
    """Основная точка входа: готовит окружение и запускает приложение."""

    home_dir = Path(os.environ.get("DOCKPANEL_HOME", Path.home()))
    base_dir = home_dir / ".dockpanel"
    if not initialize_workdir(base_dir):
        return 1
    configure_logging(base_dir / "logs")

    try:
        settings = initialize_settings(base_dir / "config.json")
    except SettingsError as exc:
        LOGGER.error("Cannot load settings: %s", exc)
        return 1
    setup_logging_from_settings(base_dir, settings)
    defaults = settings.session_defaults()

    runner = DockerCliRunner(defaults.docker_binary, defaults.docker_host)
    daemon_status = describe_daemon(defaults)

    # PySide6 подгружается только когда дело дошло до окна
    from dockpanel.app import create_application

    LOGGER.info("Starting dockpanel %s", __version__)
    app = create_application(defaults=defaults, runner=runner, daemon_status=daemon_status)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
