"""Создание и запуск GUI приложения dockpanel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from PySide6 import QtWidgets

from dockpanel.containers.service import ContainerService
from dockpanel.containers.sinks import SinkRegistry
from dockpanel.docker_cli.executor import DockerCliRunner
from dockpanel.settings.session import SessionDefaults
from dockpanel.ui.dialogs.output import OutputDialog
from dockpanel.ui.main_window import create_main_window


class RunnableApp(Protocol):
    """Интерфейс приложения, которое можно запустить и получить код возврата."""

    def run(self) -> int:  # pragma: no cover - протокол
        """Запускает цикл приложения и возвращает код завершения."""


@dataclass
class GUIApp:
    """Приложение PySide6: окна вывода создаются лениво, по имени `действие id`."""

    defaults: SessionDefaults
    runner: DockerCliRunner
    daemon_status: str

    def __post_init__(self) -> None:
        self._qt_app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
        self._qt_app.setApplicationName("dockpanel")
        self._service = ContainerService(self.runner, SinkRegistry(OutputDialog), self.defaults)
        self._window = create_main_window(service=self._service, daemon_status=self.daemon_status)

    def run(self) -> int:
        self._window.show()
        try:
            return self._qt_app.exec()
        finally:
            self._service.stop_streams()


def create_application(
    defaults: SessionDefaults,
    runner: DockerCliRunner,
    daemon_status: str,
) -> RunnableApp:
    """Фабрика GUI приложения."""

    return GUIApp(defaults=defaults, runner=runner, daemon_status=daemon_status)
