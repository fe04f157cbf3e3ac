"""Неизменяемый снимок настроек, действующий на протяжении сессии."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from dockpanel.docker_cli.models import ListOptions

if TYPE_CHECKING:
    from dockpanel.settings.registry import SettingsRegistry


@dataclass(frozen=True, slots=True)
class SessionDefaults:
    """Именованные значения по умолчанию, которые ядро получает один раз при запуске."""

    sort_column: str = "image"
    sort_descending: bool = False
    shell: str = "/bin/sh"
    list_options: ListOptions = field(default_factory=lambda: ListOptions(all=True))
    docker_binary: str = "docker"
    docker_host: Optional[str] = None  # None: DOCKER_HOST из окружения
    check_daemon: bool = True


def build_session_defaults(settings: "SettingsRegistry") -> SessionDefaults:
    """Переводит группы `docker` и `containers` в SessionDefaults."""

    containers = settings.get_group("containers")
    docker = settings.get_group("docker")
    last = int(containers.get("ls_last") or 0)
    host = str(docker.get("host") or "").strip()
    return SessionDefaults(
        sort_column=str(containers.get("sort_column")),
        sort_descending=bool(containers.get("sort_descending")),
        shell=str(containers.get("default_shell")),
        list_options=ListOptions(
            all=bool(containers.get("ls_all")),
            filters=tuple(containers.get("ls_filters") or ()),
            last=last or None,
            no_trunc=bool(containers.get("ls_no_trunc")),
        ),
        docker_binary=str(docker.get("binary")),
        docker_host=host or None,
        check_daemon=bool(docker.get("check_daemon")),
    )
