"""Проверка доступности Docker daemon через docker-py."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import docker
from docker.errors import DockerException

from dockpanel.docker_cli.exceptions import DaemonUnavailableError
from dockpanel.utils.helpers import normalize_socket_path

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DaemonInfo:
    """Версии daemon, которые показываются в строке состояния."""

    version: str
    api_version: str


def check_daemon(host: Optional[str] = None, *, timeout: int = 5) -> DaemonInfo:
    """Пингует daemon и возвращает его версию.

    Без `host` используются переменные окружения (DOCKER_HOST и т.д.).
    """

    base_url = normalize_socket_path(host) if host else None
    try:
        if base_url:
            client = docker.DockerClient(base_url=base_url, timeout=timeout)
        else:
            client = docker.from_env(timeout=timeout)
    except DockerException as exc:
        raise DaemonUnavailableError(base_url, str(exc)) from exc

    try:
        client.ping()
        version_info: Dict[str, Any] = client.version()
    except DockerException as exc:
        raise DaemonUnavailableError(base_url, str(exc)) from exc
    finally:
        client.close()

    info = DaemonInfo(
        version=str(version_info.get("Version", "unknown")),
        api_version=str(version_info.get("ApiVersion", "unknown")),
    )
    LOGGER.info("Docker daemon %s (API %s) is reachable", info.version, info.api_version)
    return info
