"""Тесты проверки доступности Docker daemon."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
from docker.errors import DockerException

from dockpanel.docker_cli import daemon
from dockpanel.docker_cli.exceptions import DaemonUnavailableError


class FakeClient:
    def __init__(self, *, fail_ping: bool = False) -> None:
        self.fail_ping = fail_ping
        self.closed = False

    def ping(self) -> bool:
        if self.fail_ping:
            raise DockerException("connection refused")
        return True

    def version(self) -> Dict[str, Any]:
        return {"Version": "26.1.0", "ApiVersion": "1.45"}

    def close(self) -> None:
        self.closed = True


def test_check_daemon_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeClient()
    monkeypatch.setattr(daemon.docker, "from_env", lambda timeout: client)
    info = daemon.check_daemon()
    assert info == daemon.DaemonInfo(version="26.1.0", api_version="1.45")
    assert client.closed


def test_check_daemon_socket_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Путь к сокету дополняется схемой unix://."""

    seen: List[str] = []

    def fake_client(base_url: str, timeout: int) -> FakeClient:
        seen.append(base_url)
        return FakeClient()

    monkeypatch.setattr(daemon.docker, "DockerClient", fake_client)
    daemon.check_daemon("/var/run/docker.sock")
    assert seen == ["unix:///var/run/docker.sock"]


def test_check_daemon_ping_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeClient(fail_ping=True)
    monkeypatch.setattr(daemon.docker, "DockerClient", lambda base_url, timeout: client)
    with pytest.raises(DaemonUnavailableError) as exc:
        daemon.check_daemon("tcp://10.0.0.2:2375")
    assert exc.value.host == "tcp://10.0.0.2:2375"
    assert "connection refused" in exc.value.reason
    assert client.closed


def test_check_daemon_client_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(timeout: int) -> FakeClient:
        raise DockerException("no DOCKER_HOST")

    monkeypatch.setattr(daemon.docker, "from_env", broken)
    with pytest.raises(DaemonUnavailableError):
        daemon.check_daemon()
