"""Тесты исполнителя docker CLI на настоящих процессах sh."""

from __future__ import annotations

import threading
import time
from typing import List

import pexpect
import pytest

from dockpanel.docker_cli.exceptions import ExternalCommandError
from dockpanel.docker_cli.executor import DockerCliRunner
from dockpanel.docker_cli.models import Action, BuiltCommand


def shell(script: str, target: str = "x", action: Action = Action.INSPECT) -> BuiltCommand:
    return BuiltCommand(action, ("-c", script), target)


@pytest.fixture
def runner() -> DockerCliRunner:
    return DockerCliRunner(binary="sh")


def test_run_returns_stdout(runner: DockerCliRunner) -> None:
    assert runner.run(shell("echo hello")) == "hello\n"


def test_run_failure_uses_stderr(runner: DockerCliRunner) -> None:
    with pytest.raises(ExternalCommandError) as exc:
        runner.run(shell("echo 'No such container: x' >&2; exit 1"))
    assert exc.value.message == "No such container: x"
    assert exc.value.returncode == 1
    assert exc.value.target == "x"
    assert exc.value.command[0] == "sh"


def test_run_failure_without_output(runner: DockerCliRunner) -> None:
    with pytest.raises(ExternalCommandError) as exc:
        runner.run(shell("exit 3"))
    assert exc.value.message == "Process exited with code 3"


def test_missing_binary() -> None:
    runner = DockerCliRunner(binary="/nonexistent/docker")
    with pytest.raises(ExternalCommandError):
        runner.run(BuiltCommand(Action.LS, ("container", "ls")))


def test_batch_continues_after_failure(runner: DockerCliRunner) -> None:
    """Сбой одного контейнера не отменяет остальные."""

    commands = [
        shell("echo a", "a"),
        shell("echo broken >&2; exit 1", "b"),
        shell("echo c", "c"),
    ]
    report = runner.run_batch(commands)
    assert [outcome.target for outcome in report.outcomes] == ["a", "b", "c"]
    assert [outcome.target for outcome in report.succeeded] == ["a", "c"]
    assert report.errors_by_target() == {"b": "broken"}
    assert not report.ok
    assert report.outcomes[2].output == "c\n"


def test_build_env_docker_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCKER_HOST", "unix:///var/run/docker.sock")
    assert DockerCliRunner().build_env()["DOCKER_HOST"] == "unix:///var/run/docker.sock"
    assert "DOCKER_HOST" not in DockerCliRunner(docker_host="").build_env()
    assert DockerCliRunner(docker_host="tcp://10.0.0.2:2375").build_env()["DOCKER_HOST"] == (
        "tcp://10.0.0.2:2375"
    )


def test_docker_host_reaches_process(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCKER_HOST", raising=False)
    runner = DockerCliRunner(binary="sh", docker_host="tcp://remote:2375")
    assert runner.run(shell('printf %s "$DOCKER_HOST"')) == "tcp://remote:2375"


def test_stream_delivers_lines(runner: DockerCliRunner) -> None:
    lines: List[str] = []
    lock = threading.Lock()

    def collect(text: str) -> None:
        with lock:
            lines.append(text)

    session = runner.stream(shell("echo one; echo two", action=Action.LOGS), collect)
    assert session.wait(timeout=10) == 0
    assert lines == ["one\n", "two\n"]
    assert session.target == "x"
    assert not session.is_running()


def test_stream_stop_terminates(runner: DockerCliRunner) -> None:
    session = runner.stream(shell("sleep 30", action=Action.ATTACH), lambda _line: None)
    assert session.is_running()
    session.stop()
    assert not session.is_running()


def test_stream_missing_binary() -> None:
    runner = DockerCliRunner(binary="/nonexistent/docker")
    with pytest.raises(ExternalCommandError):
        runner.stream(BuiltCommand(Action.LOGS, ("container", "logs", "x"), "x"), print)


def test_spawn_interactive(runner: DockerCliRunner) -> None:
    process = runner.spawn_interactive(shell("echo ready"))
    try:
        process.expect("ready", timeout=10)
        process.expect(pexpect.EOF, timeout=10)
    finally:
        process.close(force=True)


def test_spawn_interactive_missing_binary() -> None:
    runner = DockerCliRunner(binary="/nonexistent/docker")
    with pytest.raises(ExternalCommandError):
        runner.spawn_interactive(BuiltCommand(Action.EXEC, ("container", "exec", "x", "sh"), "x"))


def test_batch_survives_invalid_utf8(runner: DockerCliRunner) -> None:
    """Байты не в UTF-8 заменяются, остальные контейнеры обрабатываются."""

    report = runner.run_batch([shell("printf 'bad \\377\\n'", "a"), shell("echo ok", "b")])
    assert report.ok
    assert report.outcomes[0].output == "bad \ufffd\n"
    assert report.outcomes[1].output == "ok\n"


def test_stream_replaces_invalid_utf8(runner: DockerCliRunner) -> None:
    lines: List[str] = []
    session = runner.stream(shell("printf 'x\\377\\n'; echo tail", action=Action.LOGS), lines.append)
    assert session.wait(timeout=10) == 0
    assert lines == ["x\ufffd\n", "tail\n"]


def test_stream_keeps_reading_after_handler_error(
    runner: DockerCliRunner, caplog: pytest.LogCaptureFixture
) -> None:
    lines: List[str] = []

    def flaky(text: str) -> None:
        if text == "boom\n":
            raise RuntimeError("widget gone")
        lines.append(text)

    session = runner.stream(shell("echo boom; echo after", action=Action.LOGS), flaky)
    assert session.wait(timeout=10) == 0
    assert lines == ["after\n"]
    assert "Output handler failed" in caplog.text


def test_stream_stop_discards_pending_output(runner: DockerCliRunner) -> None:
    """После stop() обработчик больше не вызывается."""

    lines: List[str] = []
    lock = threading.Lock()

    def collect(text: str) -> None:
        with lock:
            lines.append(text)

    session = runner.stream(shell("yes OLD", action=Action.LOGS), collect)
    deadline = time.monotonic() + 10
    while not lines and time.monotonic() < deadline:
        time.sleep(0.01)
    session.stop()
    with lock:
        seen = len(lines)
    time.sleep(0.2)
    assert len(lines) == seen
    assert not session.is_running()
