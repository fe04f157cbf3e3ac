"""Запуск собранных команд docker CLI: синхронно, потоком и в псевдотерминале."""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

import pexpect

from dockpanel.docker_cli.exceptions import ExternalCommandError
from dockpanel.docker_cli.models import BuiltCommand

LOGGER = logging.getLogger(__name__)

LineCallback = Callable[[str], None]

# Сколько ждать поток чтения после остановки процесса
STOP_JOIN_TIMEOUT = 5.0


@dataclass(slots=True)
class CommandOutcome:
    """Результат одной команды из пакета, привязанный к своему контейнеру."""

    target: Optional[str]
    command: BuiltCommand
    output: str = ""
    error: Optional[ExternalCommandError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class BatchReport:
    """Итог пакетного действия: по записи на каждый контейнер в исходном порядке."""

    outcomes: List[CommandOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[CommandOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> List[CommandOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    def errors_by_target(self) -> Dict[str, str]:
        """Сообщения об ошибках по идентификатору контейнера."""

        return {
            str(outcome.target): outcome.error.message
            for outcome in self.outcomes
            if outcome.error is not None
        }


class StreamSession:
    """Фоновый процесс docker (attach, logs -f), вывод которого читается построчно."""

    def __init__(
        self,
        command: BuiltCommand,
        process: subprocess.Popen[str],
        reader: threading.Thread,
        stopped: threading.Event,
    ) -> None:
        self.command = command
        self._process = process
        self._reader = reader
        self._stopped = stopped

    @property
    def target(self) -> Optional[str]:
        return self.command.target

    def is_running(self) -> bool:
        return self._process.poll() is None

    def stop(self) -> None:
        """Завершает процесс и дожидается потока чтения.

        После возврата `on_line` больше не вызывается, даже если в канале
        остались непрочитанные строки. Через 5 секунд ожидания посылается kill.
        """

        self._stopped.set()
        if self.is_running():
            self._process.terminate()
            try:
                self._process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self._process.kill()
                self._process.wait()
        self._reader.join(STOP_JOIN_TIMEOUT)

    def wait(self, timeout: Optional[float] = None) -> int:
        returncode = self._process.wait(timeout=timeout)
        self._reader.join(timeout)
        return returncode


class DockerCliRunner:
    """Исполнитель команд docker CLI.

    `docker_host=None` оставляет окружение как есть, пустая строка удаляет
    `DOCKER_HOST`, любое другое значение его задаёт.
    """

    def __init__(self, binary: str = "docker", docker_host: Optional[str] = None) -> None:
        self.binary = binary
        self.docker_host = docker_host

    def build_env(self) -> Dict[str, str]:
        """Формирует окружение для docker CLI с учётом настроенного хоста."""

        env = os.environ.copy()
        if self.docker_host is None:
            return env
        host = self.docker_host.strip()
        if host:
            env["DOCKER_HOST"] = host
        else:
            env.pop("DOCKER_HOST", None)
        return env

    # ------------------------------------------------------------- blocking
    def run(self, command: BuiltCommand) -> str:
        """Выполняет команду и возвращает stdout; ненулевой код превращается в ошибку."""

        argv = command.argv(self.binary)
        LOGGER.info("Running %s", command.display(self.binary))
        try:
            completed = subprocess.run(
                argv,
                check=False,
                text=True,
                encoding="utf-8",
                errors="replace",
                capture_output=True,
                env=self.build_env(),
            )
        except OSError as exc:
            raise ExternalCommandError(argv, str(exc), target=command.target) from exc

        if completed.returncode != 0:
            message = (
                (completed.stderr or "").rstrip()
                or (completed.stdout or "").rstrip()
                or f"Process exited with code {completed.returncode}"
            )
            raise ExternalCommandError(
                argv,
                message,
                returncode=completed.returncode,
                target=command.target,
            )
        return completed.stdout or ""

    def run_batch(self, commands: Iterable[BuiltCommand]) -> BatchReport:
        """Выполняет команды по очереди; сбой одной не отменяет остальные."""

        report = BatchReport()
        for command in commands:
            try:
                output = self.run(command)
            except ExternalCommandError as exc:
                report.outcomes.append(CommandOutcome(command.target, command, error=exc))
                continue
            report.outcomes.append(CommandOutcome(command.target, command, output=output))
        if report.failed:
            LOGGER.warning(
                "%d of %d command(s) failed: %s",
                len(report.failed),
                len(report.outcomes),
                ", ".join(str(outcome.target) for outcome in report.failed),
            )
        return report

    # ------------------------------------------------------------ streaming
    def stream(self, command: BuiltCommand, on_line: LineCallback) -> StreamSession:
        """Запускает команду в фоне и передаёт каждую строку вывода в `on_line`."""

        argv = command.argv(self.binary)
        LOGGER.info("Streaming %s", command.display(self.binary))
        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self.build_env(),
                start_new_session=True,
            )
        except OSError as exc:
            raise ExternalCommandError(argv, str(exc), target=command.target) from exc

        stopped = threading.Event()

        def _consume_output() -> None:
            with process.stdout:
                for line in process.stdout:
                    if stopped.is_set():
                        break
                    try:
                        on_line(line)
                    except Exception:
                        LOGGER.exception(
                            "Output handler failed for %s", command.display(self.binary)
                        )

        reader = threading.Thread(
            target=_consume_output,
            name=f"docker-stream-{command.target or command.action.value}",
            daemon=True,
        )
        reader.start()
        return StreamSession(command, process, reader, stopped)

    def spawn_interactive(self, command: BuiltCommand) -> "pexpect.spawn[str]":
        """Открывает псевдотерминал для `exec` и интерактивного `attach`."""

        LOGGER.info("Spawning %s", command.display(self.binary))
        try:
            return pexpect.spawn(
                self.binary,
                list(command.tokens),
                env=self.build_env(),
                encoding="utf-8",
                codec_errors="replace",
                echo=False,
                timeout=None,
            )
        except pexpect.exceptions.ExceptionPexpect as exc:
            raise ExternalCommandError(
                command.argv(self.binary), str(exc), target=command.target
            ) from exc
