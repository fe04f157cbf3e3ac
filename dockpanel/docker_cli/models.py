"""Структуры данных ядра: действия, строки таблицы, опции и собранные команды."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, fields
from enum import Enum
from typing import List, Optional, Tuple


class Action(str, Enum):
    """Логические действия над контейнерами."""

    LS = "ls"
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    RM = "rm"
    KILL = "kill"
    PAUSE = "pause"
    UNPAUSE = "unpause"
    ATTACH = "attach"
    LOGS = "logs"
    INSPECT = "inspect"
    DIFF = "diff"
    RENAME = "rename"
    CP_FROM = "cp-from"
    CP_TO = "cp-to"
    EXEC = "exec"

    @property
    def is_collection(self) -> bool:
        """True для действий над всем списком, а не над отдельным контейнером."""

        return self is Action.LS


@dataclass(frozen=True, slots=True)
class ContainerRow:
    """Одна строка таблицы контейнеров, полученная из `container ls`."""

    id: str
    image: str
    command: str
    created_at: str  # локальное время в виде YYYY-MM-DD HH:MM:SS
    status: str
    ports: str
    names: str

    @classmethod
    def columns(cls) -> Tuple[str, ...]:
        """Имена колонок в порядке полей."""

        return tuple(field.name for field in fields(cls))


@dataclass(frozen=True, slots=True)
class BuiltCommand:
    """Готовая к запуску последовательность аргументов docker."""

    action: Action
    tokens: Tuple[str, ...]
    target: Optional[str] = None

    def argv(self, binary: str = "docker") -> List[str]:
        """Возвращает argv для subprocess без участия shell."""

        return [binary, *self.tokens]

    def display(self, binary: str = "docker") -> str:
        """Строка для журнала и строки состояния, безопасная для копирования в shell."""

        return shlex.join(self.argv(binary))


# ---------------------------------------------------------------- action options
@dataclass(frozen=True, slots=True)
class NoOptions:
    """Действие без флагов (pause, unpause, inspect, diff)."""


@dataclass(frozen=True, slots=True)
class ListOptions:
    all: bool = False
    filters: Tuple[str, ...] = ()
    last: Optional[int] = None
    no_trunc: bool = False


@dataclass(frozen=True, slots=True)
class StartOptions:
    attach: bool = False
    interactive: bool = False


@dataclass(frozen=True, slots=True)
class StopOptions:
    timeout: Optional[int] = None  # секунды до kill


@dataclass(frozen=True, slots=True)
class RestartOptions:
    timeout: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RemoveOptions:
    force: bool = False
    link: bool = False
    volumes: bool = False


@dataclass(frozen=True, slots=True)
class KillOptions:
    signal: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AttachOptions:
    no_stdin: bool = False
    sig_proxy: Optional[bool] = None  # None: поведение docker по умолчанию
    detach_keys: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LogsOptions:
    follow: bool = False
    timestamps: bool = False
    tail: Optional[int] = None
    since: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RenameOptions:
    new_name: str = ""


@dataclass(frozen=True, slots=True)
class CopyOptions:
    """Пути передаются в docker cp как есть, включая двоеточия и пробелы."""

    container_path: str = ""
    host_path: str = ""


@dataclass(frozen=True, slots=True)
class ExecOptions:
    command: str = "/bin/sh"
    interactive: bool = True
    tty: bool = True
    user: Optional[str] = None
    workdir: Optional[str] = None


OPTIONS_BY_ACTION = {
    Action.LS: ListOptions,
    Action.START: StartOptions,
    Action.STOP: StopOptions,
    Action.RESTART: RestartOptions,
    Action.RM: RemoveOptions,
    Action.KILL: KillOptions,
    Action.PAUSE: NoOptions,
    Action.UNPAUSE: NoOptions,
    Action.ATTACH: AttachOptions,
    Action.LOGS: LogsOptions,
    Action.INSPECT: NoOptions,
    Action.DIFF: NoOptions,
    Action.RENAME: RenameOptions,
    Action.CP_FROM: CopyOptions,
    Action.CP_TO: CopyOptions,
    Action.EXEC: ExecOptions,
}
