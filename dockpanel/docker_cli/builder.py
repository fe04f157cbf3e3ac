"""Сборка аргументов docker CLI из действия, опций и списка контейнеров.

Модуль не запускает процессы: результатом всегда является список
`BuiltCommand`, который исполняет `DockerCliRunner`. Порядок флагов
фиксирован для каждого действия, потому что собранная команда
показывается пользователю и попадает в журнал в неизменном виде.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import fields, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from dockpanel.docker_cli.exceptions import InvalidOptionsError, NoTargetError, UnknownActionError
from dockpanel.docker_cli.models import (
    OPTIONS_BY_ACTION,
    Action,
    AttachOptions,
    BuiltCommand,
    CopyOptions,
    ExecOptions,
    KillOptions,
    ListOptions,
    LogsOptions,
    RemoveOptions,
    RenameOptions,
    StartOptions,
)
from dockpanel.docker_cli.parser import LISTING_FORMAT

LOGGER = logging.getLogger(__name__)

_NUMERIC_FIELDS = ("timeout", "last", "tail")

TokenBuilder = Callable[[Any, str], List[str]]


def resolve_action(action: Action | str) -> Action:
    """Приводит строку к `Action`, неизвестные значения считаются ошибкой программиста."""

    try:
        return Action(action)
    except ValueError:
        raise UnknownActionError(action) from None


def coerce_options(action: Action, options: Any = None) -> Any:
    """Превращает None, словарь или запись опций в проверенную запись нужного типа."""

    options_cls = OPTIONS_BY_ACTION[action]
    if options is None:
        result = options_cls()
    elif isinstance(options, options_cls):
        result = options
    elif isinstance(options, Mapping):
        known = {field.name for field in fields(options_cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise InvalidOptionsError(action.value, f"unknown option(s): {', '.join(unknown)}")
        result = options_cls(**options)
    else:
        raise InvalidOptionsError(
            action.value,
            f"expected {options_cls.__name__}, got {type(options).__name__}",
        )
    return _validate(action, result)


def build(
    action: Action | str,
    options: Any = None,
    targets: Iterable[str] = (),
) -> List[BuiltCommand]:
    """Собирает команды: одну для `ls`, по одной на каждый контейнер для остальных."""

    resolved = resolve_action(action)
    opts = coerce_options(resolved, options)
    if resolved.is_collection:
        return [BuiltCommand(resolved, tuple(_list_tokens(opts)))]

    target_list = [targets] if isinstance(targets, str) else list(targets)
    if not target_list:
        raise NoTargetError(resolved.value)
    if any(not target for target in target_list):
        raise InvalidOptionsError(resolved.value, "empty container identifier")
    if resolved is Action.RENAME and len(target_list) > 1:
        raise InvalidOptionsError(resolved.value, "a new name applies to exactly one container")

    token_builder = _PER_TARGET[resolved]
    commands = [
        BuiltCommand(resolved, tuple(token_builder(opts, target)), target)
        for target in target_list
    ]
    LOGGER.debug("Built %d command(s) for %s", len(commands), resolved.value)
    return commands


def listing_command(options: Optional[ListOptions] = None) -> BuiltCommand:
    """Команда получения списка контейнеров в фиксированном JSON-формате."""

    return build(Action.LS, options)[0]


# ------------------------------------------------------------------ validation
def _validate(action: Action, options: Any) -> Any:
    for name in _NUMERIC_FIELDS:
        value = getattr(options, name, None)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidOptionsError(
                action.value, f"'{name}' must be a non-negative integer, got {value!r}"
            )

    if isinstance(options, ListOptions):
        filters = options.filters
        if isinstance(filters, str):
            filters = (filters,)
        options = replace(options, filters=tuple(filters))
    elif isinstance(options, RenameOptions):
        if not options.new_name:
            raise InvalidOptionsError(action.value, "new name is required")
    elif isinstance(options, CopyOptions):
        if not options.container_path or not options.host_path:
            raise InvalidOptionsError(action.value, "both container and host paths are required")
    elif isinstance(options, ExecOptions):
        if not isinstance(options.command, str):
            raise InvalidOptionsError(action.value, "command must be a string")
        try:
            parts = shlex.split(options.command)
        except ValueError as exc:
            raise InvalidOptionsError(action.value, f"cannot split command: {exc}") from exc
        if not parts:
            raise InvalidOptionsError(action.value, "command is required")
    return options


# ---------------------------------------------------------------------- tokens
def _list_tokens(opts: ListOptions) -> List[str]:
    tokens = ["container", "ls"]
    if opts.all:
        tokens.append("-a")
    for value in opts.filters:
        if value:
            tokens.extend(["-f", value])
    if opts.last is not None:
        tokens.extend(["-n", str(opts.last)])
    if opts.no_trunc:
        tokens.append("--no-trunc")
    tokens.extend(["--format", LISTING_FORMAT])
    return tokens


def _plain(subcommand: str) -> TokenBuilder:
    def tokens(_: Any, target: str) -> List[str]:
        return ["container", subcommand, target]

    return tokens


def _start_tokens(opts: StartOptions, target: str) -> List[str]:
    tokens = ["container", "start"]
    if opts.attach:
        tokens.append("-a")
    if opts.interactive:
        tokens.append("-i")
    return tokens + [target]


def _timeout_tokens(subcommand: str) -> TokenBuilder:
    def tokens(opts: Any, target: str) -> List[str]:
        result = ["container", subcommand]
        if opts.timeout is not None:
            result.extend(["-t", str(opts.timeout)])
        return result + [target]

    return tokens


def _rm_tokens(opts: RemoveOptions, target: str) -> List[str]:
    tokens = ["container", "rm"]
    if opts.force:
        tokens.append("-f")
    if opts.link:
        tokens.append("-l")
    if opts.volumes:
        tokens.append("-v")
    return tokens + [target]


def _kill_tokens(opts: KillOptions, target: str) -> List[str]:
    tokens = ["container", "kill"]
    if opts.signal:
        tokens.extend(["-s", opts.signal])
    return tokens + [target]


def _attach_tokens(opts: AttachOptions, target: str) -> List[str]:
    tokens = ["container", "attach"]
    if opts.no_stdin:
        tokens.append("--no-stdin")
    if opts.sig_proxy is not None:
        tokens.append(f"--sig-proxy={'true' if opts.sig_proxy else 'false'}")
    if opts.detach_keys:
        tokens.extend(["--detach-keys", opts.detach_keys])
    return tokens + [target]


def _logs_tokens(opts: LogsOptions, target: str) -> List[str]:
    tokens = ["container", "logs"]
    if opts.follow:
        tokens.append("-f")
    if opts.timestamps:
        tokens.append("-t")
    if opts.tail is not None:
        tokens.extend(["--tail", str(opts.tail)])
    if opts.since:
        tokens.extend(["--since", opts.since])
    return tokens + [target]


def _rename_tokens(opts: RenameOptions, target: str) -> List[str]:
    return ["container", "rename", target, opts.new_name]


def _cp_from_tokens(opts: CopyOptions, target: str) -> List[str]:
    return ["container", "cp", f"{target}:{opts.container_path}", opts.host_path]


def _cp_to_tokens(opts: CopyOptions, target: str) -> List[str]:
    return ["container", "cp", opts.host_path, f"{target}:{opts.container_path}"]


def _exec_tokens(opts: ExecOptions, target: str) -> List[str]:
    tokens = ["container", "exec"]
    if opts.interactive:
        tokens.append("-i")
    if opts.tty:
        tokens.append("-t")
    if opts.user:
        tokens.extend(["-u", opts.user])
    if opts.workdir:
        tokens.extend(["-w", opts.workdir])
    return tokens + [target, *shlex.split(opts.command)]


_PER_TARGET: Dict[Action, TokenBuilder] = {
    Action.START: _start_tokens,
    Action.STOP: _timeout_tokens("stop"),
    Action.RESTART: _timeout_tokens("restart"),
    Action.RM: _rm_tokens,
    Action.KILL: _kill_tokens,
    Action.PAUSE: _plain("pause"),
    Action.UNPAUSE: _plain("unpause"),
    Action.ATTACH: _attach_tokens,
    Action.LOGS: _logs_tokens,
    Action.INSPECT: _plain("inspect"),
    Action.DIFF: _plain("diff"),
    Action.RENAME: _rename_tokens,
    Action.CP_FROM: _cp_from_tokens,
    Action.CP_TO: _cp_to_tokens,
    Action.EXEC: _exec_tokens,
}
