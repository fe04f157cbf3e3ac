"""Высокоуровневый API над контейнерами для интерфейса.

`ContainerService` связывает выбор контейнеров, сборку команд, их запуск
и разбор вывода. Ошибки выбора и опций прерывают действие до запуска
первой команды; ошибки отдельных контейнеров в пакете собираются в
`BatchReport` и не останавливают остальные.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, List, Optional

import pexpect

from dockpanel.containers.sinks import SinkRegistry, sink_name
from dockpanel.docker_cli.builder import build, coerce_options, resolve_action
from dockpanel.docker_cli.exceptions import ExternalCommandError, InvalidOptionsError
from dockpanel.docker_cli.executor import BatchReport, CommandOutcome, DockerCliRunner, StreamSession
from dockpanel.docker_cli.models import (
    Action,
    AttachOptions,
    BuiltCommand,
    ContainerRow,
    ExecOptions,
    LogsOptions,
    RenameOptions,
)
from dockpanel.docker_cli.parser import parse_listing
from dockpanel.docker_cli.selection import resolve
from dockpanel.settings.session import SessionDefaults

LOGGER = logging.getLogger(__name__)

TEXT_ACTIONS = frozenset({Action.INSPECT, Action.DIFF, Action.LOGS})
STREAM_ACTIONS = frozenset({Action.LOGS, Action.ATTACH})

NameChooser = Callable[[str], Optional[str]]


@dataclass(slots=True)
class StreamReport:
    """Запущенные потоки и ошибки запуска по идентификатору контейнера."""

    sessions: Dict[str, StreamSession] = field(default_factory=dict)
    errors: Dict[str, ExternalCommandError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class ContainerService:
    """Операции над контейнерами через docker CLI."""

    def __init__(
        self,
        runner: DockerCliRunner,
        sinks: SinkRegistry,
        defaults: Optional[SessionDefaults] = None,
    ) -> None:
        self._runner = runner
        self._sinks = sinks
        self._defaults = defaults or SessionDefaults()
        self._streams: Dict[str, StreamSession] = {}

    @property
    def defaults(self) -> SessionDefaults:
        return self._defaults

    @property
    def sinks(self) -> SinkRegistry:
        return self._sinks

    # ------------------------------------------------------------------ listing
    def refresh(self, options: Any = None) -> List[ContainerRow]:
        """Получает свежий снимок контейнеров; ошибки разбора пробрасываются."""

        if options is None:
            options = self._defaults.list_options
        command = build(Action.LS, options)[0]
        rows = parse_listing(self._runner.run(command))
        LOGGER.info("Listed %d container(s)", len(rows))
        return rows

    # ------------------------------------------------------------------ actions
    def commands_for(
        self,
        action: Action | str,
        options: Any,
        marked_ids: Iterable[str],
        cursor_id: Optional[str],
    ) -> List[BuiltCommand]:
        """Собирает команды для текущей выборки, ничего не запуская."""

        resolved = resolve_action(action)
        if resolved.is_collection:
            raise InvalidOptionsError(resolved.value, "listing is fetched with refresh()")
        return build(resolved, options, resolve(marked_ids, cursor_id))

    def perform(
        self,
        action: Action | str,
        options: Any = None,
        marked_ids: Iterable[str] = (),
        cursor_id: Optional[str] = None,
    ) -> BatchReport:
        """Выполняет действие для каждого выбранного контейнера по очереди."""

        commands = self.commands_for(action, options, marked_ids, cursor_id)
        LOGGER.info(
            "Container action %s requested for %s",
            commands[0].action.value,
            ", ".join(str(command.target) for command in commands),
        )
        report = self._runner.run_batch(commands)
        for outcome in report.failed:
            LOGGER.error(
                "Container action %s failed for %s: %s",
                outcome.command.action.value,
                outcome.target,
                outcome.error,
            )
        return report

    def show(
        self,
        action: Action | str,
        marked_ids: Iterable[str] = (),
        cursor_id: Optional[str] = None,
        options: Any = None,
    ) -> BatchReport:
        """inspect/diff/logs: вывод каждого контейнера заменяет текст его поверхности."""

        resolved = resolve_action(action)
        if resolved not in TEXT_ACTIONS:
            raise InvalidOptionsError(resolved.value, "action does not produce display text")
        opts = coerce_options(resolved, options)
        if isinstance(opts, LogsOptions) and opts.follow:
            raise InvalidOptionsError(resolved.value, "follow mode streams output, use follow()")

        report = self.perform(resolved, opts, marked_ids, cursor_id)
        for outcome in report.succeeded:
            self._sinks.for_target(resolved, str(outcome.target)).replace(outcome.output)
        return report

    def follow(
        self,
        action: Action | str,
        marked_ids: Iterable[str] = (),
        cursor_id: Optional[str] = None,
        options: Any = None,
    ) -> StreamReport:
        """logs -f и attach: вывод дописывается в поверхность контейнера, вызов не блокируется.

        Повторный запуск для того же контейнера останавливает предыдущий поток
        и очищает поверхность. attach в этом режиме всегда идёт с --no-stdin.
        """

        resolved = resolve_action(action)
        if resolved not in STREAM_ACTIONS:
            raise InvalidOptionsError(resolved.value, "action does not stream output")
        opts = coerce_options(resolved, options)
        if isinstance(opts, LogsOptions) and not opts.follow:
            opts = replace(opts, follow=True)
        if isinstance(opts, AttachOptions) and not opts.no_stdin:
            opts = replace(opts, no_stdin=True)

        report = StreamReport()
        for command in self.commands_for(resolved, opts, marked_ids, cursor_id):
            target = str(command.target)
            name = sink_name(resolved, target)
            previous = self._streams.pop(name, None)
            if previous is not None:
                previous.stop()
            sink = self._sinks.get(name)
            sink.replace("")
            try:
                session = self._runner.stream(command, sink.append)
            except ExternalCommandError as exc:
                LOGGER.error("Cannot start %s for %s: %s", resolved.value, target, exc)
                report.errors[target] = exc
                continue
            self._streams[name] = session
            report.sessions[target] = session
        return report

    def stop_streams(self) -> None:
        """Останавливает все фоновые attach/logs -f."""

        for name, session in list(self._streams.items()):
            LOGGER.info("Stopping stream '%s'", name)
            session.stop()
        self._streams.clear()

    def rename_each(
        self,
        choose_name: NameChooser,
        marked_ids: Iterable[str] = (),
        cursor_id: Optional[str] = None,
    ) -> BatchReport:
        """Переименовывает контейнеры по одному в порядке отметки.

        `choose_name` спрашивает новое имя для очередного id; пустой ответ
        пропускает контейнер.
        """

        report = BatchReport()
        for target in resolve(marked_ids, cursor_id):
            new_name = choose_name(target)
            if not new_name:
                LOGGER.info("Rename of %s skipped", target)
                continue
            command = build(Action.RENAME, RenameOptions(new_name=new_name), [target])[0]
            try:
                self._runner.run(command)
            except ExternalCommandError as exc:
                LOGGER.error("Container action rename failed for %s: %s", target, exc)
                report.outcomes.append(CommandOutcome(target, command, error=exc))
                continue
            report.outcomes.append(CommandOutcome(target, command))
        return report

    # ------------------------------------------------------------------- shell
    def shell_command(
        self,
        marked_ids: Iterable[str] = (),
        cursor_id: Optional[str] = None,
        options: Optional[ExecOptions] = None,
    ) -> BuiltCommand:
        """`container exec -i -t <id> <shell>` для первого выбранного контейнера."""

        targets = resolve(marked_ids, cursor_id)
        opts = options or ExecOptions(command=self._defaults.shell)
        return build(Action.EXEC, opts, targets[:1])[0]

    def open_shell(self, command: BuiltCommand) -> "pexpect.spawn[str]":
        return self._runner.spawn_interactive(command)

    def shell(
        self,
        marked_ids: Iterable[str] = (),
        cursor_id: Optional[str] = None,
        options: Optional[ExecOptions] = None,
    ) -> "pexpect.spawn[str]":
        return self.open_shell(self.shell_command(marked_ids, cursor_id, options))
