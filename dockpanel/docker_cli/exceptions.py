"""Исключения ядра: построение команд, разбор вывода и выполнение docker CLI."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

LOGGER = logging.getLogger(__name__)


class DockPanelError(Exception):
    """Базовое исключение ядра с контекстом, который сразу попадает в журнал."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)
        LOGGER.error("%s | context=%s", message, self.context)


class MalformedListingError(DockPanelError):
    """Строка вывода `container ls` не является ожидаемым JSON-массивом."""

    def __init__(self, line: str, reason: str = "invalid JSON") -> None:
        self.line = line
        self.reason = reason
        super().__init__(
            f"Malformed listing line ({reason}): {line}",
            context={"line": line, "reason": reason},
        )


class InvalidTimestampError(MalformedListingError):
    """Поле CreatedAt не удалось разобрать как абсолютное время."""

    def __init__(self, line: str, value: str) -> None:
        self.value = value
        super().__init__(line, reason=f"unparseable timestamp {value!r}")


class EmptySelectionError(DockPanelError):
    """Нет отмеченных строк и нет строки под курсором."""

    def __init__(self) -> None:
        super().__init__("No container selected")


class NoTargetError(DockPanelError):
    """Команду для отдельного контейнера пытаются собрать без целей."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"No target container for action '{action}'", context={"action": action})


class UnknownActionError(DockPanelError, ValueError):
    """Неизвестное действие: ошибка программиста, а не пользователя."""

    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"Unknown action: {action!r}", context={"action": repr(action)})


class InvalidOptionsError(DockPanelError, ValueError):
    """Набор опций не подходит к действию."""

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(
            f"Invalid options for '{action}': {reason}",
            context={"action": action, "reason": reason},
        )


class ExternalCommandError(DockPanelError):
    """docker завершился с ошибкой; текст stderr передаётся как есть."""

    def __init__(
        self,
        command: Sequence[str],
        message: str,
        *,
        returncode: Optional[int] = None,
        target: Optional[str] = None,
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.target = target
        super().__init__(
            message,
            context={"command": " ".join(self.command), "returncode": returncode, "target": target},
        )


class DaemonUnavailableError(DockPanelError):
    """Docker daemon не отвечает на ping."""

    def __init__(self, host: Optional[str], reason: str) -> None:
        self.host = host
        self.reason = reason
        super().__init__(
            f"Docker daemon at {host or 'default host'} is unavailable: {reason}",
            context={"host": host, "reason": reason},
        )
