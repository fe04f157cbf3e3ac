"""Группы настроек с валидацией значений."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

from dockpanel.docker_cli.models import ContainerRow
from dockpanel.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from dockpanel.settings.validators import (
    CompositeValidator,
    EnumValidator,
    ItemsValidator,
    NonBlankValidator,
    RangeValidator,
    TypeValidator,
    Validator,
)


class SettingsGroup(ABC):
    """Абстрактная база для конкретных групп настроек."""

    group_name: str = ""

    def __init__(self) -> None:
        self._defaults: Dict[str, Any] = {}
        self._validators: Dict[str, Validator] = {}
        self._values: Dict[str, Any] = {}
        self._initialize_defaults()
        self._setup_validators()
        self.reset_to_defaults()

    @abstractmethod
    def _initialize_defaults(self) -> None:
        """Задаёт значения по умолчанию для группы."""

    @abstractmethod
    def _setup_validators(self) -> None:
        """Привязывает валидаторы к ключам группы."""

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._defaults.keys())

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._defaults:
            raise SettingsNotFoundError(self.group_name, key)
        return self._values.get(key, default)

    def validate(self, key: str, value: Any) -> Tuple[bool, str]:
        validator = self._validators.get(key)
        if not validator:
            return True, ""
        return validator.validate(value)

    def set(self, key: str, value: Any) -> None:
        """Сохраняет значение, выбрасывая ошибку при невалидных данных."""

        if key not in self._defaults:
            raise SettingsNotFoundError(self.group_name, key)
        is_valid, error = self.validate(key, value)
        if not is_valid:
            raise SettingsValidationError(
                key=f"{self.group_name}.{key}",
                value=value,
                reason=error,
            )
        self._values[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Заполняет значениями из словаря; неизвестные ключи игнорируются."""

        for key, value in data.items():
            if key in self._defaults:
                self.set(key, value)

    def reset_to_defaults(self) -> None:
        self._values = {
            key: list(value) if isinstance(value, list) else value
            for key, value in self._defaults.items()
        }


class LoggingSettings(SettingsGroup):
    """Настройки журналирования."""

    group_name = "logging"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            "enabled": True,
            "level": "INFO",
            "max_file_size_mb": 10,
            "max_archived_files": 5,
        }

    def _setup_validators(self) -> None:
        self._validators = {
            "enabled": TypeValidator(bool),
            "level": EnumValidator(["DEBUG", "INFO", "WARNING", "ERROR"]),
            "max_file_size_mb": RangeValidator(1, 1000),
            "max_archived_files": RangeValidator(1, 50),
        }


class DockerSettings(SettingsGroup):
    """Как вызывать docker CLI и к какому daemon обращаться."""

    group_name = "docker"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            "binary": "docker",
            "host": "",  # пусто: берётся DOCKER_HOST из окружения
            "check_daemon": True,
        }

    def _setup_validators(self) -> None:
        self._validators = {
            "binary": NonBlankValidator(),
            "host": TypeValidator(str),
            "check_daemon": TypeValidator(bool),
        }


class ContainersSettings(SettingsGroup):
    """Значения по умолчанию для таблицы контейнеров и `container ls`."""

    group_name = "containers"

    def _initialize_defaults(self) -> None:
        self._defaults = {
            "sort_column": "image",
            "sort_descending": False,
            "default_shell": "/bin/sh",
            "ls_all": True,
            "ls_filters": [],
            "ls_last": 0,  # 0: флаг -n не передаётся
            "ls_no_trunc": False,
        }

    def _setup_validators(self) -> None:
        self._validators = {
            "sort_column": EnumValidator(ContainerRow.columns()),
            "sort_descending": TypeValidator(bool),
            "default_shell": NonBlankValidator(),
            "ls_all": TypeValidator(bool),
            "ls_filters": ItemsValidator(NonBlankValidator()),
            "ls_last": CompositeValidator([TypeValidator(int), RangeValidator(0, 100000)]),
            "ls_no_trunc": TypeValidator(bool),
        }
