"""Реестр настроек приложения (Singleton)."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from dockpanel.settings.exceptions import (
    SettingsIOError,
    SettingsLockedError,
    SettingsNotFoundError,
    SettingsValidationError,
)
from dockpanel.settings.groups import (
    ContainersSettings,
    DockerSettings,
    LoggingSettings,
    SettingsGroup,
)
from dockpanel.settings.schemas import DEFAULT_CONFIG
from dockpanel.settings.session import SessionDefaults, build_session_defaults


class SettingsRegistry:
    """Singleton-реестр, управляющий группами настроек и файлом config.json.

    После `session_defaults()` реестр заморожен: значения читаются, но
    `set_value` запрещён до конца сессии.
    """

    _instance: Optional["SettingsRegistry"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "SettingsRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if getattr(self, "_initialized", False):
            if config_path is not None:
                self._file_path = config_path
            return

        self._logger = logging.getLogger(__name__)
        self._file_path = config_path or Path.home() / ".dockpanel" / "config.json"
        self._settings: Dict[str, SettingsGroup] = {
            "logging": LoggingSettings(),
            "docker": DockerSettings(),
            "containers": ContainersSettings(),
        }
        self._metadata: Dict[str, Any] = {}
        self._frozen = False
        self._extract_metadata(DEFAULT_CONFIG)
        self._initialized = True

    @property
    def config_path(self) -> Path:
        return self._file_path

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # --------------------------------------------------------------------- API
    def get_value(self, group: str, key: str, default: Any = None) -> Any:
        settings_group = self._settings.get(group)
        if not settings_group:
            if default is not None:
                return default
            raise SettingsNotFoundError(group, key)
        try:
            return settings_group.get(key)
        except SettingsNotFoundError:
            if default is not None:
                return default
            raise

    def set_value(self, group: str, key: str, value: Any) -> None:
        if self._frozen:
            raise SettingsLockedError(group, key)
        self._require_group(group).set(key, value)

    def get_group(self, group: str) -> SettingsGroup:
        return self._require_group(group)

    def session_defaults(self) -> SessionDefaults:
        """Фиксирует настройки на время сессии и возвращает их снимок."""

        self._frozen = True
        return build_session_defaults(self)

    def save_to_disk(self, path: Optional[Path] = None) -> None:
        target = path or self._file_path
        payload = dict(self._metadata)
        for name, group in self._settings.items():
            payload[name] = group.to_dict()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise SettingsIOError(target, str(exc)) from exc

    def load_from_disk(self, path: Optional[Path] = None) -> None:
        target = path or self._file_path
        if not target.exists():
            self._logger.info("Config file %s not found, writing defaults.", target)
            self.save_to_disk(target)
            return
        try:
            content = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsIOError(target, str(exc)) from exc
        if not isinstance(content, dict):
            raise SettingsIOError(target, "top-level JSON value must be an object")

        merged = self._merge_with_defaults(content)
        self._extract_metadata(merged)
        for name, group in self._settings.items():
            group_data = merged.get(name, {})
            if isinstance(group_data, dict):
                group.from_dict(group_data)
        self.validate()

    def validate(self) -> bool:
        for name, group in self._settings.items():
            for key in group.keys():
                value = group.get(key)
                is_valid, error = group.validate(key, value)
                if not is_valid:
                    raise SettingsValidationError(key=f"{name}.{key}", value=value, reason=error)
        return True

    def reset_to_defaults(self) -> None:
        for group in self._settings.values():
            group.reset_to_defaults()

    # ----------------------------------------------------------------- helpers
    def _require_group(self, group: str) -> SettingsGroup:
        try:
            return self._settings[group]
        except KeyError:
            raise SettingsNotFoundError(group, None) from None

    def _merge_with_defaults(self, incoming: Dict[str, Any]) -> Dict[str, Any]:
        base = copy.deepcopy(DEFAULT_CONFIG)
        for key, value in incoming.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key].update(value)
            else:
                base[key] = value
        return base

    def _extract_metadata(self, data: Dict[str, Any]) -> None:
        self._metadata = {key: value for key, value in data.items() if key not in self._settings}
