"""Тесты пользовательских исключений подсистемы настроек."""

from __future__ import annotations

from pathlib import Path

import pytest

from dockpanel.settings.exceptions import (
    SettingsIOError,
    SettingsLockedError,
    SettingsNotFoundError,
    SettingsValidationError,
)


class TestSettingsNotFoundError:
    """Проверяет формирование сообщений для отсутствующих ключей."""

    def test_error_message_and_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level("ERROR")
        error = SettingsNotFoundError("containers", "default_shell")
        assert str(error) == "Setting 'containers.default_shell' not found"
        assert "containers.default_shell" in caplog.text

    def test_group_only(self) -> None:
        assert str(SettingsNotFoundError("network")) == "Setting 'network' not found"


class TestSettingsValidationError:
    """Проверяет валидационные ошибки."""

    def test_contains_reason_and_value(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level("ERROR")
        error = SettingsValidationError("logging.level", "INVALID", "unknown level")
        assert error.key == "logging.level"
        assert error.value == "INVALID"
        assert error.reason == "unknown level"
        assert "unknown level" in str(error)
        assert "INVALID" in caplog.text


class TestSettingsIOError:
    """Проверяет ошибки ввода-вывода."""

    def test_contains_path(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level("ERROR")
        fake_path = tmp_path / "config.json"
        error = SettingsIOError(fake_path, "permission denied")
        assert str(fake_path) in str(error)
        assert "permission denied" in caplog.text


def test_locked_error_names_setting() -> None:
    error = SettingsLockedError("containers", "sort_column")
    assert "containers.sort_column" in str(error)
    assert error.context == {"group": "containers", "key": "sort_column"}
