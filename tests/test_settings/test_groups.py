"""Тесты групп настроек."""

from __future__ import annotations

import pytest

from dockpanel.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from dockpanel.settings.groups import ContainersSettings, DockerSettings, LoggingSettings


def test_logging_defaults() -> None:
    group = LoggingSettings()
    assert group.get("enabled") is True
    assert group.get("level") == "INFO"


def test_logging_rejects_unknown_level() -> None:
    with pytest.raises(SettingsValidationError) as exc:
        LoggingSettings().set("level", "TRACE")
    assert exc.value.key == "logging.level"


def test_docker_binary_must_not_be_blank() -> None:
    group = DockerSettings()
    group.set("binary", "/usr/local/bin/docker")
    assert group.get("binary") == "/usr/local/bin/docker"
    with pytest.raises(SettingsValidationError):
        group.set("binary", " ")


def test_containers_sort_column_is_a_table_column() -> None:
    group = ContainersSettings()
    group.set("sort_column", "status")
    with pytest.raises(SettingsValidationError):
        group.set("sort_column", "size")


def test_containers_ls_options() -> None:
    group = ContainersSettings()
    group.set("ls_filters", ["status=running", "label=env=prod"])
    group.set("ls_last", 5)
    assert group.to_dict()["ls_filters"] == ["status=running", "label=env=prod"]
    with pytest.raises(SettingsValidationError):
        group.set("ls_last", -1)
    with pytest.raises(SettingsValidationError):
        group.set("ls_filters", [""])


def test_reset_copies_list_defaults() -> None:
    """Изменение списка не портит значения по умолчанию."""

    group = ContainersSettings()
    group.get("ls_filters").append("status=exited")
    group.reset_to_defaults()
    assert group.get("ls_filters") == []


def test_unknown_key() -> None:
    with pytest.raises(SettingsNotFoundError):
        DockerSettings().get("context")
    with pytest.raises(SettingsNotFoundError):
        DockerSettings().set("context", "default")


def test_from_dict_ignores_unknown_keys() -> None:
    group = DockerSettings()
    group.from_dict({"host": "tcp://10.0.0.2:2375", "legacy": 1})
    assert group.get("host") == "tcp://10.0.0.2:2375"
    assert "legacy" not in group.to_dict()
