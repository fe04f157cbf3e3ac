"""Общие фикстуры тестов."""

from __future__ import annotations

from typing import Callable

import pytest

from dockpanel.docker_cli.models import ContainerRow

RowFactory = Callable[..., ContainerRow]


@pytest.fixture
def make_row() -> RowFactory:
    def factory(identifier: str, image: str = "alpine:3.19", **overrides: str) -> ContainerRow:
        values = {
            "id": identifier,
            "image": image,
            "command": '"sh"',
            "created_at": "2024-03-01 10:15:30",
            "status": "Up 5 minutes",
            "ports": "",
            "names": f"name-{identifier}",
        }
        values.update(overrides)
        return ContainerRow(**values)

    return factory
