"""Разбор вывода `docker container ls` в строки таблицы."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Final, List

from dockpanel.docker_cli.exceptions import InvalidTimestampError, MalformedListingError
from dockpanel.docker_cli.models import ContainerRow

# Один JSON-массив на строку, порядок полей совпадает с ContainerRow
LISTING_FORMAT: Final[str] = (
    "[{{json .ID}},{{json .Image}},{{json .Command}},{{json .CreatedAt}},"
    "{{json .Status}},{{json .Ports}},{{json .Names}}]"
)
FIELD_COUNT: Final[int] = 7
DISPLAY_TIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
_DOCKER_TIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S %z"


def parse_listing(raw_text: str) -> List[ContainerRow]:
    """Возвращает строки в порядке вывода; любая битая строка прерывает разбор целиком."""

    rows: List[ContainerRow] = []
    # Только \n: NEL и U+2028 могут стоять внутри JSON-строк docker
    for line in raw_text.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        rows.append(parse_listing_line(line))
    return rows


def parse_listing_line(line: str) -> ContainerRow:
    """Разбирает одну строку вида `["id","image",...]`."""

    try:
        values = json.loads(line)
    except json.JSONDecodeError as exc:
        raise MalformedListingError(line) from exc
    if not isinstance(values, list) or len(values) != FIELD_COUNT:
        raise MalformedListingError(line, f"expected a JSON array of {FIELD_COUNT} fields")
    if not all(isinstance(value, str) for value in values):
        raise MalformedListingError(line, "all fields must be strings")

    container_id, image, command, created_raw, status, ports, names = values
    try:
        created_at = normalize_created_at(created_raw)
    except ValueError as exc:
        raise InvalidTimestampError(line, created_raw) from exc
    return ContainerRow(
        id=container_id,
        image=image,
        command=command,
        created_at=created_at,
        status=status,
        ports=ports,
        names=names,
    )


def normalize_created_at(value: str) -> str:
    """Переводит CreatedAt docker в локальное время `YYYY-MM-DD HH:MM:SS`.

    Docker печатает время как `2024-03-01 10:15:30 +0100 CET`; ISO 8601 тоже
    принимается. Время без смещения считается локальным.
    """

    return _parse_timestamp(value).astimezone().strftime(DISPLAY_TIME_FORMAT)


def _parse_timestamp(value: str) -> datetime:
    parts = value.split()
    if len(parts) >= 3:
        try:
            return datetime.strptime(" ".join(parts[:3]), _DOCKER_TIME_FORMAT)
        except ValueError:
            pass
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
