"""Различные вспомогательные функции."""

from __future__ import annotations


_SOCKET_SCHEMES = ("unix://", "tcp://", "npipe://", "http://", "https://", "ssh://")
SHORT_ID_LENGTH = 12


def normalize_socket_path(raw_value: str) -> str:
    """Возвращает адрес daemon с корректным префиксом unix:// для путей к сокету."""

    value = raw_value.strip()
    if not value:
        return value
    if value.lower().startswith(_SOCKET_SCHEMES):
        return value
    if value.startswith("/"):
        return f"unix://{value}"
    return value


def short_id(identifier: str) -> str:
    """Короткая форма id контейнера, как в выводе docker ps."""

    return identifier[:SHORT_ID_LENGTH]
