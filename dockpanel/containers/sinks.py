"""Именованные поверхности вывода для inspect/diff/logs/attach."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Protocol, runtime_checkable

from dockpanel.docker_cli.models import Action

LOGGER = logging.getLogger(__name__)


def sink_name(action: Action | str, target: str) -> str:
    """Детерминированное имя поверхности, например `diff 3f2a9c`."""

    value = action.value if isinstance(action, Action) else str(action)
    return f"{value} {target}"


@runtime_checkable
class TextSink(Protocol):
    """Контракт поверхности, в которую пишется текст команды."""

    @property
    def text(self) -> str:
        """Текущее содержимое."""

    def replace(self, text: str) -> None:
        """Заменяет содержимое целиком."""

    def append(self, text: str) -> None:
        """Дописывает фрагмент (строку потока)."""


class BufferSink:
    """Поверхность в памяти; дописывание безопасно из потока чтения."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._chunks: List[str] = []
        self._lock = threading.Lock()

    @property
    def text(self) -> str:
        with self._lock:
            return "".join(self._chunks)

    def replace(self, text: str) -> None:
        with self._lock:
            self._chunks = [text] if text else []

    def append(self, text: str) -> None:
        with self._lock:
            self._chunks.append(text)


SinkFactory = Callable[[str], TextSink]


class SinkRegistry:
    """Выдаёт одну и ту же поверхность на повторный запрос с тем же именем."""

    def __init__(self, factory: SinkFactory = BufferSink) -> None:
        self._factory = factory
        self._sinks: Dict[str, TextSink] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> TextSink:
        with self._lock:
            sink = self._sinks.get(name)
            if sink is None:
                sink = self._factory(name)
                self._sinks[name] = sink
                LOGGER.debug("Created output sink '%s'", name)
            return sink

    def for_target(self, action: Action | str, target: str) -> TextSink:
        return self.get(sink_name(action, target))

    def names(self) -> List[str]:
        with self._lock:
            return list(self._sinks)

    def __contains__(self, name: object) -> bool:
        return name in self._sinks

    def close(self, name: str) -> None:
        """Забывает поверхность; у виджетов дополнительно вызывается close()."""

        with self._lock:
            sink = self._sinks.pop(name, None)
        closer = getattr(sink, "close", None)
        if callable(closer):
            closer()
