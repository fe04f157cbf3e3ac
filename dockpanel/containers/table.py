"""Снимок таблицы контейнеров: строки, отметки, курсор и сортировка для отображения."""

from __future__ import annotations

from operator import attrgetter
from typing import Dict, Iterable, List, Optional, Tuple

from dockpanel.docker_cli.models import ContainerRow
from dockpanel.docker_cli.selection import resolve


class ContainerTable:
    """Хранит текущий снимок `container ls` и пользовательскую выборку.

    Снимок заменяется целиком при каждом обновлении, строки не меняются на
    месте. Отметки хранятся в порядке, в котором пользователь их ставил.
    """

    def __init__(self, rows: Iterable[ContainerRow] = ()) -> None:
        self._rows: List[ContainerRow] = []
        self._index: Dict[str, ContainerRow] = {}
        self._marked: List[str] = []
        self._cursor: Optional[str] = None
        self.replace(rows)

    # ---------------------------------------------------------------- snapshot
    @property
    def rows(self) -> Tuple[ContainerRow, ...]:
        return tuple(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._index

    def get(self, identifier: str) -> ContainerRow:
        return self._index[identifier]

    def replace(self, rows: Iterable[ContainerRow]) -> None:
        """Заменяет снимок; отметки и курсор исчезнувших контейнеров сбрасываются."""

        self._rows = list(rows)
        self._index = {row.id: row for row in self._rows}
        self._marked = [identifier for identifier in self._marked if identifier in self._index]
        if self._cursor not in self._index:
            self._cursor = self._rows[0].id if self._rows else None

    def sorted_rows(self, column: str, descending: bool = False) -> List[ContainerRow]:
        """Отсортированная копия строк; сам снимок сохраняет порядок вывода docker."""

        if column not in ContainerRow.columns():
            raise ValueError(f"Unknown column: {column}")
        return sorted(self._rows, key=attrgetter(column), reverse=descending)

    # ------------------------------------------------------------------ cursor
    @property
    def cursor(self) -> Optional[str]:
        return self._cursor

    def move_cursor(self, identifier: Optional[str]) -> None:
        if identifier is not None:
            self._require(identifier)
        self._cursor = identifier

    # ------------------------------------------------------------------- marks
    @property
    def marked_ids(self) -> List[str]:
        return list(self._marked)

    def is_marked(self, identifier: str) -> bool:
        return identifier in self._marked

    def mark(self, identifier: str) -> None:
        self._require(identifier)
        if identifier not in self._marked:
            self._marked.append(identifier)

    def unmark(self, identifier: str) -> None:
        if identifier in self._marked:
            self._marked.remove(identifier)

    def toggle_mark(self, identifier: str) -> bool:
        """Переключает отметку и возвращает новое состояние."""

        if self.is_marked(identifier):
            self.unmark(identifier)
            return False
        self.mark(identifier)
        return True

    def unmark_all(self) -> None:
        self._marked.clear()

    def selection(self) -> List[str]:
        """Контейнеры для следующего действия (см. `resolve`)."""

        return resolve(self._marked, self._cursor)

    def _require(self, identifier: str) -> None:
        if identifier not in self._index:
            raise KeyError(f"Container '{identifier}' is not in the current listing")
