"""Определение контейнеров, над которыми выполняется действие."""

from __future__ import annotations

from typing import Iterable, List, Optional

from dockpanel.docker_cli.exceptions import EmptySelectionError


def resolve(marked_ids: Iterable[str], cursor_row_id: Optional[str]) -> List[str]:
    """Возвращает отмеченные id в порядке отметки, иначе строку под курсором.

    Повторы схлопываются в первое вхождение. Пустая выборка означает, что
    ни одна команда не должна быть собрана.
    """

    selection: List[str] = []
    for identifier in marked_ids:
        if identifier and identifier not in selection:
            selection.append(identifier)
    if selection:
        return selection
    if cursor_row_id:
        return [cursor_row_id]
    raise EmptySelectionError()
