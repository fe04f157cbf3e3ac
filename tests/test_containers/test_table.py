"""Тесты снимка таблицы контейнеров."""

from __future__ import annotations

import pytest

from dockpanel.containers.table import ContainerTable
from dockpanel.docker_cli.exceptions import EmptySelectionError


@pytest.fixture
def table(make_row) -> ContainerTable:
    return ContainerTable(
        [make_row("c1", "redis:7"), make_row("c2", "alpine:3.19"), make_row("c3", "nginx:1.25")]
    )


def test_cursor_starts_on_first_row(table: ContainerTable) -> None:
    assert table.cursor == "c1"
    assert table.selection() == ["c1"]


def test_empty_table_has_no_selection() -> None:
    table = ContainerTable()
    assert table.cursor is None
    with pytest.raises(EmptySelectionError):
        table.selection()


def test_marks_keep_marking_order(table: ContainerTable) -> None:
    table.mark("c3")
    table.mark("c1")
    table.mark("c3")
    table.move_cursor("c2")
    assert table.marked_ids == ["c3", "c1"]
    assert table.selection() == ["c3", "c1"]


def test_toggle_and_unmark_all(table: ContainerTable) -> None:
    assert table.toggle_mark("c2") is True
    assert table.is_marked("c2")
    assert table.toggle_mark("c2") is False
    table.mark("c1")
    table.mark("c2")
    table.unmark_all()
    assert table.marked_ids == []


def test_unknown_ids_rejected(table: ContainerTable) -> None:
    with pytest.raises(KeyError):
        table.mark("missing")
    with pytest.raises(KeyError):
        table.move_cursor("missing")


def test_sorted_rows_do_not_touch_snapshot(table: ContainerTable) -> None:
    assert [row.image for row in table.sorted_rows("image")] == ["alpine:3.19", "nginx:1.25", "redis:7"]
    assert [row.image for row in table.sorted_rows("image", descending=True)] == [
        "redis:7",
        "nginx:1.25",
        "alpine:3.19",
    ]
    assert [row.id for row in table.rows] == ["c1", "c2", "c3"]


def test_sorted_rows_unknown_column(table: ContainerTable) -> None:
    with pytest.raises(ValueError):
        table.sorted_rows("size")


def test_replace_drops_vanished_marks_and_cursor(table: ContainerTable, make_row) -> None:
    """Обновление целиком заменяет снимок."""

    table.mark("c1")
    table.mark("c3")
    table.move_cursor("c3")
    table.replace([make_row("c1"), make_row("c4")])
    assert table.marked_ids == ["c1"]
    assert table.cursor == "c1"
    assert "c3" not in table
    assert len(table) == 2


def test_replace_keeps_cursor_when_present(table: ContainerTable, make_row) -> None:
    table.move_cursor("c2")
    table.replace([make_row("c9"), make_row("c2")])
    assert table.cursor == "c2"
    assert table.get("c2").id == "c2"
