"""Таблица контейнеров с отметками, поиском и сортировкой по колонкам."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

from PySide6 import QtCore, QtGui, QtWidgets

from dockpanel.containers.table import ContainerTable
from dockpanel.docker_cli.models import ContainerRow
from dockpanel.utils.helpers import short_id

MARK_SYMBOL = "*"


@dataclass(slots=True)
class ColumnDefinition:
    """Описание одной колонки таблицы."""

    header: str
    key: str
    formatter: Callable[[str], str] | None = None

    def render(self, row: ContainerRow) -> str:
        value = getattr(row, self.key)
        if self.formatter:
            return self.formatter(value)
        return value or "-"


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("Container ID", "id", short_id),
    ColumnDefinition("Image", "image"),
    ColumnDefinition("Command", "command"),
    ColumnDefinition("Created", "created_at"),
    ColumnDefinition("Status", "status"),
    ColumnDefinition("Port(s)", "ports"),
    ColumnDefinition("Names", "names"),
]


class ContainerTableWidget(QtWidgets.QWidget):
    """Отображает `ContainerTable`; первая колонка показывает отметку строки.

    Клавиши: `m` отметить, `u` снять отметку, `U` снять все отметки.
    """

    selection_changed = QtCore.Signal()

    def __init__(
        self,
        model: ContainerTable,
        *,
        sort_column: str = "image",
        sort_descending: bool = False,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._model = model
        self._sort_column = sort_column
        self._sort_descending = sort_descending
        self._placeholder_text = "No containers"
        self._setup_ui()

    # ------------------------------------------------------------------ setup
    def _setup_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._search = QtWidgets.QLineEdit()
        self._search.setPlaceholderText("Search containers")
        self._search.setClearButtonEnabled(True)
        self._search.textChanged.connect(self._refresh_view)
        layout.addWidget(self._search)

        self._tree = QtWidgets.QTreeWidget()
        self._tree.setHeaderLabels([""] + [column.header for column in COLUMNS])
        self._tree.setRootIsDecorated(False)
        self._tree.setUniformRowHeights(True)
        self._tree.setAlternatingRowColors(True)
        self._tree.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        header = self._tree.header()
        header.setStretchLastSection(True)
        header.setSectionsClickable(True)
        header.setSectionResizeMode(QtWidgets.QHeaderView.ResizeMode.Interactive)
        header.sectionClicked.connect(self._on_header_clicked)
        self._tree.currentItemChanged.connect(self._on_current_item_changed)
        self._tree.itemDoubleClicked.connect(self._on_item_double_clicked)
        self._tree.installEventFilter(self)
        layout.addWidget(self._tree)

    @property
    def model(self) -> ContainerTable:
        return self._model

    # ----------------------------------------------------------------- data api
    def set_rows(self, rows: List[ContainerRow]) -> None:
        """Заменяет снимок и перерисовывает таблицу."""

        self._placeholder_text = "No containers"
        self._model.replace(rows)
        self._refresh_view()

    def show_placeholder(self, message: str) -> None:
        """Показывает сообщение (например, ошибку обновления) вместо строк."""

        self._placeholder_text = message
        self._model.replace([])
        self._refresh_view()

    # --------------------------------------------------------------- rendering
    def _refresh_view(self) -> None:
        self._tree.blockSignals(True)
        self._tree.clear()
        rows = self._visible_rows()
        if not rows:
            placeholder = QtWidgets.QTreeWidgetItem(["", self._placeholder_text])
            placeholder.setFlags(QtCore.Qt.ItemFlag.ItemIsEnabled)
            font = placeholder.font(1)
            font.setItalic(True)
            placeholder.setFont(1, font)
            self._tree.addTopLevelItem(placeholder)
        current = None
        for row in rows:
            item = self._create_item(row)
            if row.id == self._model.cursor:
                current = item
        if current is not None:
            self._tree.setCurrentItem(current)
        self._tree.blockSignals(False)
        self._update_sort_indicator()
        self.selection_changed.emit()

    def _visible_rows(self) -> List[ContainerRow]:
        rows = self._model.sorted_rows(self._sort_column, self._sort_descending)
        query = self._search.text().strip().lower()
        if not query:
            return rows
        return [
            row for row in rows if any(query in getattr(row, c.key).lower() for c in COLUMNS)
        ]

    def _create_item(self, row: ContainerRow) -> QtWidgets.QTreeWidgetItem:
        mark = MARK_SYMBOL if self._model.is_marked(row.id) else ""
        values = [mark] + [column.render(row) for column in COLUMNS]
        item = QtWidgets.QTreeWidgetItem(self._tree, values)
        item.setData(0, QtCore.Qt.ItemDataRole.UserRole, row.id)
        for index, value in enumerate(values[1:], start=1):
            item.setToolTip(index, value)
        status = row.status.lower()
        if status.startswith("up") and "paused" not in status:
            item.setForeground(5, QtGui.QBrush(QtGui.QColor("#00c853")))
        elif "paused" in status:
            item.setForeground(5, QtGui.QBrush(QtGui.QColor("#fdd835")))
        return item

    def _update_sort_indicator(self) -> None:
        keys = [column.key for column in COLUMNS]
        index = keys.index(self._sort_column) + 1 if self._sort_column in keys else -1
        order = (
            QtCore.Qt.SortOrder.DescendingOrder
            if self._sort_descending
            else QtCore.Qt.SortOrder.AscendingOrder
        )
        header = self._tree.header()
        header.setSortIndicatorShown(index >= 0)
        header.setSortIndicator(index, order)

    # ------------------------------------------------------------------ events
    def _on_header_clicked(self, index: int) -> None:
        if index == 0:
            return
        key = COLUMNS[index - 1].key
        if key == self._sort_column:
            self._sort_descending = not self._sort_descending
        else:
            self._sort_column = key
            self._sort_descending = False
        self._refresh_view()

    def _on_current_item_changed(
        self,
        current: QtWidgets.QTreeWidgetItem | None,
        _previous: QtWidgets.QTreeWidgetItem | None,
    ) -> None:
        identifier = current.data(0, QtCore.Qt.ItemDataRole.UserRole) if current else None
        if identifier is None or identifier in self._model:
            self._model.move_cursor(identifier)
            self.selection_changed.emit()

    def _on_item_double_clicked(self, item: QtWidgets.QTreeWidgetItem, _column: int) -> None:
        identifier = item.data(0, QtCore.Qt.ItemDataRole.UserRole)
        if identifier:
            self._model.toggle_mark(identifier)
            self._refresh_view()

    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if obj is self._tree and event.type() == QtCore.QEvent.Type.KeyPress:
            if self._handle_key(event):  # type: ignore[arg-type]
                return True
        return super().eventFilter(obj, event)

    def _handle_key(self, event: QtGui.QKeyEvent) -> bool:
        text = event.text()
        cursor = self._model.cursor
        if text == "m" and cursor:
            self._model.mark(cursor)
        elif text == "u" and cursor:
            self._model.unmark(cursor)
        elif text == "U":
            self._model.unmark_all()
        else:
            return False
        self._refresh_view()
        current = self._tree.currentItem()
        below = self._tree.itemBelow(current) if current is not None else None
        if text in {"m", "u"} and below is not None:
            self._tree.setCurrentItem(below)
        return True
