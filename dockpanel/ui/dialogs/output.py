"""Немодальное окно вывода inspect/diff/logs/attach."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets


class OutputDialog(QtWidgets.QDialog):
    """Поверхность вывода (TextSink) для одного имени вида `logs <id>`.

    `append` можно вызывать из потока чтения: текст передаётся в GUI-поток
    через сигнал.
    """

    _replace_requested = QtCore.Signal(str)
    _append_requested = QtCore.Signal(str)

    def __init__(self, name: str, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.name = name
        self.setWindowTitle(name)
        self.setModal(False)
        self.resize(900, 600)

        layout = QtWidgets.QVBoxLayout(self)
        self._output = QtWidgets.QPlainTextEdit()
        self._output.setReadOnly(True)
        self._output.setFont(QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont))
        self._output.setLineWrapMode(QtWidgets.QPlainTextEdit.LineWrapMode.NoWrap)
        layout.addWidget(self._output)

        self._replace_requested.connect(self._apply_replace)
        self._append_requested.connect(self._apply_append)

    @property
    def text(self) -> str:
        return self._output.toPlainText()

    def replace(self, text: str) -> None:
        self._replace_requested.emit(text)

    def append(self, text: str) -> None:
        self._append_requested.emit(text)

    def _apply_replace(self, text: str) -> None:
        self._output.setPlainText(text)
        self._ensure_visible()

    def _apply_append(self, text: str) -> None:
        self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)
        self._output.insertPlainText(text)
        self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)
        self._ensure_visible()

    def _ensure_visible(self) -> None:
        if not self.isVisible():
            self.show()
        self.raise_()
