"""Интерактивная консоль контейнера на базе pexpect."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import pexpect
from PySide6 import QtCore, QtGui, QtWidgets

from dockpanel.docker_cli.exceptions import ExternalCommandError
from dockpanel.docker_cli.models import BuiltCommand

Spawner = Callable[[BuiltCommand], "pexpect.spawn[str]"]

_KEY_SEQUENCES: Dict[int, str] = {
    QtCore.Qt.Key.Key_Return: "\r",
    QtCore.Qt.Key.Key_Enter: "\r",
    QtCore.Qt.Key.Key_Backspace: "\x7f",
    QtCore.Qt.Key.Key_Escape: "\x1b",
    QtCore.Qt.Key.Key_Tab: "\t",
    QtCore.Qt.Key.Key_Left: "\x1b[D",
    QtCore.Qt.Key.Key_Right: "\x1b[C",
    QtCore.Qt.Key.Key_Up: "\x1b[A",
    QtCore.Qt.Key.Key_Down: "\x1b[B",
}


class ContainerConsoleDialog(QtWidgets.QDialog):
    """Диалог с псевдотерминалом `container exec -i -t <id> <shell>`."""

    def __init__(
        self,
        command: BuiltCommand,
        spawner: Spawner,
        *,
        title: str,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._command = command
        self._process: Optional[pexpect.spawn[str]] = None
        self._notifier: Optional[QtCore.QSocketNotifier] = None

        self.setWindowTitle(title)
        self.resize(900, 600)

        layout = QtWidgets.QVBoxLayout(self)
        self._output = QtWidgets.QPlainTextEdit()
        self._output.setFont(QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont))
        self._output.setReadOnly(True)
        self._output.installEventFilter(self)
        layout.addWidget(self._output)

        self._status_label = QtWidgets.QLabel("Connecting...")
        layout.addWidget(self._status_label)

        self._output.setDisabled(True)
        self._spawn_thread: Optional[ConsoleSpawnThread] = ConsoleSpawnThread(command, spawner)
        self._spawn_thread.success.connect(self._on_spawn_ready)
        self._spawn_thread.error.connect(self._on_spawn_error)
        self._spawn_thread.finished.connect(self._spawn_thread.deleteLater)
        self._spawn_thread.start()

    def _on_spawn_ready(self, process: pexpect.spawn[str]) -> None:
        self._spawn_thread = None
        self._output.setDisabled(False)
        self._output.setFocus()
        self._process = process
        self._notifier = QtCore.QSocketNotifier(
            process.fileno(), QtCore.QSocketNotifier.Type.Read
        )
        self._notifier.activated.connect(self._read_output)
        self._status_label.setText(self._command.display())

    def _on_spawn_error(self, message: str) -> None:
        self._spawn_thread = None
        QtWidgets.QMessageBox.critical(self, "Console error", message)
        self.reject()

    # ----------------------------------------------------------------- IO logic
    def _read_output(self) -> None:
        if not self._process:
            return
        try:
            while True:
                chunk = self._process.read_nonblocking(size=4096, timeout=0)
                if not chunk:
                    break
                self._write(chunk)
        except pexpect.exceptions.TIMEOUT:
            pass
        except pexpect.exceptions.EOF:
            self._process.close()
            self._write(f"\n[process exited with code {self._process.exitstatus}]\n")
            self._cleanup_process()

    def _write(self, text: str) -> None:
        self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)
        self._output.insertPlainText(text)
        self._output.moveCursor(QtGui.QTextCursor.MoveOperation.End)

    # ---------------------------------------------------------------- key input
    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if obj is self._output and event.type() == QtCore.QEvent.Type.KeyPress:
            self._handle_key_event(event)  # type: ignore[arg-type]
            return True
        return super().eventFilter(obj, event)

    def _handle_key_event(self, event: QtGui.QKeyEvent) -> None:
        if not self._process or not self._process.isalive():
            return
        sequence = _KEY_SEQUENCES.get(event.key())
        if sequence is not None:
            self._process.write(sequence)
        elif event.text():
            self._process.write(event.text())

    # ---------------------------------------------------------------- lifecycle
    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._cleanup_process()
        super().closeEvent(event)

    def _cleanup_process(self) -> None:
        if self._notifier is not None:
            self._notifier.setEnabled(False)
            self._notifier.deleteLater()
            self._notifier = None
        if self._process is not None:
            if self._process.isalive():
                self._process.terminate(force=True)
            self._process.close(force=True)
            self._process = None
        if self._spawn_thread is not None:
            self._spawn_thread.quit()
            self._spawn_thread.wait(1000)
            self._spawn_thread = None


class ConsoleSpawnThread(QtCore.QThread):
    """Запускает pexpect вне GUI-потока."""

    success = QtCore.Signal(object)
    error = QtCore.Signal(str)

    def __init__(self, command: BuiltCommand, spawner: Spawner) -> None:
        super().__init__()
        self._command = command
        self._spawner = spawner

    def run(self) -> None:
        try:
            process = self._spawner(self._command)
        except ExternalCommandError as exc:
            self.error.emit(exc.message)
            return
        self.success.emit(process)
