"""Главное окно: таблица контейнеров, панель действий и строка состояния."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from dockpanel.containers.service import ContainerService, StreamReport
from dockpanel.containers.table import ContainerTable
from dockpanel.docker_cli.daemon import check_daemon
from dockpanel.docker_cli.exceptions import (
    DaemonUnavailableError,
    DockPanelError,
    EmptySelectionError,
)
from dockpanel.docker_cli.executor import BatchReport
from dockpanel.docker_cli.models import (
    Action,
    ContainerRow,
    CopyOptions,
    KillOptions,
    ListOptions,
    LogsOptions,
    RemoveOptions,
    StopOptions,
)
from dockpanel.ui.dialogs.container_console import ContainerConsoleDialog
from dockpanel.ui.widgets.container_table import ContainerTableWidget
from dockpanel.utils.helpers import short_id

# Действия, после которых меняется состав или статус контейнеров
_STATE_CHANGING = {
    Action.START,
    Action.STOP,
    Action.RESTART,
    Action.RM,
    Action.KILL,
    Action.PAUSE,
    Action.UNPAUSE,
    Action.RENAME,
}


class MainWindow(QtWidgets.QMainWindow):
    """Окно со списком контейнеров и командами docker для выбранных строк."""

    def __init__(
        self,
        *,
        service: ContainerService,
        daemon_status: str,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._service = service
        defaults = service.defaults
        self._list_options: ListOptions = defaults.list_options
        self._refresh_worker: Optional[RefreshThread] = None
        self._consoles: List[ContainerConsoleDialog] = []

        self._table = ContainerTableWidget(
            ContainerTable(),
            sort_column=defaults.sort_column,
            sort_descending=defaults.sort_descending,
        )
        self._table.selection_changed.connect(self._update_selection_label)
        self._selection_label = QtWidgets.QLabel()
        self._daemon_label = QtWidgets.QLabel(daemon_status)
        self._last_refresh_label = QtWidgets.QLabel()

        self.setWindowTitle("dockpanel")
        self.resize(1400, 800)
        self.setCentralWidget(self._table)
        self._create_toolbar()
        self._create_status_bar()
        self.refresh()

    # ------------------------------------------------------------------- setup
    def _create_toolbar(self) -> None:
        toolbar = self.addToolBar("Containers")
        toolbar.setMovable(False)

        refresh = toolbar.addAction("Refresh", self.refresh)
        refresh.setShortcut(QtGui.QKeySequence("F5"))

        show_all = toolbar.addAction("All")
        show_all.setCheckable(True)
        show_all.setChecked(self._list_options.all)
        show_all.setToolTip("Include stopped containers (container ls -a)")
        show_all.toggled.connect(self._on_show_all_toggled)
        toolbar.addSeparator()

        # None: разделитель
        entries: List[Optional[tuple[str, Callable[[], None]]]] = [
            ("Start", lambda: self._run_action(Action.START)),
            ("Stop", self._stop_selected),
            ("Restart", lambda: self._run_action(Action.RESTART)),
            ("Pause", lambda: self._run_action(Action.PAUSE)),
            ("Unpause", lambda: self._run_action(Action.UNPAUSE)),
            ("Kill", self._kill_selected),
            ("Remove", self._remove_selected),
            ("Rename", self._rename_selected),
            None,
            ("Inspect", lambda: self._show_text(Action.INSPECT)),
            ("Diff", lambda: self._show_text(Action.DIFF)),
            ("Logs", lambda: self._show_text(Action.LOGS)),
            ("Follow logs", lambda: self._follow(Action.LOGS, LogsOptions(follow=True))),
            ("Attach", lambda: self._follow(Action.ATTACH)),
            ("Shell", self._open_shell),
            None,
            ("Copy from", self._copy_from_container),
            ("Copy to", self._copy_to_container),
            None,
            ("Check daemon", self._check_daemon),
        ]
        for entry in entries:
            if entry is None:
                toolbar.addSeparator()
                continue
            label, handler = entry
            toolbar.addAction(label, handler)

    def _create_status_bar(self) -> None:
        status = self.statusBar()
        status.addWidget(self._selection_label)
        status.addPermanentWidget(self._last_refresh_label)
        status.addPermanentWidget(self._daemon_label)

    # ----------------------------------------------------------------- refresh
    def refresh(self) -> None:
        """Запрашивает новый снимок в фоне; параллельные обновления не запускаются."""

        if self._refresh_worker is not None:
            return
        worker = RefreshThread(self._service, self._list_options)
        worker.data_ready.connect(self._on_refresh_ready)
        worker.error.connect(self._on_refresh_error)
        worker.finished.connect(self._on_refresh_finished)
        self._refresh_worker = worker
        worker.start()

    def _on_refresh_ready(self, rows: List[ContainerRow]) -> None:
        self._table.set_rows(rows)
        self._last_refresh_label.setText(f"Updated {datetime.now().strftime('%H:%M:%S')}")

    def _on_refresh_error(self, message: str) -> None:
        self._table.show_placeholder(message)
        self._show_error(message)

    def _on_refresh_finished(self) -> None:
        if self._refresh_worker is not None:
            self._refresh_worker.deleteLater()
        self._refresh_worker = None

    def _on_show_all_toggled(self, checked: bool) -> None:
        opts = self._list_options
        self._list_options = ListOptions(
            all=checked, filters=opts.filters, last=opts.last, no_trunc=opts.no_trunc
        )
        self.refresh()

    # ----------------------------------------------------------------- actions
    def _selection(self) -> tuple[List[str], Optional[str]]:
        model = self._table.model
        return model.marked_ids, model.cursor

    def _run_action(self, action: Action, options: Any = None) -> None:
        marked, cursor = self._selection()
        try:
            report = self._service.perform(action, options, marked, cursor)
        except DockPanelError as exc:
            self._show_error(exc.message)
            return
        self._report(action, report)
        if action in _STATE_CHANGING:
            self.refresh()

    def _stop_selected(self) -> None:
        timeout, accepted = QtWidgets.QInputDialog.getInt(
            self, "Stop", "Seconds to wait before killing (-1 = docker default):", -1, -1, 3600
        )
        if not accepted:
            return
        self._run_action(Action.STOP, StopOptions(timeout=None if timeout < 0 else timeout))

    def _kill_selected(self) -> None:
        signal, accepted = QtWidgets.QInputDialog.getText(
            self, "Kill", "Signal (empty = SIGKILL):"
        )
        if not accepted:
            return
        self._run_action(Action.KILL, KillOptions(signal=signal.strip() or None))

    def _remove_selected(self) -> None:
        marked, cursor = self._selection()
        try:
            targets = self._service.commands_for(Action.RM, None, marked, cursor)
        except DockPanelError as exc:
            self._show_error(exc.message)
            return
        dialog = RemoveDialog([str(command.target) for command in targets], parent=self)
        if dialog.exec() != QtWidgets.QDialog.DialogCode.Accepted:
            return
        self._run_action(Action.RM, dialog.options())

    def _rename_selected(self) -> None:
        marked, cursor = self._selection()

        def choose_name(identifier: str) -> Optional[str]:
            current = self._table.model.get(identifier).names if identifier in self._table.model else ""
            name, accepted = QtWidgets.QInputDialog.getText(
                self, "Rename", f"New name for {short_id(identifier)}:", text=current
            )
            return name.strip() if accepted else None

        try:
            report = self._service.rename_each(choose_name, marked, cursor)
        except DockPanelError as exc:
            self._show_error(exc.message)
            return
        self._report(Action.RENAME, report)
        self.refresh()

    def _show_text(self, action: Action, options: Any = None) -> None:
        marked, cursor = self._selection()
        try:
            report = self._service.show(action, marked, cursor, options)
        except DockPanelError as exc:
            self._show_error(exc.message)
            return
        self._report(action, report)

    def _follow(self, action: Action, options: Any = None) -> None:
        marked, cursor = self._selection()
        try:
            report: StreamReport = self._service.follow(action, marked, cursor, options)
        except DockPanelError as exc:
            self._show_error(exc.message)
            return
        if report.errors:
            self._show_error(
                "\n".join(f"{short_id(target)}: {exc.message}" for target, exc in report.errors.items())
            )

    def _open_shell(self) -> None:
        marked, cursor = self._selection()
        try:
            command = self._service.shell_command(marked, cursor)
        except DockPanelError as exc:
            self._show_error(exc.message)
            return
        dialog = ContainerConsoleDialog(
            command,
            self._service.open_shell,
            title=f"Shell: {short_id(str(command.target))}",
            parent=self,
        )
        dialog.finished.connect(lambda _code, d=dialog: self._consoles.remove(d))
        self._consoles.append(dialog)
        dialog.show()

    def _copy_from_container(self) -> None:
        container_path, accepted = QtWidgets.QInputDialog.getText(
            self, "Copy from container", "Path inside the container:"
        )
        if not accepted or not container_path:
            return
        host_path = QtWidgets.QFileDialog.getExistingDirectory(self, "Copy to host directory")
        if not host_path:
            return
        self._run_action(
            Action.CP_FROM, CopyOptions(container_path=container_path, host_path=host_path)
        )

    def _copy_to_container(self) -> None:
        host_path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "File to copy")
        if not host_path:
            return
        container_path, accepted = QtWidgets.QInputDialog.getText(
            self, "Copy to container", "Destination path inside the container:"
        )
        if not accepted or not container_path:
            return
        self._run_action(
            Action.CP_TO, CopyOptions(container_path=container_path, host_path=host_path)
        )

    def _check_daemon(self) -> None:
        try:
            info = check_daemon(self._service.defaults.docker_host)
        except DaemonUnavailableError as exc:
            self._daemon_label.setText("Docker daemon unavailable")
            self._show_error(exc.message)
            return
        self._daemon_label.setText(f"Docker {info.version} (API {info.api_version})")

    # --------------------------------------------------------------- feedback
    def _report(self, action: Action, report: BatchReport) -> None:
        """Показывает итог пакета: ошибки перечисляются по каждому контейнеру."""

        done = len(report.succeeded)
        self.statusBar().showMessage(f"{action.value}: {done} of {len(report.outcomes)} succeeded", 5000)
        errors = report.errors_by_target()
        if errors:
            self._show_error(
                "\n".join(f"{short_id(target)}: {message}" for target, message in errors.items())
            )

    def _update_selection_label(self) -> None:
        model = self._table.model
        try:
            selection = model.selection()
        except EmptySelectionError:
            self._selection_label.setText("Nothing selected")
            return
        marked = f" ({len(model.marked_ids)} marked)" if model.marked_ids else ""
        self._selection_label.setText(f"{len(selection)} target(s){marked}")

    def _show_error(self, message: str) -> None:
        self._logger.error("UI error: %s", message)
        QtWidgets.QMessageBox.critical(self, "dockpanel", message)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._service.stop_streams()
        if self._refresh_worker is not None:
            self._refresh_worker.wait(2000)
        super().closeEvent(event)


class RemoveDialog(QtWidgets.QDialog):
    """Подтверждение `container rm` с флагами -f, -l, -v."""

    def __init__(self, targets: List[str], parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Remove containers")
        layout = QtWidgets.QVBoxLayout(self)
        names = ", ".join(short_id(target) for target in targets)
        layout.addWidget(QtWidgets.QLabel(f"Remove {len(targets)} container(s): {names}?"))
        self._force = QtWidgets.QCheckBox("Force removal of running containers (-f)")
        self._link = QtWidgets.QCheckBox("Remove the specified link (-l)")
        self._volumes = QtWidgets.QCheckBox("Remove anonymous volumes (-v)")
        for checkbox in (self._force, self._link, self._volumes):
            layout.addWidget(checkbox)
        buttons = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok
            | QtWidgets.QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def options(self) -> RemoveOptions:
        return RemoveOptions(
            force=self._force.isChecked(),
            link=self._link.isChecked(),
            volumes=self._volumes.isChecked(),
        )


class RefreshThread(QtCore.QThread):
    """Фоновый `container ls`, чтобы не блокировать интерфейс."""

    data_ready = QtCore.Signal(list)
    error = QtCore.Signal(str)

    def __init__(self, service: ContainerService, options: ListOptions) -> None:
        super().__init__()
        self._service = service
        self._options = options

    def run(self) -> None:
        try:
            rows = self._service.refresh(self._options)
        except DockPanelError as exc:
            self.error.emit(exc.message)
            return
        self.data_ready.emit(rows)


def create_main_window(*, service: ContainerService, daemon_status: str) -> MainWindow:
    """Фабрика главного окна."""

    return MainWindow(service=service, daemon_status=daemon_status)
