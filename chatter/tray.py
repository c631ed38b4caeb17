"""System tray icon for Chatter."""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import QMenu, QSystemTrayIcon, QWidget

from chatter.i18n import tr
from chatter.settings_dialog import create_app_icon


class TrayIcon(QSystemTrayIcon):
    """System tray icon with context menu."""

    settings_requested = pyqtSignal()
    dump_logs_requested = pyqtSignal()
    toggle_debug_requested = pyqtSignal()
    open_directory_requested = pyqtSignal()
    quit_requested = pyqtSignal()

    def __init__(self, debug: bool = False, parent: QWidget | None = None) -> None:
        super().__init__(create_app_icon(), parent)
        self.setToolTip(tr("app.name"))

        self._menu = QMenu()

        settings_action = QAction(tr("tray.settings"))
        settings_action.triggered.connect(self.settings_requested)
        self._menu.addAction(settings_action)

        directory_action = QAction(tr("tray.open_directory"))
        directory_action.triggered.connect(self.open_directory_requested)
        self._menu.addAction(directory_action)

        self._menu.addSeparator()

        dump_action = QAction(tr("tray.dump_logs"))
        dump_action.triggered.connect(self.dump_logs_requested)
        self._menu.addAction(dump_action)

        self._debug_action = QAction("")
        self._debug_action.triggered.connect(self.toggle_debug_requested)
        self._menu.addAction(self._debug_action)
        self.set_debug(debug)

        self._menu.addSeparator()

        quit_action = QAction(tr("tray.quit"))
        quit_action.triggered.connect(self.quit_requested)
        self._menu.addAction(quit_action)

        # QMenu does not own QActions created without a parent
        self._actions = [settings_action, directory_action, dump_action, quit_action]

        self.setContextMenu(self._menu)
        self.activated.connect(self._on_activated)

    def set_debug(self, debug: bool) -> None:
        self._debug_action.setText(tr("tray.debug_on") if debug else tr("tray.debug_off"))

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self.settings_requested.emit()
