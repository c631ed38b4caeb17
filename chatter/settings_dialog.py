"""Settings dialog for Chatter: general file options and per-log configuration."""

from __future__ import annotations

import contextlib
import copy
import json
import logging
import sys
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QListWidget,
    QPushButton,
    QScrollArea,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from chatter.chat_types import SUPPORTED_TYPES, ChatType, ChatTypeHelper
from chatter.config import (
    ALL_LOG_NAME,
    CONFIG_FILE,
    ChatLogConfiguration,
    Configuration,
    DirectoryFormat,
    FileNameOrder,
)
from chatter.dates import DateHelper, format_time_of_day, parse_time_of_day
from chatter.i18n import tr

logger = logging.getLogger(__name__)

# Dark theme with a teal accent
CHATTER_THEME_STYLESHEET = """
QDialog, QScrollArea, QScrollArea > QWidget > QWidget {
    background-color: #1b1d1f;
    color: #e0e0e0;
}
QTabWidget::pane {
    border: 1px solid #333;
    background: #1b1d1f;
    border-radius: 4px;
}
QTabBar::tab {
    background: #26292c;
    color: #999;
    border: 1px solid #333;
    padding: 8px 16px;
    margin-right: 2px;
    border-top-left-radius: 4px;
    border-top-right-radius: 4px;
}
QTabBar::tab:selected {
    background: #303438;
    color: #4fd1c5;
}
QGroupBox {
    border: 1px solid #444;
    border-radius: 4px;
    margin-top: 12px;
    padding-top: 16px;
    background: #212427;
    font-weight: bold;
    color: #4fd1c5;
}
QGroupBox::title {
    subcontrol-origin: margin;
    subcontrol-position: top left;
    padding: 2px 8px;
}
QLineEdit, QSpinBox, QComboBox, QListWidget, QTableWidget {
    background: #111;
    color: #e0e0e0;
    border: 1px solid #555;
    border-radius: 3px;
    padding: 4px;
    selection-background-color: #4fd1c5;
    selection-color: #000;
}
QLineEdit:focus, QSpinBox:focus, QComboBox:focus {
    border-color: #4fd1c5;
}
QHeaderView::section {
    background: #26292c;
    color: #ccc;
    border: 1px solid #333;
    padding: 4px;
}
QCheckBox {
    color: #e0e0e0;
    spacing: 8px;
}
QCheckBox::indicator {
    width: 14px;
    height: 14px;
    border: 1px solid #555;
    border-radius: 3px;
    background: #111;
}
QCheckBox::indicator:checked {
    background: #4fd1c5;
    border-color: #4fd1c5;
}
QPushButton {
    background: #303438;
    color: #e0e0e0;
    border: 1px solid #555;
    border-radius: 3px;
    padding: 6px 14px;
}
QPushButton:hover {
    border-color: #4fd1c5;
    color: #4fd1c5;
}
QPushButton:disabled {
    color: #666;
}
QLabel {
    color: #ccc;
}
"""

_ORDER_KEYS = {
    FileNameOrder.PREFIX_GROUP_DATE: "settings.order.prefix_group_date",
    FileNameOrder.PREFIX_DATE_GROUP: "settings.order.prefix_date_group",
}

_DIRECTORY_KEYS = {
    DirectoryFormat.UNIFIED: "settings.layout.unified",
    DirectoryFormat.GROUP: "settings.layout.group",
    DirectoryFormat.YEAR_MONTH: "settings.layout.year_month",
    DirectoryFormat.YEAR_MONTH_GROUP: "settings.layout.year_month_group",
    DirectoryFormat.GROUP_YEAR_MONTH: "settings.layout.group_year_month",
}

# Follow their incoming/standard counterpart, see ChatLogConfiguration.sync_flags
_SYNCED_TYPES = {ChatType.TELL_OUTGOING, ChatType.CUSTOM_EMOTE}

_SETTINGS_DIALOG_POS_FILE = "settings_dialog_pos.json"


def create_app_icon() -> QIcon:
    """Load icon from .ico file, or draw one."""
    candidates = [
        Path(getattr(sys, "_MEIPASS", "")) / "assets" / "icon.ico",
        Path(__file__).parent.parent / "assets" / "icon.ico",
    ]
    for path in candidates:
        if path.is_file():
            return QIcon(str(path))

    pixmap = QPixmap(32, 32)
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHints(QPainter.RenderHint.Antialiasing)
    painter.setBrush(QColor(27, 29, 31, 230))
    painter.setPen(QColor(79, 209, 197))
    painter.drawRoundedRect(1, 1, 30, 30, 4, 4)
    painter.setFont(QFont("Arial", 18, QFont.Weight.Bold))
    painter.drawText(pixmap.rect(), Qt.AlignmentFlag.AlignCenter, "C")
    painter.end()
    return QIcon(pixmap)


def _type_label(helper: ChatTypeHelper, chat_type: ChatType) -> str:
    return f"{chat_type.name.replace('_', ' ').title()} ({helper.type_to_name(chat_type) or '-'})"


class SettingsDialog(QDialog):
    """Edits a copy of the configuration. get_config() returns it after Save."""

    def __init__(
        self,
        config: Configuration,
        config_path: str | Path = CONFIG_FILE,
        dates: DateHelper | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._config = copy.deepcopy(config)
        self._config_path = Path(config_path)
        self._dates = dates or DateHelper()
        self._type_helper = ChatTypeHelper()
        self._current: ChatLogConfiguration | None = None
        self._log_names: list[str] = []
        self._loading = False

        self.setWindowTitle(tr("settings.title"))
        self.setWindowIcon(create_app_icon())
        self.setMinimumSize(720, 620)
        self.setStyleSheet(CHATTER_THEME_STYLESHEET)
        self._restore_position()

        layout = QVBoxLayout(self)
        tabs = QTabWidget()
        tabs.addTab(self._create_general_tab(), tr("settings.tab.general"))
        tabs.addTab(self._create_logs_tab(), tr("settings.tab.logs"))
        layout.addWidget(tabs)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._save_and_accept)
        buttons.rejected.connect(self.reject)
        buttons.button(QDialogButtonBox.StandardButton.Ok).setText(tr("settings.save"))
        buttons.button(QDialogButtonBox.StandardButton.Cancel).setText(tr("settings.cancel"))
        layout.addWidget(buttons)

        self._refresh_log_list(select=ALL_LOG_NAME)

    # ── General Tab ──────────────────────────────────────────────

    def _create_general_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)

        files_group = QGroupBox(tr("settings.files_group"))
        form = QFormLayout(files_group)

        dir_row = QHBoxLayout()
        self._directory_input = QLineEdit(self._config.log_directory)
        dir_row.addWidget(self._directory_input)
        browse_btn = QPushButton(tr("settings.browse"))
        browse_btn.clicked.connect(self._browse_directory)
        dir_row.addWidget(browse_btn)
        form.addRow(tr("settings.directory"), dir_row)

        self._prefix_input = QLineEdit(self._config.log_file_name_prefix)
        form.addRow(tr("settings.prefix"), self._prefix_input)

        self._order_combo = QComboBox()
        for order, key in _ORDER_KEYS.items():
            self._order_combo.addItem(tr(key), order)
        order = self._config.log_order
        if order is FileNameOrder.NONE:
            order = FileNameOrder.PREFIX_GROUP_DATE
        self._order_combo.setCurrentIndex(self._order_combo.findData(order))
        form.addRow(tr("settings.order"), self._order_combo)

        self._layout_combo = QComboBox()
        for form_value, key in _DIRECTORY_KEYS.items():
            self._layout_combo.addItem(tr(key), form_value)
        directory_form = self._config.directory_form
        if directory_form is DirectoryFormat.NONE:
            directory_form = DirectoryFormat.UNIFIED
        self._layout_combo.setCurrentIndex(self._layout_combo.findData(directory_form))
        form.addRow(tr("settings.layout"), self._layout_combo)

        self._close_time_input = QLineEdit(format_time_of_day(self._config.time_to_close))
        self._close_time_input.setPlaceholderText("6:00")
        self._close_time_input.setToolTip(tr("settings.close_time.tooltip"))
        form.addRow(tr("settings.close_time"), self._close_time_input)

        layout.addWidget(files_group)

        debug_group = QGroupBox(tr("settings.debug_group"))
        debug_layout = QVBoxLayout(debug_group)
        self._debug_check = QCheckBox(tr("settings.debug"))
        self._debug_check.setChecked(self._config.is_debug)
        debug_layout.addWidget(self._debug_check)
        layout.addWidget(debug_group)

        layout.addStretch()
        return tab

    def _browse_directory(self) -> None:
        path = QFileDialog.getExistingDirectory(self, tr("settings.directory"), self._directory_input.text())
        if path:
            self._directory_input.setText(path)

    # ── Logs Tab ─────────────────────────────────────────────────

    def _create_logs_tab(self) -> QWidget:
        tab = QWidget()
        layout = QHBoxLayout(tab)

        left = QVBoxLayout()
        self._log_list = QListWidget()
        self._log_list.currentRowChanged.connect(self._on_log_selected)
        left.addWidget(self._log_list)

        self._new_log_input = QLineEdit()
        self._new_log_input.setPlaceholderText(tr("settings.logs.new_name"))
        left.addWidget(self._new_log_input)
        self._new_log_event = QCheckBox(tr("settings.logs.is_event"))
        left.addWidget(self._new_log_event)

        buttons_row = QHBoxLayout()
        add_btn = QPushButton(tr("settings.logs.add"))
        add_btn.clicked.connect(self._add_log)
        buttons_row.addWidget(add_btn)
        self._remove_btn = QPushButton(tr("settings.logs.remove"))
        self._remove_btn.clicked.connect(self._remove_log)
        buttons_row.addWidget(self._remove_btn)
        left.addLayout(buttons_row)
        self._logs_status = QLabel("")
        left.addWidget(self._logs_status)
        layout.addLayout(left, stretch=1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._create_log_editor())
        layout.addWidget(scroll, stretch=3)
        return tab

    def _create_log_editor(self) -> QWidget:
        editor = QWidget()
        layout = QVBoxLayout(editor)

        flags_group = QGroupBox(tr("settings.log.options_group"))
        flags_layout = QGridLayout(flags_group)
        self._active_check = QCheckBox(tr("settings.log.active"))
        self._server_check = QCheckBox(tr("settings.log.include_server"))
        self._me_check = QCheckBox(tr("settings.log.include_me"))
        self._all_users_check = QCheckBox(tr("settings.log.include_all_users"))
        self._all_messages_check = QCheckBox(tr("settings.log.include_all_messages"))
        for i, check in enumerate(
            (self._active_check, self._server_check, self._me_check, self._all_users_check, self._all_messages_check)
        ):
            check.toggled.connect(self._store_log_fields)
            flags_layout.addWidget(check, i // 2, i % 2)
        layout.addWidget(flags_group)

        format_group = QGroupBox(tr("settings.log.format_group"))
        format_form = QFormLayout(format_group)
        self._wrap_width = QSpinBox()
        self._wrap_width.setRange(0, 1000)
        self._wrap_width.setSpecialValueText(tr("settings.log.no_wrap"))
        self._wrap_indent = QSpinBox()
        self._wrap_indent.setRange(-1, 500)
        self._wrap_indent.setSpecialValueText(tr("settings.log.auto_indent"))
        self._format_input = QLineEdit()
        self._format_input.setToolTip(tr("settings.log.format.tooltip"))
        self._datetime_input = QLineEdit()
        self._datetime_input.setToolTip(tr("settings.log.datetime.tooltip"))
        for spin in (self._wrap_width, self._wrap_indent):
            spin.valueChanged.connect(self._store_log_fields)
        for edit in (self._format_input, self._datetime_input):
            edit.editingFinished.connect(self._store_log_fields)
        format_form.addRow(tr("settings.log.wrap_width"), self._wrap_width)
        format_form.addRow(tr("settings.log.wrap_indent"), self._wrap_indent)
        format_form.addRow(tr("settings.log.format"), self._format_input)
        format_form.addRow(tr("settings.log.datetime"), self._datetime_input)
        layout.addWidget(format_group)

        types_group = QGroupBox(tr("settings.log.types_group"))
        types_layout = QGridLayout(types_group)
        self._type_checks: dict[int, QCheckBox] = {}
        visible = sorted((ChatType(t) for t in SUPPORTED_TYPES if t not in _SYNCED_TYPES), key=int)
        for i, chat_type in enumerate(visible):
            check = QCheckBox(_type_label(self._type_helper, chat_type))
            check.toggled.connect(self._store_log_fields)
            self._type_checks[int(chat_type)] = check
            types_layout.addWidget(check, i // 3, i % 3)
        layout.addWidget(types_group)

        users_group = QGroupBox(tr("settings.log.users_group"))
        users_layout = QVBoxLayout(users_group)
        self._users_table = QTableWidget(0, 2)
        self._users_table.setHorizontalHeaderLabels([tr("settings.log.user"), tr("settings.log.display_as")])
        self._users_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self._users_table.itemChanged.connect(self._store_users)
        users_layout.addWidget(self._users_table)
        user_row = QHBoxLayout()
        add_user_btn = QPushButton(tr("settings.log.add_user"))
        add_user_btn.clicked.connect(self._add_user_row)
        user_row.addWidget(add_user_btn)
        remove_user_btn = QPushButton(tr("settings.log.remove_user"))
        remove_user_btn.clicked.connect(self._remove_user_row)
        user_row.addWidget(remove_user_btn)
        user_row.addStretch()
        users_layout.addLayout(user_row)
        self._users_group = users_group
        layout.addWidget(users_group)

        event_group = QGroupBox(tr("settings.log.event_group"))
        event_layout = QHBoxLayout(event_group)
        self._event_minutes = QSpinBox()
        self._event_minutes.setRange(1, 24 * 60)
        self._event_minutes.setValue(120)
        self._event_minutes.setSuffix(tr("settings.log.minutes_suffix"))
        event_layout.addWidget(self._event_minutes)
        self._start_event_btn = QPushButton(tr("settings.log.start_event"))
        self._start_event_btn.clicked.connect(self._start_event)
        event_layout.addWidget(self._start_event_btn)
        self._stop_event_btn = QPushButton(tr("settings.log.stop_event"))
        self._stop_event_btn.clicked.connect(self._stop_event)
        event_layout.addWidget(self._stop_event_btn)
        self._event_status = QLabel("")
        event_layout.addWidget(self._event_status, stretch=1)
        self._event_group = event_group
        layout.addWidget(event_group)

        layout.addStretch()
        return editor

    def _refresh_log_list(self, select: str | None = None) -> None:
        self._log_list.blockSignals(True)
        self._log_list.clear()
        names = sorted(self._config.chat_logs, key=lambda n: (n != ALL_LOG_NAME, n.lower()))
        for name in names:
            self._log_list.addItem(self._config.chat_logs[name].title)
        self._log_names = names
        self._log_list.blockSignals(False)
        row = names.index(select) if select in names else 0
        self._log_list.setCurrentRow(row)
        self._on_log_selected(row)
        self._logs_status.setText(tr.plural("settings.logs.count", len(names)))

    def _on_log_selected(self, row: int) -> None:
        if row < 0 or row >= len(self._log_names):
            self._current = None
            return
        self._current = self._config.chat_logs[self._log_names[row]]
        self._load_log_fields(self._current)

    def _load_log_fields(self, log: ChatLogConfiguration) -> None:
        self._loading = True
        try:
            self._active_check.setChecked(log.is_active)
            self._server_check.setChecked(log.include_server)
            self._me_check.setChecked(log.include_me)
            self._all_users_check.setChecked(log.include_all_users)
            self._all_users_check.setEnabled(not log.is_all)
            self._all_messages_check.setChecked(log.debug_include_all_messages)
            self._wrap_width.setValue(log.message_wrap_width)
            self._wrap_indent.setValue(max(log.message_wrap_indentation, -1))
            self._format_input.setText(log.format or "")
            self._datetime_input.setText(log.datetime_format or "")
            for code, check in self._type_checks.items():
                check.setChecked(log.chat_type_flags.get(code, False))
            self._users_table.setRowCount(0)
            for full_name, display in sorted(log.users.items()):
                self._append_user_row(full_name, display)
            self._users_group.setEnabled(not log.is_all)
            self._remove_btn.setEnabled(not log.is_all)
            self._event_group.setVisible(log.is_event)
            self._update_event_status(log)
        finally:
            self._loading = False

    def _store_log_fields(self) -> None:
        log = self._current
        if self._loading or log is None:
            return
        log.is_active = self._active_check.isChecked()
        log.include_server = self._server_check.isChecked()
        log.include_me = self._me_check.isChecked()
        log.include_all_users = True if log.is_all else self._all_users_check.isChecked()
        log.debug_include_all_messages = self._all_messages_check.isChecked()
        log.message_wrap_width = self._wrap_width.value()
        log.message_wrap_indentation = self._wrap_indent.value()
        log.format = self._format_input.text().strip() or None
        log.datetime_format = self._datetime_input.text().strip() or None
        for code, check in self._type_checks.items():
            log.chat_type_flags[code] = check.isChecked()
        log.sync_flags()

    def _append_user_row(self, full_name: str, display: str) -> None:
        row = self._users_table.rowCount()
        self._users_table.insertRow(row)
        self._users_table.setItem(row, 0, QTableWidgetItem(full_name))
        self._users_table.setItem(row, 1, QTableWidgetItem(display))

    def _add_user_row(self) -> None:
        self._loading = True
        try:
            self._append_user_row("Name@World", "")
        finally:
            self._loading = False
        self._store_users()

    def _remove_user_row(self) -> None:
        row = self._users_table.currentRow()
        if row >= 0:
            self._users_table.removeRow(row)
            self._store_users()

    def _store_users(self) -> None:
        log = self._current
        if self._loading or log is None:
            return
        users: dict[str, str] = {}
        for row in range(self._users_table.rowCount()):
            name_item = self._users_table.item(row, 0)
            display_item = self._users_table.item(row, 1)
            full_name = name_item.text().strip() if name_item else ""
            if full_name:
                users[full_name] = display_item.text().strip() if display_item else ""
        log.users = users

    def _add_log(self) -> None:
        name = self._new_log_input.text().strip()
        if not name:
            return
        log = ChatLogConfiguration(name, is_active=True, is_event=self._new_log_event.isChecked())
        if not self._config.try_add_log(log):
            self._logs_status.setText(tr("settings.logs.exists", name=name))
            return
        self._new_log_input.clear()
        self._refresh_log_list(select=name)

    def _remove_log(self) -> None:
        if self._current is None or self._current.is_all:
            return
        self._config.remove_log(self._current.name)
        self._refresh_log_list(select=ALL_LOG_NAME)

    def _start_event(self) -> None:
        if self._current is None:
            return
        self._current.start_event(self._dates.now(), self._event_minutes.value())
        self._load_log_fields(self._current)

    def _stop_event(self) -> None:
        if self._current is None:
            return
        self._current.stop_event()
        self._load_log_fields(self._current)

    def _update_event_status(self, log: ChatLogConfiguration) -> None:
        end = log.event_end
        running = log.is_active and end is not None and self._dates.now() <= end
        if running:
            self._event_status.setText(tr("settings.log.event_running", end=end.strftime("%H:%M")))
        else:
            self._event_status.setText(tr("settings.log.event_stopped"))
        self._start_event_btn.setEnabled(not running)
        self._stop_event_btn.setEnabled(running)

    # ── Save / position ──────────────────────────────────────────

    def _save_and_accept(self) -> None:
        self._store_log_fields()
        close_time = self._close_time_input.text().strip()
        if close_time and parse_time_of_day(close_time) is None:
            self._close_time_input.setStyleSheet("border-color: #FF4040;")
            self._close_time_input.setToolTip(tr("settings.close_time.invalid"))
            return
        self._config.log_directory = self._directory_input.text().strip()
        self._config.log_file_name_prefix = self._prefix_input.text().strip()
        self._config.log_order = self._order_combo.currentData()
        self._config.directory_form = self._layout_combo.currentData()
        self._config.when_to_close_logs = close_time
        self._config.normalize_when_to_close()
        self._config.is_debug = self._debug_check.isChecked()
        try:
            self._config.save(self._config_path)
        except OSError as e:
            logger.error("Cannot save configuration to %s: %s", self._config_path, e)
        self._save_position()
        self.accept()

    def _restore_position(self) -> None:
        try:
            data = json.loads(Path(_SETTINGS_DIALOG_POS_FILE).read_text(encoding="utf-8"))
            self.move(data.get("x", 200), data.get("y", 200))
        except (FileNotFoundError, json.JSONDecodeError, AttributeError):
            pass

    def _save_position(self) -> None:
        with contextlib.suppress(OSError):
            data = {"x": self.x(), "y": self.y()}
            Path(_SETTINGS_DIALOG_POS_FILE).write_text(json.dumps(data), encoding="utf-8")

    def closeEvent(self, event: object) -> None:
        self._save_position()
        super().closeEvent(event)  # type: ignore[arg-type]

    def get_config(self) -> Configuration:
        return self._config
