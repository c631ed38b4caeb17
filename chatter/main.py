"""Chatter: entry point."""

from __future__ import annotations

import logging
import os
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv
from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import QApplication

from chatter.config import CONFIG_FILE, Configuration
from chatter.files import FileHelper
from chatter.i18n import tr
from chatter.pipeline import DEFAULT_FEED_FILE, ChatterPipeline
from chatter.settings_dialog import SettingsDialog
from chatter.tray import TrayIcon

# File only at startup, the console handler is added by _setup_console() in debug mode
_LOG_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
logging.basicConfig(
    level=logging.INFO,
    format=_LOG_FMT,
    handlers=[
        logging.FileHandler("chatter_app.log", encoding="utf-8", mode="w"),
    ],
)
logger = logging.getLogger(__name__)

_console_handler: logging.Handler | None = None


def _setup_console(visible: bool) -> None:
    """Attach or detach a stderr handler and switch logging to DEBUG while attached."""
    global _console_handler
    root = logging.getLogger()
    if visible and _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stderr)
        _console_handler.setFormatter(logging.Formatter(_LOG_FMT))
        root.addHandler(_console_handler)
        root.setLevel(logging.DEBUG)
    elif not visible and _console_handler is not None:
        root.removeHandler(_console_handler)
        _console_handler = None
        root.setLevel(logging.INFO)


class _UiBridge(QObject):
    """Moves settings requests and debug toggles from the feed thread to the GUI thread."""

    settings_requested = pyqtSignal()
    debug_changed = pyqtSignal(bool)


def main() -> int:
    load_dotenv()

    config_path = Path(os.getenv("CHATTER_CONFIG", CONFIG_FILE))
    feed_path = Path(os.getenv("CHATTER_FEED", DEFAULT_FEED_FILE))

    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    file_helper = FileHelper()
    config = Configuration.load(config_path)
    config.initialize(file_helper)
    config.normalize_when_to_close()
    try:
        config.save(config_path)
    except OSError as e:
        logger.error("Cannot save configuration to %s: %s", config_path, e)

    if config.is_debug:
        _setup_console(visible=True)

    tr.set_language(os.getenv("CHATTER_LANGUAGE") or None)

    bridge = _UiBridge()
    pipeline = ChatterPipeline(
        config,
        feed_path=feed_path,
        file_helper=file_helper,
        open_settings=bridge.settings_requested.emit,
        on_debug_changed=bridge.debug_changed.emit,
    )

    tray = TrayIcon(debug=config.is_debug)
    tray.quit_requested.connect(app.quit)
    tray.dump_logs_requested.connect(pipeline.dump_logs)

    def apply_debug(debug: bool) -> None:
        _setup_console(debug)
        tray.set_debug(debug)

    bridge.debug_changed.connect(apply_debug)
    tray.toggle_debug_requested.connect(pipeline.toggle_debug)

    def open_directory() -> None:
        directory = pipeline.config.log_directory
        file_helper.ensure_directories_exist(directory)
        QDesktopServices.openUrl(QUrl.fromLocalFile(directory))

    tray.open_directory_requested.connect(open_directory)

    def open_settings() -> None:
        dialog = SettingsDialog(pipeline.config, config_path)
        if dialog.exec() == SettingsDialog.DialogCode.Accepted:
            new_config = dialog.get_config()
            pipeline.update_config(new_config)
            apply_debug(new_config.is_debug)

    tray.settings_requested.connect(open_settings)
    bridge.settings_requested.connect(open_settings)
    tray.show()

    pipeline.start()

    # Graceful shutdown
    def shutdown() -> None:
        logger.info("Shutting down...")
        pipeline.stop()
        tray.hide()
        app.quit()

    signal.signal(signal.SIGINT, lambda *_: shutdown())
    app.aboutToQuit.connect(pipeline.stop)

    logger.info("Chatter started, logging to %s", config.log_directory)
    tray.showMessage(tr("app.name"), tr("app.started", directory=config.log_directory))
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
