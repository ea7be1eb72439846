"""Application entrypoint."""

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime
from pathlib import Path

from commands import CommandBoundary
from context import AppContext, build_context
from hotkey import GlobalHotkeyAdapter
from models import ControllerState, TransformMode, TransformResult
from notifications import NOTIFICATION_ADDED
from overlay import OverlayWindow

try:
    from PySide6.QtCore import QObject, Signal, QSize
    from PySide6.QtGui import QAction, QActionGroup, QIcon, QPixmap, QPainter, QColor, QBrush
    from PySide6.QtWidgets import QApplication, QInputDialog, QLineEdit, QMenu, QMessageBox, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)


def _create_icon(color: str = "#888888", size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


ICON_IDLE = "#888888"      # grey
ICON_PAUSED = "#444444"    # dark grey
ICON_BUSY = "#3A8DFF"      # blue
ICON_ERROR = "#FF8800"     # orange

MODE_LABELS = {
    TransformMode.TRANSLATE: "Translate",
    TransformMode.POLITE: "Polite",
    TransformMode.REPHRASE: "Rephrase",
    TransformMode.SUMMARIZE: "Summarize",
    TransformMode.PROOFREADING: "Proofread",
    TransformMode.CODE_TECHNICAL: "Code / Technical",
}


class UIBridge(QObject):
    result_signal = Signal(str)
    error_signal = Signal(str)
    state_signal = Signal(str, str)  # from_state, to_state
    notification_signal = Signal(str, str, str, int)  # level, title, message, duration_ms


class App:
    def __init__(self, context: AppContext) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.context = context
        self.overlay = OverlayWindow(font_size=context.settings.ui.font_size, theme=context.settings.ui.theme)
        self.commands = CommandBoundary(context, window=self.overlay)

        self.ui = UIBridge()
        self.ui.result_signal.connect(self._on_result_ui)
        self.ui.error_signal.connect(self._on_error_ui)
        self.ui.state_signal.connect(self._on_state_change_ui)
        self.ui.notification_signal.connect(self._on_notification_ui)

        context.controller.set_callbacks(
            on_state_change=self._on_state_change,
            on_result=self._on_result,
            on_error=self._on_error,
        )
        context.dispatcher.on(NOTIFICATION_ADDED, self._on_notification)

        self.hotkey: GlobalHotkeyAdapter | None = None
        if context.settings.shortcut.alternate_hotkey:
            self.hotkey = GlobalHotkeyAdapter(hotkey_name=context.settings.shortcut.alternate_hotkey)

        self.tray = QSystemTrayIcon()
        self.tray.setIcon(_create_icon(ICON_IDLE))
        self.tray.setToolTip("cc Assistant — Ready")
        self._setup_menu()
        self.tray.show()

    def _setup_menu(self) -> None:
        menu = QMenu()

        self._monitor_action = QAction("Watch for double-copy", menu)
        self._monitor_action.setCheckable(True)
        self._monitor_action.setChecked(True)
        self._monitor_action.toggled.connect(self._toggle_monitor)
        menu.addAction(self._monitor_action)

        now_action = QAction("Transform clipboard now", menu)
        now_action.triggered.connect(self._transform_clipboard)
        menu.addAction(now_action)

        mode_menu = menu.addMenu("Mode")
        group = QActionGroup(mode_menu)
        current = self.context.controller.policy.mode
        for mode, label in MODE_LABELS.items():
            action = QAction(label, mode_menu)
            action.setCheckable(True)
            action.setChecked(mode == current)
            action.triggered.connect(lambda checked=False, m=mode: self._set_mode(m))
            group.addAction(action)
            mode_menu.addAction(action)

        menu.addSeparator()
        api_action = QAction("Set API Key", menu)
        api_action.triggered.connect(self._set_api_key)
        menu.addAction(api_action)

        delete_action = QAction("Delete API Key", menu)
        delete_action.triggered.connect(self._delete_api_key)
        menu.addAction(delete_action)

        overlay_action = QAction("Show / Hide Result", menu)
        overlay_action.triggered.connect(self.commands.toggle_window)
        menu.addAction(overlay_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    # ------------------------------------------------------------------
    # Menu handlers
    # ------------------------------------------------------------------

    def _set_api_key(self) -> None:
        value, ok = QInputDialog.getText(None, "API Key", "DashScope API Key", QLineEdit.EchoMode.Password)
        if not ok:
            return
        result = self.commands.set_credential(value)
        if "error" in result:
            QMessageBox.warning(None, "Not saved", result["error"])
            return
        QMessageBox.information(None, "Saved", "API Key saved and applied.")

    def _delete_api_key(self) -> None:
        result = self.commands.delete_credential()
        if "error" in result:
            QMessageBox.warning(None, "Not deleted", result["error"])

    def _set_mode(self, mode: TransformMode) -> None:
        language = self.context.settings.language
        result = self.commands.save_settings(
            {
                "language": {
                    "default_mode": mode.value,
                    "default_input_language": language.default_input_language,
                    "default_output_language": language.default_output_language,
                }
            }
        )
        if "error" in result:
            self.overlay.show_error(result["error"])

    def _toggle_monitor(self, enabled: bool) -> None:
        result = self.commands.start_monitor() if enabled else self.commands.stop_monitor()
        if "error" in result:
            self.overlay.show_error(result["error"])
            return
        self.tray.setIcon(_create_icon(ICON_IDLE if enabled else ICON_PAUSED))

    def _transform_clipboard(self) -> None:
        result = self.commands.read_clipboard()
        if "error" in result:
            self.overlay.show_error(result["error"])
            return
        self.context.controller.trigger(result["text"])

    # ------------------------------------------------------------------
    # Callbacks (called from worker threads → emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_state: ControllerState, to_state: ControllerState) -> None:
        self.ui.state_signal.emit(from_state.value, to_state.value)

    def _on_result(self, result: TransformResult) -> None:
        self.ui.result_signal.emit(result.output_text)

    def _on_error(self, code: str, message: str) -> None:
        self.ui.error_signal.emit(message)

    def _on_notification(self, notification) -> None:  # noqa: ANN001
        self.ui.notification_signal.emit(
            notification.level, notification.title, notification.message, notification.duration_ms
        )

    def _on_hotkey(self) -> None:
        # pynput listener thread; reading the clipboard here is fine.
        result = self.commands.read_clipboard()
        if "text" in result:
            self.context.controller.trigger(result["text"])

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_result_ui(self, text: str) -> None:
        self.overlay.show_result(text)

    def _on_error_ui(self, msg: str) -> None:
        self.context.notifications.error("Transform failed", msg)

    def _on_notification_ui(self, level: str, title: str, message: str, duration_ms: int) -> None:
        if self.context.settings.ui.notifications:
            self.overlay.show_notification(level, title, message, duration_ms)

    def _on_state_change_ui(self, from_state: str, to_state: str) -> None:
        if to_state == ControllerState.TRANSFORMING.value:
            self.tray.setIcon(_create_icon(ICON_BUSY))
            self.tray.setToolTip("cc Assistant — Transforming...")
        elif to_state == ControllerState.IDLE.value:
            self.tray.setIcon(_create_icon(ICON_IDLE))
            self.tray.setToolTip("cc Assistant — Ready")
        elif to_state == ControllerState.ERROR.value:
            self.tray.setIcon(_create_icon(ICON_ERROR))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        result = self.commands.start_monitor()
        if "error" in result:
            self.overlay.show_error(f"Clipboard monitor disabled: {result['error']}")
        if self.hotkey is not None:
            try:
                self.hotkey.start(on_trigger=self._on_hotkey)
            except Exception as exc:
                self.overlay.show_error(f"Hotkey disabled: {exc}")
        if not self.context.orchestrator.is_configured:
            self.context.notifications.warning("Not configured", "Set an API key from the tray menu.")
        else:
            threading.Thread(target=self._check_provider, daemon=True).start()
        return self.app.exec()

    def _check_provider(self) -> None:
        if not self.context.orchestrator.health_check():
            logger.warning("AI provider health check failed")
            self.context.notifications.warning("Provider unreachable", "The AI provider did not respond.")

    def quit(self) -> None:
        if self.hotkey is not None:
            self.hotkey.stop()
        self.context.shutdown()
        self.app.quit()


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    log_dir = Path.home() / ".local" / "share" / "cc_assistant" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"cc_assistant_{datetime.now().strftime('%Y%m%d')}.log"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(),
        ],
    )
    logger.info("Logging initialized: %s", log_file)


def main() -> int:
    configure_logging(level="INFO")
    app = App(build_context())
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
