"""Overlay window for transform results and toasts."""

from __future__ import annotations

try:
    from PySide6.QtCore import Qt, QTimer
    from PySide6.QtWidgets import QApplication, QLabel, QWidget, QVBoxLayout
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QApplication = None  # type: ignore
    QLabel = object  # type: ignore
    QWidget = object  # type: ignore
    QVBoxLayout = object  # type: ignore

# theme -> (background, text colour for info)
_THEMES = {
    "dark": ("rgba(0,0,0,200)", "white"),
    "light": ("rgba(255,255,255,235)", "#222222"),
}

_LEVEL_COLORS = {
    "success": "#2E9E4F",
    "warning": "#C98A00",
    "error": "#D64545",
}


def _style(level: str, theme: str, font_size: int) -> str:
    background, foreground = _THEMES.get(theme, _THEMES["light"])
    color = _LEVEL_COLORS.get(level, foreground)
    return (
        f"color: {color}; font-size: {font_size}px; padding: 16px;"
        f"background: {background}; border-radius: 12px;"
    )


class OverlayWindow(QWidget):
    def __init__(self, font_size: int = 14, theme: str = "light") -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowFlags(
            Qt.WindowStaysOnTopHint | Qt.FramelessWindowHint | Qt.Tool
        )
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setFixedWidth(560)
        self._font_size = font_size
        self._theme = theme

        self._label = QLabel("")
        self._label.setWordWrap(True)
        self._label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self._label.setStyleSheet(_style("info", theme, font_size))

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._label)
        self.setLayout(layout)

        self._hide_timer: QTimer | None = None

    def _top_right(self) -> None:
        """Position the window at the top right of the primary screen."""
        if QApplication is None:
            return
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geom = screen.availableGeometry()
        self.adjustSize()
        x = geom.x() + geom.width() - self.width() - 24
        y = geom.y() + 40
        self.move(x, y)

    def set_text(self, text: str, level: str = "info") -> None:
        self._cancel_hide_timer()
        self._label.setStyleSheet(_style(level, self._theme, self._font_size))
        self._label.setText(text)
        self._top_right()
        self.show()

    def show_result(self, text: str, hide_after_ms: int = 6000) -> None:
        self.set_text(text, level="success")
        self.hide_with_delay(hide_after_ms)

    def show_notification(self, level: str, title: str, message: str, hide_after_ms: int = 3000) -> None:
        self.set_text(f"{title}\n{message}" if title else message, level=level)
        if hide_after_ms > 0:
            self.hide_with_delay(hide_after_ms)

    def show_error(self, text: str, hide_after_ms: int = 5000) -> None:
        self.set_text(f"⚠️ {text}", level="error")
        self.hide_with_delay(hide_after_ms)

    def toggle(self) -> None:
        if self.isVisible():
            self.hide()
        else:
            self._top_right()
            self.show()

    def hide_with_delay(self, delay_ms: int = 400) -> None:
        self._cancel_hide_timer()
        if QTimer is not None:
            self._hide_timer = QTimer()
            self._hide_timer.setSingleShot(True)
            self._hide_timer.timeout.connect(self.hide)
            self._hide_timer.start(delay_ms)

    def _cancel_hide_timer(self) -> None:
        if self._hide_timer is not None:
            self._hide_timer.stop()
            self._hide_timer = None
