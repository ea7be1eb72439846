"""Global hotkey adapter based on pynput, used as an alternate trigger."""

from __future__ import annotations

import threading
from typing import Callable, Optional

try:
    from pynput import keyboard
except Exception:  # pragma: no cover
    keyboard = None  # type: ignore


class GlobalHotkeyAdapter:
    def __init__(self, hotkey_name: str = "Key.f9") -> None:
        self._hotkey_name = hotkey_name
        self._listener: Optional[object] = None
        self._pressed = False
        self._lock = threading.Lock()
        self._on_trigger: Optional[Callable[[], None]] = None

    @property
    def hotkey_name(self) -> str:
        return self._hotkey_name

    def start(self, on_trigger: Callable[[], None]) -> None:
        if keyboard is None:
            raise RuntimeError("pynput is not installed")
        if self._listener is not None:
            return
        self._on_trigger = on_trigger
        self._listener = keyboard.Listener(on_press=self._handle_press, on_release=self._handle_release)
        self._listener.start()

    def stop(self) -> None:
        listener = self._listener
        if listener is not None:
            listener.stop()
            self._listener = None

    def _handle_press(self, key: object) -> None:
        if str(key) != self._hotkey_name:
            return
        with self._lock:
            # Key auto-repeat sends many presses for one physical hold.
            if self._pressed:
                return
            self._pressed = True
        if self._on_trigger is not None:
            self._on_trigger()

    def _handle_release(self, key: object) -> None:
        if str(key) != self._hotkey_name:
            return
        with self._lock:
            self._pressed = False
