"""Auto paste service for inserting a transform result into the focused app."""

from __future__ import annotations

import logging
import sys
import time
from typing import Optional

from errors import NO_ACTIVE_TARGET
from interfaces import ClipboardAccessor
from models import PasteResult

try:
    from pynput.keyboard import Controller, Key
except Exception:  # pragma: no cover
    Controller = None  # type: ignore
    Key = None  # type: ignore

logger = logging.getLogger(__name__)


class KeyboardPasteService:
    def __init__(self, clipboard: ClipboardAccessor, restore_delay_s: float = 0.1) -> None:
        self._clipboard = clipboard
        self._restore_delay_s = restore_delay_s

    def paste_text(self, text: str, restore_clipboard: bool = True) -> PasteResult:
        if not text.strip():
            return PasteResult(success=False, reason="empty text", clipboard_restored=True)
        if Controller is None or Key is None:
            return PasteResult(
                success=False,
                reason="keyboard dependency missing",
                clipboard_restored=False,
            )

        old_clip: Optional[str] = None
        try:
            if restore_clipboard:
                old_clip = self._clipboard.read_text()
            self._clipboard.write_text(text)
            self._press_paste()
            if old_clip is not None:
                time.sleep(self._restore_delay_s)
                self._clipboard.write_text(old_clip)
            return PasteResult(success=True, reason="ok", clipboard_restored=restore_clipboard)
        except Exception as exc:
            logger.warning("Auto paste failed: %s", exc)
            restored = False
            try:
                if old_clip is not None:
                    self._clipboard.write_text(old_clip)
                    restored = True
            except Exception:
                restored = False
            return PasteResult(
                success=False,
                reason=f"{NO_ACTIVE_TARGET}: {exc}",
                clipboard_restored=restored,
            )

    def _press_paste(self) -> None:
        modifier = Key.cmd if sys.platform == "darwin" else Key.ctrl
        keyboard = Controller()
        keyboard.press(modifier)
        keyboard.press("v")
        keyboard.release("v")
        keyboard.release(modifier)
