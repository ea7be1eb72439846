"""Clipboard accessor based on pyperclip."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Optional

from errors import PlatformError
from interfaces import ClipboardAccessor

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

logger = logging.getLogger(__name__)


class PyperclipAccessor:
    """Reads and writes plain text through pyperclip.

    ``pyperclip.paste`` shells out to xclip/xsel/pbpaste on some platforms and
    can hang, so reads run on a single helper thread and are abandoned after
    ``read_timeout_s``. At most one read is in flight: while a hung read is
    still running, later reads wait on it instead of queueing behind it.
    """

    def __init__(self, read_timeout_s: float = 0.5) -> None:
        self._read_timeout_s = read_timeout_s
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="clipboard_read")
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None

    def read_text(self) -> str:
        if pyperclip is None:
            raise PlatformError("pyperclip is not installed")
        with self._lock:
            future = self._inflight
            if future is None or future.done():
                future = self._executor.submit(pyperclip.paste)
                self._inflight = future
        try:
            value = future.result(timeout=self._read_timeout_s)
        except FutureTimeout as exc:
            raise PlatformError(f"clipboard read timed out after {self._read_timeout_s}s") from exc
        except Exception as exc:
            raise PlatformError(f"clipboard read failed: {exc}") from exc
        return value if isinstance(value, str) else ""

    def write_text(self, text: str) -> None:
        if pyperclip is None:
            raise PlatformError("pyperclip is not installed")
        try:
            pyperclip.copy(text)
        except Exception as exc:
            raise PlatformError(f"clipboard write failed: {exc}") from exc

    def close(self) -> None:
        self._executor.shutdown(wait=False)


class GuardedClipboard:
    """Clipboard wrapper for writes made by the app itself.

    Every write is announced to the gesture detector first, so the detector
    sees it as already-known content instead of a user copy.
    """

    def __init__(self, accessor: ClipboardAccessor, detector: Any) -> None:
        self._accessor = accessor
        self._detector = detector

    def read_text(self) -> str:
        return self._accessor.read_text()

    def write_text(self, text: str) -> None:
        self._detector.own_write(text, self._accessor.write_text)
        logger.debug("Wrote %d characters to clipboard", len(text))
