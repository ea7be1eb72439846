"""Commands exposed to the presentation layer.

Every command returns a plain dict. Failures come back as
``{"error": <message>}``; no exception leaves this module.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import asdict
from typing import Any, Callable, Optional

from context import AppContext
from errors import AppError, ConfigurationError, ValidationError, user_message
from interfaces import WindowController
from models import Language, TransformMode, TransformRequest, TransformResult
from secret_store import ACCOUNT_NAME, SERVICE_NAME

logger = logging.getLogger(__name__)


def _boundary(func: Callable[..., dict]) -> Callable[..., dict]:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> dict:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            logger.warning("Command %s failed: %s", func.__name__, exc, exc_info=not isinstance(exc, AppError))
            return {"error": user_message(exc)}

    return wrapper


class CommandBoundary:
    def __init__(self, context: AppContext, window: Optional[WindowController] = None) -> None:
        self._context = context
        self._window = window

    def set_window(self, window: Optional[WindowController]) -> None:
        self._window = window

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------

    @_boundary
    def generate_transform(self, payload: dict) -> dict:
        request = _parse_request(payload)
        timeout_s = payload.get("timeout_s")
        result = self._context.orchestrator.handle(
            request, timeout_s=float(timeout_s) if timeout_s is not None else None
        )
        return _result_to_dict(result)

    @_boundary
    def estimate_language(self, text: str) -> dict:
        estimate = self._context.orchestrator.estimate(text or "")
        return {"language": estimate.language.value, "suggested_mode": estimate.suggested_mode.value}

    # ------------------------------------------------------------------
    # Settings & credentials
    # ------------------------------------------------------------------

    @_boundary
    def get_settings(self) -> dict:
        return self._context.settings_store.load().to_dict()

    @_boundary
    def save_settings(self, partial: dict) -> dict:
        settings = self._context.settings_store.save(partial)
        self._context.apply_settings(settings)
        if "provider" in partial:
            self._context.refresh_provider()
        return {"success": True, "settings": settings.to_dict()}

    @_boundary
    def set_credential(self, secret: str) -> dict:
        if not secret or not secret.strip():
            raise ValidationError("API key must not be empty.")
        self._context.secret_store.set(SERVICE_NAME, ACCOUNT_NAME, secret.strip())
        if not self._context.refresh_provider():
            raise ConfigurationError("API key was not stored.")
        return {"success": True}

    @_boundary
    def delete_credential(self) -> dict:
        self._context.secret_store.delete(SERVICE_NAME, ACCOUNT_NAME)
        self._context.orchestrator.clear_provider()
        return {"success": True}

    # ------------------------------------------------------------------
    # Gesture monitor & clipboard
    # ------------------------------------------------------------------

    @_boundary
    def start_monitor(self) -> dict:
        self._context.start_monitor()
        return {"success": True, "running": self._context.detector.is_running}

    @_boundary
    def stop_monitor(self) -> dict:
        self._context.stop_monitor()
        return {"success": True, "running": self._context.detector.is_running}

    @_boundary
    def read_clipboard(self) -> dict:
        return {"text": self._context.clipboard.read_text()}

    @_boundary
    def write_clipboard(self, text: str) -> dict:
        self._context.clipboard.write_text(text)
        return {"success": True}

    # ------------------------------------------------------------------
    # Window
    # ------------------------------------------------------------------

    @_boundary
    def show_window(self) -> dict:
        self._require_window().show()
        return {"success": True}

    @_boundary
    def toggle_window(self) -> dict:
        self._require_window().toggle()
        return {"success": True}

    @_boundary
    def close_window(self) -> dict:
        self._require_window().close()
        return {"success": True}

    def _require_window(self) -> WindowController:
        if self._window is None:
            raise RuntimeError("no window attached")
        return self._window


def _parse_request(payload: dict) -> TransformRequest:
    if not isinstance(payload, dict):
        raise ValidationError("Transform request must be an object.")
    try:
        return TransformRequest(
            input_text=str(payload.get("input_text") or ""),
            mode=TransformMode(payload.get("mode", TransformMode.TRANSLATE.value)),
            input_language=Language(payload.get("input_language", Language.AUTO.value)),
            output_language=Language(payload.get("output_language", Language.AUTO.value)),
        )
    except ValueError as exc:
        raise ValidationError(f"Invalid transform request: {exc}") from exc


def _result_to_dict(result: TransformResult) -> dict:
    data = asdict(result)
    data["mode"] = result.mode.value
    data["input_language"] = result.input_language.value
    data["output_language"] = result.output_language.value
    return data
