"""Protocol interfaces for the detector, orchestrator and their collaborators."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from models import LanguageEstimate, PasteResult, TransformRequest, TransformResult


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def monotonic_ms(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class ClipboardAccessor(Protocol):
    def read_text(self) -> str: ...

    def write_text(self, text: str) -> None: ...


class SecretStore(Protocol):
    def get(self, service: str, account: str) -> Optional[str]: ...

    def set(self, service: str, account: str, secret: str) -> None: ...

    def delete(self, service: str, account: str) -> None: ...


class SettingsStore(Protocol):
    def load(self) -> Any: ...

    def save(self, partial: dict) -> Any: ...


class TransformProvider(Protocol):
    def generate(self, request: TransformRequest, timeout_s: float) -> TransformResult: ...

    def estimate(self, text: str) -> LanguageEstimate: ...

    def health_check(self) -> bool: ...


class PasteService(Protocol):
    def paste_text(self, text: str, restore_clipboard: bool = True) -> PasteResult: ...


class WindowController(Protocol):
    def show(self) -> None: ...

    def toggle(self) -> None: ...

    def close(self) -> None: ...
