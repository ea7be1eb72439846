"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ControllerState(str, Enum):
    IDLE = "IDLE"
    TRANSFORMING = "TRANSFORMING"
    DELIVERING = "DELIVERING"
    ERROR = "ERROR"


class GestureKind(str, Enum):
    DOUBLE_COPY = "double-copy"
    TRIPLE_COPY = "triple-copy"


class TransformMode(str, Enum):
    TRANSLATE = "translate"
    POLITE = "polite"
    REPHRASE = "rephrase"
    SUMMARIZE = "summarize"
    PROOFREADING = "proofreading"
    CODE_TECHNICAL = "code_technical"


class Language(str, Enum):
    AUTO = "auto"
    JAPANESE = "ja"
    ENGLISH = "en"


@dataclass
class ClipboardSample:
    text: str
    observed_at_ms: float


@dataclass
class DetectorState:
    last_text: str = ""
    last_copy_at_ms: Optional[float] = None
    copy_count: int = 0
    reset_handle: Any = None


@dataclass(frozen=True)
class GestureEvent:
    text: str
    timestamp_ms: float
    count: int

    @property
    def kind(self) -> GestureKind:
        return GestureKind.TRIPLE_COPY if self.count == 3 else GestureKind.DOUBLE_COPY


@dataclass
class TransformRequest:
    input_text: str
    mode: TransformMode = TransformMode.TRANSLATE
    input_language: Language = Language.AUTO
    output_language: Language = Language.AUTO


@dataclass
class TransformResult:
    output_text: str
    mode: TransformMode
    input_language: Language
    output_language: Language
    timestamp_ms: int
    tokens_used: Optional[int] = None


@dataclass
class LanguageEstimate:
    language: Language
    suggested_mode: TransformMode = TransformMode.TRANSLATE


@dataclass
class PasteResult:
    success: bool
    reason: str
    clipboard_restored: bool


@dataclass
class Notification:
    id: str
    level: str
    title: str
    message: str
    duration_ms: int = 3000
    timestamp_ms: int = 0
