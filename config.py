"""JSON-based settings store."""

from __future__ import annotations

import copy
import json
import logging
import threading
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from errors import ValidationError
from models import Language, TransformMode

logger = logging.getLogger(__name__)

TRIGGER_TYPES = ("double_copy", "triple_copy", "hotkey")
THEMES = ("light", "dark")

_CHOICES = {
    ("shortcut", "trigger_type"): TRIGGER_TYPES,
    ("language", "default_mode"): tuple(m.value for m in TransformMode),
    ("language", "default_input_language"): tuple(lang.value for lang in Language),
    ("language", "default_output_language"): tuple(lang.value for lang in Language),
    ("ui", "theme"): THEMES,
}

_POSITIVE_FIELDS = {
    ("shortcut", "double_copy_threshold_ms"),
    ("shortcut", "poll_interval_ms"),
    ("provider", "max_tokens_per_request"),
    ("provider", "timeout_s"),
    ("ui", "font_size"),
}


@dataclass
class ShortcutSettings:
    trigger_type: str = "double_copy"
    double_copy_threshold_ms: int = 500
    poll_interval_ms: int = 100
    alternate_hotkey: Optional[str] = None


@dataclass
class ProviderSettings:
    model: str = "qwen-plus"
    endpoint: Optional[str] = None
    max_tokens_per_request: int = 2000
    timeout_s: float = 30.0


@dataclass
class OutputSettings:
    auto_clipboard: bool = True
    auto_paste: bool = False
    preserve_line_breaks: bool = True


@dataclass
class PrivacySettings:
    exclude_patterns: list[str] = field(default_factory=lambda: ["password=", "api_key", "-----BEGIN"])


@dataclass
class LanguageSettings:
    default_mode: str = "translate"
    default_input_language: str = "auto"
    default_output_language: str = "auto"


@dataclass
class UISettings:
    theme: str = "light"
    font_size: int = 14
    notifications: bool = True


@dataclass
class Settings:
    shortcut: ShortcutSettings = field(default_factory=ShortcutSettings)
    provider: ProviderSettings = field(default_factory=ProviderSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    privacy: PrivacySettings = field(default_factory=PrivacySettings)
    language: LanguageSettings = field(default_factory=LanguageSettings)
    ui: UISettings = field(default_factory=UISettings)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from a possibly partial document; gaps get defaults.

        Values are coerced to the field's type. Raises ``ValidationError`` for
        a value that cannot be coerced, a non-positive duration or size, or an
        unknown choice. Unknown groups and keys are ignored.
        """
        settings = cls()
        if not isinstance(data, dict):
            return settings
        for group_field in fields(cls):
            raw = data.get(group_field.name)
            if not isinstance(raw, dict):
                continue
            group = getattr(settings, group_field.name)
            for f in fields(group):
                if f.name in raw:
                    setattr(group, f.name, _coerce(group_field.name, f.name, f.type, raw[f.name]))
        return settings


def _coerce(group: str, name: str, kind: str, value: Any) -> Any:
    where = f"{group}.{name}"
    if kind == "bool":
        if not isinstance(value, bool):
            raise ValidationError(f"{where} must be true or false.")
        return value
    if kind in ("int", "float"):
        if isinstance(value, bool):
            raise ValidationError(f"{where} must be a number.")
        try:
            number = int(value) if kind == "int" else float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{where} must be a number.") from exc
        if (group, name) in _POSITIVE_FIELDS and number <= 0:
            raise ValidationError(f"{where} must be positive.")
        return number
    if kind == "list[str]":
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ValidationError(f"{where} must be a list of strings.")
        return list(value)
    if kind == "Optional[str]" and value in (None, ""):
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{where} must be a string.")
    choices = _CHOICES.get((group, name))
    if choices is not None and value not in choices:
        raise ValidationError(f"{where} must be one of: {', '.join(choices)}.")
    return value


class JsonSettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "cc_assistant" / "settings.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._data = self._read_all()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        with self._lock:
            return Settings.from_dict(copy.deepcopy(self._data))

    def save(self, partial: dict) -> Settings:
        """Merge ``partial`` one level deep, then rewrite the whole document.

        A group present in ``partial`` replaces the stored group; groups that
        are absent are kept as they are. The merged document is validated
        before anything is written, so a rejected update leaves the file and
        the in-memory copy untouched.
        """
        if not isinstance(partial, dict):
            raise ValidationError("Settings update must be a mapping of groups.")
        with self._lock:
            merged = {**self._data, **copy.deepcopy(partial)}
            settings = Settings.from_dict(merged)
            self._data = settings.to_dict()
            self._write_all(self._data)
            return Settings.from_dict(copy.deepcopy(self._data))

    def reset(self) -> Settings:
        with self._lock:
            self._data = Settings().to_dict()
            self._write_all(self._data)
            return Settings()

    def _read_all(self) -> dict:
        if not self._path.exists():
            return Settings().to_dict()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read settings from %s, using defaults: %s", self._path, exc)
            return Settings().to_dict()
        try:
            return Settings.from_dict(data).to_dict()
        except ValidationError as exc:
            logger.warning("Invalid settings in %s, using defaults: %s", self._path, exc)
            return Settings().to_dict()

    def _write_all(self, data: dict[str, Any]) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
