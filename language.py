"""Two-language detection by script ratio."""

from __future__ import annotations

import re

from models import Language

PRIMARY_LANGUAGE = Language.JAPANESE
SECONDARY_LANGUAGE = Language.ENGLISH
PRIMARY_RATIO_THRESHOLD = 0.3

# Hiragana, Katakana, CJK unified ideographs.
_PRIMARY_SCRIPT = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FFF]")

LANGUAGE_NAMES = {
    Language.AUTO: "Auto",
    Language.JAPANESE: "Japanese",
    Language.ENGLISH: "English",
}


def primary_script_ratio(text: str) -> float:
    if not text:
        return 0.0
    return len(_PRIMARY_SCRIPT.findall(text)) / len(text)


def detect_language(text: str) -> Language:
    if primary_script_ratio(text) > PRIMARY_RATIO_THRESHOLD:
        return PRIMARY_LANGUAGE
    return SECONDARY_LANGUAGE


def determine_output_language(input_language: Language, output_setting: Language) -> Language:
    if output_setting != Language.AUTO:
        return output_setting
    if input_language == PRIMARY_LANGUAGE:
        return SECONDARY_LANGUAGE
    return PRIMARY_LANGUAGE


def resolve_languages(
    text: str,
    input_setting: Language,
    output_setting: Language,
) -> tuple[Language, Language]:
    input_language = detect_language(text) if input_setting == Language.AUTO else input_setting
    return input_language, determine_output_language(input_language, output_setting)


def language_name(language: Language) -> str:
    return LANGUAGE_NAMES.get(language, "Unknown")
