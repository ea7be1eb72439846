from __future__ import annotations

import pytest

from models import Language, TransformMode
from prompts import MODE_TEMPLATES, build_prompt


def test_every_mode_has_a_template() -> None:
    assert set(MODE_TEMPLATES) == set(TransformMode)


def test_translate_prompt_names_both_languages() -> None:
    system, user = build_prompt(TransformMode.TRANSLATE, Language.JAPANESE, Language.ENGLISH, "こんにちは")

    assert "translator" in system
    assert user == "Translate the following text from Japanese to English:\n\nこんにちは"


def test_polite_system_prompt_uses_output_language() -> None:
    system, _ = build_prompt(TransformMode.POLITE, Language.ENGLISH, Language.JAPANESE, "hey")
    assert "in Japanese" in system
    assert "{outputLanguage}" not in system


def test_placeholders_in_user_text_are_kept_verbatim() -> None:
    text = "format with {inputLanguage} and {outputLanguage}"
    _, user = build_prompt(TransformMode.REPHRASE, Language.ENGLISH, Language.JAPANESE, text)
    assert user.endswith(text)


def test_mode_given_as_string_is_accepted() -> None:
    system, _ = build_prompt("summarize", Language.ENGLISH, Language.JAPANESE, "text")  # type: ignore[arg-type]
    assert "3 key points" in system


def test_unknown_mode_rejected() -> None:
    with pytest.raises(ValueError):
        build_prompt("poetry", Language.ENGLISH, Language.JAPANESE, "text")  # type: ignore[arg-type]
