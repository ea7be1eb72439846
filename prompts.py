"""System instructions and user templates for each transform mode."""

from __future__ import annotations

from dataclasses import dataclass

from language import language_name
from models import Language, TransformMode


@dataclass(frozen=True)
class ModeTemplate:
    system_prompt: str
    user_template: str


_COMMON_RULES = (
    "- Do not add information not present in the original text\n"
    "- Do not add explanations or commentary\n"
)

MODE_TEMPLATES: dict[TransformMode, ModeTemplate] = {
    TransformMode.TRANSLATE: ModeTemplate(
        system_prompt=(
            "You are a professional translator. Follow these rules strictly:\n"
            "- Translate the text to the target language\n"
            "- Preserve all formatting, line breaks, and special characters\n"
            "- Keep proper nouns, numbers, and units unchanged\n"
            + _COMMON_RULES
            + "- Return only the translated text"
        ),
        user_template="Translate the following text from {inputLanguage} to {outputLanguage}:\n\n{inputText}",
    ),
    TransformMode.POLITE: ModeTemplate(
        system_prompt=(
            "You are an expert in business communication. Follow these rules strictly:\n"
            "- Convert casual language to polite business language in {outputLanguage}\n"
            "- Maintain the original meaning and intent\n"
            "- Preserve all formatting and line breaks\n"
            + _COMMON_RULES
            + "- Return only the converted text"
        ),
        user_template="Convert the following text to polite business language:\n\n{inputText}",
    ),
    TransformMode.REPHRASE: ModeTemplate(
        system_prompt=(
            "You are an expert in rephrasing. Follow these rules strictly:\n"
            "- Rephrase the text with different wording while keeping the exact meaning\n"
            "- Preserve all formatting and line breaks\n"
            + _COMMON_RULES
            + "- Return only the rephrased text"
        ),
        user_template="Rephrase the following text:\n\n{inputText}",
    ),
    TransformMode.SUMMARIZE: ModeTemplate(
        system_prompt=(
            "You are an expert summarizer. Follow these rules strictly:\n"
            "- Summarize the text into 3 key points\n"
            "- Format as a bullet list\n"
            "- Preserve key facts and numbers\n"
            + _COMMON_RULES
            + "- Return only the summary"
        ),
        user_template="Summarize the following text into 3 key points as a bullet list:\n\n{inputText}",
    ),
    TransformMode.PROOFREADING: ModeTemplate(
        system_prompt=(
            "You are an expert proofreader. Follow these rules strictly:\n"
            "- Fix spelling, grammar, and readability issues\n"
            "- Do not change the meaning or tone\n"
            "- Preserve all formatting and line breaks\n"
            + _COMMON_RULES
            + "- Return only the corrected text"
        ),
        user_template="Proofread and correct the following text:\n\n{inputText}",
    ),
    TransformMode.CODE_TECHNICAL: ModeTemplate(
        system_prompt=(
            "You are an expert in technical documentation. Follow these rules strictly:\n"
            "- Preserve all code blocks and syntax markers\n"
            "- Keep technical terms and variable names unchanged\n"
            "- Do not modify code\n"
            "- Preserve all formatting and line breaks\n"
            + _COMMON_RULES
            + "- Return only the processed text"
        ),
        user_template="Process the following technical content:\n\n{inputText}",
    ),
}


def _substitute(template: str, input_language: Language, output_language: Language, input_text: str) -> str:
    # inputText last so braces inside the user's text are left alone.
    return (
        template.replace("{inputLanguage}", language_name(input_language))
        .replace("{outputLanguage}", language_name(output_language))
        .replace("{inputText}", input_text)
    )


def build_prompt(
    mode: TransformMode,
    input_language: Language,
    output_language: Language,
    input_text: str,
) -> tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for ``mode``."""
    template = MODE_TEMPLATES.get(TransformMode(mode))
    if template is None:
        raise ValueError(f"Unknown mode: {mode}")
    system_prompt = _substitute(template.system_prompt, input_language, output_language, "")
    user_prompt = _substitute(template.user_template, input_language, output_language, input_text)
    return system_prompt, user_prompt
