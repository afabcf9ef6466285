"""
Base interface for translation backends, and the data that flows through
the dispatcher
"""

import abc
from dataclasses import dataclass

from ..languages import language_name
from ..providers import ProviderId


@dataclass(frozen=True)
class TranslationRequest:
    """
    One translation asked by the user. The text is expected to be non-empty
    and the languages different, it's up to the caller to check that.
    """

    text: str
    source_lang: str
    target_lang: str
    requested_provider: ProviderId | str | None = None


@dataclass(frozen=True)
class TranslationResult:
    """
    What came out of the translation. `provider_name` and `model_id` always
    describe the provider that actually produced the text, which might not
    be the one that was requested.
    """

    translated_text: str
    provider_name: str
    model_id: str
    provider: ProviderId
    fallback: bool = False


class Backend(abc.ABC):
    """
    Implement this interface to plug a hosted model API into the dispatcher
    """

    @abc.abstractmethod
    async def generate(
        self,
        model_id: str,
        system_instruction: str,
        user_prompt: str,
        max_output_tokens: int,
        temperature: float | None = None,
    ) -> str:
        """
        Runs the prompt against the model and returns the produced text. Any
        failure (network, auth, quota, weird payload) must raise.
        """


def build_system_prompt(source_lang: str, target_lang: str) -> str:
    """
    The fixed translation rules given to the model. Only the language names
    change from one call to the other.
    """

    source = language_name(source_lang)
    target = language_name(target_lang)

    return (
        "You are a professional translator specializing in accurate, "
        "contextual translations. Translate the given text from "
        f"{source} to {target}.\n"
        "\n"
        "Rules:\n"
        "- Provide only the translation, no explanations or additional text\n"
        "- Maintain the original tone, style, and formality level\n"
        "- Preserve formatting like line breaks and punctuation\n"
        "- Keep proper nouns, brand names, and technical terms appropriate "
        "for the target language\n"
        "- Consider cultural context and idiomatic expressions\n"
        "- If the source text is already in the target language, provide the "
        "same text but mention it's already in the correct language"
    )


def build_user_prompt(text: str, source_lang: str, target_lang: str) -> str:
    """Wraps the user's text into the request sent along the rules"""

    source = language_name(source_lang)
    target = language_name(target_lang)

    return f"Translate this text from {source} to {target}:\n\n{text}"
