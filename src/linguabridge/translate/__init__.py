"""
Translation module: interfaces and implementations
"""

from .base import Backend, TranslationRequest, TranslationResult
from .dispatcher import Dispatcher
from .mock import MockTranslator, mock_translation
from .remote_llm import AnthropicBackend, OpenAICompatibleBackend

__all__ = [
    "AnthropicBackend",
    "Backend",
    "Dispatcher",
    "MockTranslator",
    "OpenAICompatibleBackend",
    "TranslationRequest",
    "TranslationResult",
    "mock_translation",
]
