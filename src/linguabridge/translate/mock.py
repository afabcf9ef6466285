"""
Mock translator
"""

import asyncio
import logging
import random
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Order matters: when the text contains several of those phrases, the first
# one of this table wins.
MOCK_PHRASES: dict[str, dict[str, str]] = {
    "hello": {
        "es": "hola",
        "fr": "bonjour",
        "de": "hallo",
        "it": "ciao",
        "pt": "olá",
        "ru": "привет",
        "ja": "こんにちは",
        "ko": "안녕하세요",
        "zh": "你好",
        "ar": "مرحبا",
        "hi": "नमस्ते",
    },
    "how are you": {
        "es": "¿cómo estás?",
        "fr": "comment allez-vous?",
        "de": "wie geht es dir?",
        "it": "come stai?",
        "pt": "como você está?",
        "ru": "как дела?",
        "ja": "元気ですか？",
        "ko": "어떻게 지내세요?",
        "zh": "你好吗？",
        "ar": "كيف حالك؟",
        "hi": "आप कैसे हैं?",
    },
    "thank you": {
        "es": "gracias",
        "fr": "merci",
        "de": "danke",
        "it": "grazie",
        "pt": "obrigado",
        "ru": "спасибо",
        "ja": "ありがとう",
        "ko": "감사합니다",
        "zh": "谢谢",
        "ar": "شكرا",
        "hi": "धन्यवाद",
    },
    "good morning": {
        "es": "buenos días",
        "fr": "bonjour",
        "de": "guten Morgen",
        "it": "buongiorno",
        "pt": "bom dia",
        "ru": "доброе утро",
        "ja": "おはよう",
        "ko": "좋은 아침",
        "zh": "早上好",
        "ar": "صباح الخير",
        "hi": "सुप्रभात",
    },
    "i love you": {
        "es": "te amo",
        "fr": "je t'aime",
        "de": "ich liebe dich",
        "it": "ti amo",
        "pt": "eu te amo",
        "ru": "я тебя люблю",
        "ja": "愛してる",
        "ko": "사랑해",
        "zh": "我爱你",
        "ar": "أحبك",
        "hi": "मैं तुमसे प्यार करता हूँ",
    },
    "what is your name": {
        "es": "¿cuál es tu nombre?",
        "fr": "quel est votre nom?",
        "de": "wie heißt du?",
        "it": "come ti chiami?",
        "pt": "qual é o seu nome?",
        "ru": "как тебя зовут?",
        "ja": "お名前は何ですか？",
        "ko": "이름이 뭐예요?",
        "zh": "你叫什么名字？",
        "ar": "ما اسمك؟",
        "hi": "आपका नाम क्या है?",
    },
    "where are you from": {
        "es": "¿de dónde eres?",
        "fr": "d'où venez-vous?",
        "de": "woher kommst du?",
        "it": "di dove sei?",
        "pt": "de onde você é?",
        "ru": "откуда ты?",
        "ja": "どちらの出身ですか？",
        "ko": "어디서 왔어요?",
        "zh": "你来自哪里？",
        "ar": "من أين أنت؟",
        "hi": "आप कहाँ से हैं?",
    },
}

MOCK_TEMPLATES: dict[str, str] = {
    "es": 'Traducción simulada: "{text}" (Modo demostración)',
    "fr": 'Traduction simulée: "{text}" (Mode démonstration)',
    "de": 'Simulierte Übersetzung: "{text}" (Demo-Modus)',
    "it": 'Traduzione simulata: "{text}" (Modalità demo)',
    "pt": 'Tradução simulada: "{text}" (Modo demonstração)',
    "ru": 'Имитация перевода: "{text}" (Демо-режим)',
    "ja": '模擬翻訳: "{text}" (デモモード)',
    "ko": '모의 번역: "{text}" (데모 모드)',
    "zh": '模拟翻译: "{text}" (演示模式)',
    "ar": 'ترجمة محاكاة: "{text}" (وضع العرض)',
    "hi": 'नकली अनुवाद: "{text}" (डेमो मोड)',
    "en": 'Mock translation: "{text}" (Demo mode)',
}

DEFAULT_MOCK_TEMPLATE = MOCK_TEMPLATES["en"]


def mock_translation(text: str, target_lang: str) -> str:
    """
    Pretends to translate. Known phrases get a canned translation, either
    when the text is exactly that phrase or when it contains it. Everything
    else gets a placeholder saying that this is the demo mode.

    Parameters
    ----------
    text
        The text to "translate"
    target_lang
        Code of the target language
    """

    normalized = text.strip().lower()

    if (
        translation := MOCK_PHRASES.get(normalized, {}).get(target_lang)
    ) is not None:
        return translation

    for phrase, translations in MOCK_PHRASES.items():
        if phrase in normalized and target_lang in translations:
            return translations[target_lang]

    template = MOCK_TEMPLATES.get(target_lang, DEFAULT_MOCK_TEMPLATE)
    return template.format(text=text)


@dataclass
class MockTranslator:
    """
    Offline translator used for the demo mode and as the last resort when
    every real provider failed. It never fails.

    The `latency` range (in seconds) is there to make it feel like a real
    API call, set it to zero to answer right away.
    """

    latency: tuple[float, float] = (0.0, 0.0)

    async def translate(self, text: str, target_lang: str) -> str:
        """Mock translation, after a random pause"""

        low, high = self.latency

        if high > 0:
            await asyncio.sleep(random.uniform(low, high))  # noqa: S311

        logger.debug("Mock translation to %s", target_lang)

        return mock_translation(text, target_lang)
