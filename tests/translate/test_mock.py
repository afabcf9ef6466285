import pytest

from linguabridge.translate.mock import (
    MOCK_PHRASES,
    MOCK_TEMPLATES,
    MockTranslator,
    mock_translation,
)


def test_exact_phrase():
    assert mock_translation("Hello", "es") == "hola"
    assert mock_translation("  THANK YOU  ", "de") == "danke"


def test_phrase_inside_text():
    assert mock_translation("Well, hello there", "es") == "hola"


def test_first_phrase_of_the_table_wins():
    # Both "hello" and "thank you" appear, "hello" comes first in the table
    assert list(MOCK_PHRASES).index("hello") < list(MOCK_PHRASES).index("thank you")
    assert mock_translation("Thank you and hello", "fr") == "bonjour"


def test_unknown_text_uses_language_template():
    result = mock_translation("Supercalifragilistic", "fr")

    assert "Supercalifragilistic" in result
    assert "démonstration" in result
    assert result == MOCK_TEMPLATES["fr"].format(text="Supercalifragilistic")


def test_phrase_without_translation_for_language_uses_template():
    # No canned translations towards English
    assert mock_translation("hello", "en") == 'Mock translation: "hello" (Demo mode)'


def test_unknown_language_uses_default_template():
    assert (
        mock_translation("Hello", "sv") == 'Mock translation: "Hello" (Demo mode)'
    )
    assert mock_translation("Good morning", "xx").startswith("Mock translation")


def test_template_keeps_original_text():
    assert mock_translation("  Some Text ", "de") == (
        'Simulierte Übersetzung: "  Some Text " (Demo-Modus)'
    )


def test_same_input_same_output():
    assert mock_translation("I love you!", "ko") == mock_translation("I love you!", "ko")
    assert mock_translation("I love you!", "ko") == "사랑해"


@pytest.mark.asyncio
async def test_mock_translator_without_latency(monkeypatch):
    async def fail_sleep(delay):
        raise AssertionError("should not sleep")

    monkeypatch.setattr("linguabridge.translate.mock.asyncio.sleep", fail_sleep)

    translator = MockTranslator()

    assert await translator.translate("How are you", "it") == "come stai?"


@pytest.mark.asyncio
async def test_mock_translator_latency(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr("linguabridge.translate.mock.asyncio.sleep", fake_sleep)

    translator = MockTranslator(latency=(0.8, 2.0))

    assert await translator.translate("hello", "zh") == "你好"
    assert len(delays) == 1
    assert 0.8 <= delays[0] <= 2.0
