from unittest.mock import MagicMock, patch

import pytest
from keyring.errors import NoKeyringError

from linguabridge.config import ApiKeyStore, Settings
from linguabridge.errors import ConfigurationError
from linguabridge.providers import ProviderId


def test_credentials_from_environment():
    settings = Settings.from_environment(
        {
            "GOOGLE_GENERATIVE_AI_API_KEY": "g-key",
            "OPENAI_API_KEY": "   ",
            "GROQ_API_KEY": " groq-key ",
        }
    )

    assert settings.has_credential(ProviderId.GOOGLE)
    assert not settings.has_credential(ProviderId.OPENAI)
    assert not settings.has_credential(ProviderId.ANTHROPIC)
    assert settings.credential(ProviderId.GROQ) == "groq-key"


def test_defaults():
    settings = Settings.from_environment({})

    assert settings.credentials == {}
    assert settings.preferred_provider is ProviderId.GOOGLE
    assert settings.timeout == 10.0
    assert settings.max_output_tokens == 2000
    assert settings.temperature == 0.3
    assert settings.mock_latency == (0.0, 0.0)


def test_missing_credential_raises():
    with pytest.raises(ConfigurationError):
        Settings().credential(ProviderId.OPENAI)


def test_key_store_fills_the_gaps():
    store = MagicMock(spec=ApiKeyStore)
    store.get.side_effect = lambda provider: {
        "anthropic": "from-keyring",
        "google": "ignored",
    }.get(provider)

    settings = Settings.from_environment(
        {"GOOGLE_GENERATIVE_AI_API_KEY": "from-env"}, store=store
    )

    assert settings.credential(ProviderId.GOOGLE) == "from-env"
    assert settings.credential(ProviderId.ANTHROPIC) == "from-keyring"
    assert not settings.has_credential(ProviderId.GROQ)


def test_tuning_from_environment():
    settings = Settings.from_environment(
        {
            "LINGUABRIDGE_PREFERRED_PROVIDER": "Anthropic",
            "LINGUABRIDGE_TIMEOUT": "4.5",
            "LINGUABRIDGE_MAX_OUTPUT_TOKENS": "512",
            "LINGUABRIDGE_TEMPERATURE": "0",
        }
    )

    assert settings.preferred_provider is ProviderId.ANTHROPIC
    assert settings.timeout == 4.5
    assert settings.max_output_tokens == 512
    assert settings.temperature == 0.0


@pytest.mark.parametrize(
    "environ",
    [
        {"LINGUABRIDGE_PREFERRED_PROVIDER": "mock"},
        {"LINGUABRIDGE_PREFERRED_PROVIDER": "deepl"},
        {"LINGUABRIDGE_TIMEOUT": "soon"},
        {"LINGUABRIDGE_MAX_OUTPUT_TOKENS": "1.5"},
        {"LINGUABRIDGE_TEMPERATURE": "-1"},
        {"LINGUABRIDGE_TEMPERATURE": "nan"},
        {"LINGUABRIDGE_TEMPERATURE": "inf"},
        {"LINGUABRIDGE_TIMEOUT": "0"},
        {"LINGUABRIDGE_TIMEOUT": "-inf"},
        {"LINGUABRIDGE_MAX_OUTPUT_TOKENS": "0"},
    ],
)
def test_invalid_settings(environ):
    with pytest.raises(ConfigurationError):
        Settings.from_environment(environ)


def test_api_key_store():
    store = ApiKeyStore("work")

    with patch("linguabridge.config.keyring") as mock_keyring:
        mock_keyring.get_password.return_value = "secret"

        assert store.get("groq") == "secret"
        mock_keyring.get_password.assert_called_once_with("linguabridge", "work:groq")

        store.set("groq", "other")
        mock_keyring.set_password.assert_called_once_with(
            "linguabridge", "work:groq", "other"
        )


def test_api_key_store_without_keyring():
    with patch(
        "linguabridge.config.keyring.get_password",
        side_effect=NoKeyringError("no backend"),
    ):
        assert ApiKeyStore().get("openai") is None
