from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from linguabridge.cli import cli
from linguabridge.providers import PROVIDER_TABLE, ProviderId
from linguabridge.translate.base import TranslationResult


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for descriptor in PROVIDER_TABLE:
        if descriptor.credential_env:
            monkeypatch.delenv(descriptor.credential_env, raising=False)

    monkeypatch.delenv("LINGUABRIDGE_PREFERRED_PROVIDER", raising=False)

    with patch("linguabridge.config.keyring.get_password", return_value=None):
        yield


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "linguabridge version:" in result.output


def test_translate_in_demo_mode(runner):
    result = runner.invoke(cli, ["translate", "Hello", "--to", "es", "--no-delay"])

    assert result.exit_code == 0, result.output
    assert "hola" in result.output
    assert "Demo Mode" in result.output


def test_translate_json(runner):
    result = runner.invoke(
        cli, ["translate", "Thank you", "-s", "en", "-t", "fr", "--json", "--no-delay"]
    )

    assert result.exit_code == 0, result.output
    assert '"translation": "merci"' in result.output
    assert '"fallback": false' in result.output


def test_translate_rejects_empty_text(runner):
    result = runner.invoke(cli, ["translate", "   ", "--no-delay"])

    assert result.exit_code == 1
    assert "Please enter some text" in result.output


def test_translate_rejects_same_language(runner):
    result = runner.invoke(
        cli, ["translate", "Hello", "--from", "en", "--to", "en", "--no-delay"]
    )

    assert result.exit_code == 1
    assert "must be different" in result.output


def test_translate_passes_requested_provider(runner, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "key")

    with patch(
        "linguabridge.cli.Dispatcher.translate",
        new_callable=AsyncMock,
        return_value=TranslationResult(
            translated_text="Hallo Welt",
            provider_name="OpenAI GPT-4",
            model_id="gpt-4o-mini",
            provider=ProviderId.OPENAI,
        ),
    ) as mock_translate:
        result = runner.invoke(
            cli, ["translate", "Hello world", "-t", "de", "-p", "openai"]
        )

    assert result.exit_code == 0, result.output
    mock_translate.assert_awaited_once_with("Hello world", "en", "de", "openai")
    assert "Hallo Welt" in result.output
    assert "OpenAI GPT-4" in result.output


def test_bad_configuration_is_reported(runner, monkeypatch):
    monkeypatch.setenv("LINGUABRIDGE_PREFERRED_PROVIDER", "nobody")

    result = runner.invoke(cli, ["translate", "Hello", "--no-delay"])

    assert result.exit_code == 1
    assert "nobody" in result.output


def test_providers_lists_everything(runner, monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "key")

    result = runner.invoke(cli, ["providers"])

    assert result.exit_code == 0, result.output

    for descriptor in PROVIDER_TABLE:
        assert descriptor.id.value in result.output

    # Available ones come first
    assert result.output.index("groq") < result.output.index("google")


def test_set_token(runner):
    with patch("linguabridge.config.keyring.set_password") as set_password:
        result = runner.invoke(
            cli, ["--namespace", "work", "set-token", "anthropic", "-k", "secret"]
        )

    assert result.exit_code == 0, result.output
    set_password.assert_called_once_with("linguabridge", "work:anthropic", "secret")


def test_namespace_cannot_contain_colon(runner):
    result = runner.invoke(cli, ["--namespace", "a:b", "providers"])

    assert result.exit_code == 2
