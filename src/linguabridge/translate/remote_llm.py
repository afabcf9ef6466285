"""Backends that call hosted LLM APIs over HTTP."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt

from ..config import DEFAULT_TIMEOUT
from ..errors import BackendResponseError
from ..providers import ProviderId
from .base import Backend

if TYPE_CHECKING:
    from ..config import Settings


logger = logging.getLogger(__name__)

OPENAI_COMPATIBLE_URLS = {
    ProviderId.GOOGLE: "https://generativelanguage.googleapis.com/v1beta/openai",
    ProviderId.OPENAI: "https://api.openai.com/v1",
    ProviderId.GROQ: "https://api.groq.com/openai/v1",
}

ANTHROPIC_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"


def is_transient(exception: BaseException) -> bool:
    """Timeouts, rate limits and server errors deserve a second chance"""

    if isinstance(exception, httpx.TimeoutException):
        return True

    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        return status == 429 or status >= 500

    return False


@retry(
    retry=retry_if_exception(is_transient),
    stop=stop_after_attempt(2),
    reraise=True,
)
async def call_completion(
    url: str,
    headers: dict[str, str],
    body: dict,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """
    Posts a completion request and returns the decoded JSON answer. A client
    is created for the occasion unless one is given.
    """

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            return await _post(own_client, url, headers, body, timeout)

    return await _post(client, url, headers, body, timeout)


async def _post(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str],
    body: dict,
    timeout: float,
) -> dict:
    resp = await client.post(url, json=body, headers=headers, timeout=timeout)

    if 400 <= resp.status_code < 500:
        logger.warning("API Request Error: %s %s", resp.status_code, url)
        logger.debug(
            "API Request Error:\nRequest: %s\nResponse: %s",
            json.dumps(body, indent=2, ensure_ascii=False),
            resp.text,
        )

    resp.raise_for_status()

    try:
        return resp.json()
    except json.decoder.JSONDecodeError as e:
        msg = f"Response from {url} is not JSON"
        raise BackendResponseError(msg) from e


def decode_chat_completion(completion: dict) -> str:
    """Extracts the text of an OpenAI-style chat completion"""

    match completion:
        case {"choices": [{"message": {"content": str(content)}}, *_]} if (
            content.strip()
        ):
            return content

    msg = "Chat completion has no text content"
    raise BackendResponseError(msg)


def decode_anthropic_message(message: dict) -> str:
    """Concatenates the text blocks of an Anthropic message"""

    parts = []

    match message:
        case {"content": [*blocks]}:
            for block in blocks:
                match block:
                    case {"type": "text", "text": str(text)}:
                        parts.append(text)

    if not (text := "".join(parts)).strip():
        msg = "Anthropic message has no text content"
        raise BackendResponseError(msg)

    return text


@dataclass(kw_only=True)
class OpenAICompatibleBackend(Backend):
    """
    Anything that speaks the OpenAI chat completions dialect, which includes
    OpenAI itself, Google and Groq.
    """

    base_url: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT
    client: httpx.AsyncClient | None = None

    async def generate(
        self,
        model_id: str,
        system_instruction: str,
        user_prompt: str,
        max_output_tokens: int,
        temperature: float | None = None,
    ) -> str:
        """
        Calling a remote LLM through their Completion endpoint
        """

        body: dict = dict(
            model=model_id,
            messages=[
                dict(role="system", content=system_instruction),
                dict(role="user", content=user_prompt),
            ],
            max_tokens=max_output_tokens,
        )

        if temperature is not None:
            body["temperature"] = temperature

        start = time.perf_counter()
        completion = await call_completion(
            url=f"{self.base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            body=body,
            timeout=self.timeout,
            client=self.client,
        )
        duration = time.perf_counter() - start
        logger.info("Remote LLM completion (%s) took %.2fs", model_id, duration)

        return decode_chat_completion(completion)


@dataclass(kw_only=True)
class AnthropicBackend(Backend):
    """Anthropic's own Messages API"""

    api_key: str
    base_url: str = ANTHROPIC_URL
    timeout: float = DEFAULT_TIMEOUT
    client: httpx.AsyncClient | None = None

    async def generate(
        self,
        model_id: str,
        system_instruction: str,
        user_prompt: str,
        max_output_tokens: int,
        temperature: float | None = None,
    ) -> str:
        body: dict = dict(
            model=model_id,
            system=system_instruction,
            messages=[dict(role="user", content=user_prompt)],
            max_tokens=max_output_tokens,
        )

        if temperature is not None:
            body["temperature"] = temperature

        start = time.perf_counter()
        message = await call_completion(
            url=f"{self.base_url}/messages",
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            body=body,
            timeout=self.timeout,
            client=self.client,
        )
        duration = time.perf_counter() - start
        logger.info("Anthropic message (%s) took %.2fs", model_id, duration)

        return decode_anthropic_message(message)


def create_backends(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> dict[ProviderId, Backend]:
    """
    Instantiates a backend for each provider that has a credential. Providers
    without one are left out, the registry won't offer them anyway.
    """

    backends: dict[ProviderId, Backend] = {}

    for provider, base_url in OPENAI_COMPATIBLE_URLS.items():
        if settings.has_credential(provider):
            backends[provider] = OpenAICompatibleBackend(
                base_url=base_url,
                api_key=settings.credential(provider),
                timeout=settings.timeout,
                client=client,
            )

    if settings.has_credential(ProviderId.ANTHROPIC):
        backends[ProviderId.ANTHROPIC] = AnthropicBackend(
            api_key=settings.credential(ProviderId.ANTHROPIC),
            timeout=settings.timeout,
            client=client,
        )

    return backends
