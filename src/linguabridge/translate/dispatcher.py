"""
Picks a provider for each translation, and falls back onto the other
providers (and ultimately the demo mode) when it fails.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import UnsupportedProviderError
from ..providers import (
    FALLBACK_MOCK_NAME,
    MOCK_DESCRIPTOR,
    ProviderId,
    ProviderRegistry,
)
from .base import (
    Backend,
    TranslationRequest,
    TranslationResult,
    build_system_prompt,
    build_user_prompt,
)
from .mock import MockTranslator
from .remote_llm import create_backends

if TYPE_CHECKING:
    import httpx

    from ..config import Settings


logger = logging.getLogger(__name__)


@dataclass
class Dispatcher:
    """
    Entry point of the translation. It never fails on a well-formed request:
    if no hosted provider manages to answer, the demo mode does.
    """

    registry: ProviderRegistry
    backends: dict[ProviderId, Backend] = field(default_factory=dict)
    mock: MockTranslator = field(default_factory=MockTranslator)
    max_output_tokens: int = 2000
    temperature: float | None = 0.3

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
    ) -> Dispatcher:
        """Wires the registry, the backends and the mock from the settings"""

        return cls(
            registry=ProviderRegistry.from_settings(settings),
            backends=create_backends(settings, client=client),
            mock=MockTranslator(latency=settings.mock_latency),
            max_output_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
        )

    def list_available_providers(self) -> list[ProviderId]:
        """Providers that can be offered to the user, in preference order"""

        return self.registry.list_available()

    def select_provider(
        self, requested: ProviderId | str | None = None
    ) -> ProviderId:
        """
        The requested provider if it can be used, otherwise the first
        available one. Unknown IDs are treated as unavailable.
        """

        if (provider := ProviderId.parse(requested)) and self.registry.is_available(
            provider
        ):
            return provider

        if requested is not None:
            logger.info("Provider %r is not available, picking another", requested)

        available = self.registry.list_available()
        return available[0] if available else ProviderId.MOCK

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        requested_provider: ProviderId | str | None = None,
    ) -> TranslationResult:
        """Shortcut for `dispatch()` with loose arguments"""

        return await self.dispatch(
            TranslationRequest(
                text=text,
                source_lang=source_lang,
                target_lang=target_lang,
                requested_provider=requested_provider,
            )
        )

    async def dispatch(self, request: TranslationRequest) -> TranslationResult:
        """
        Tries the selected provider, then each remaining available provider
        once, in registry order. Every failure removes a provider from the
        candidates, so there are at most as many attempts as there are
        hosted providers.
        """

        provider = self.select_provider(request.requested_provider)

        if provider is ProviderId.MOCK:
            return await self._mock_result(request, fallback=False)

        failed: set[ProviderId] = set()
        system_prompt = build_system_prompt(request.source_lang, request.target_lang)
        user_prompt = build_user_prompt(
            request.text, request.source_lang, request.target_lang
        )

        while True:
            try:
                return await self._invoke(provider, system_prompt, user_prompt)
            except UnsupportedProviderError:
                raise
            except Exception as e:
                logger.warning("Translation error with %s: %s", provider.value, e)
                logger.debug("Failure details for %s", provider.value, exc_info=True)
                failed.add(provider)

            candidates = [
                p
                for p in self.registry.list_available()
                if p not in failed and p is not ProviderId.MOCK
            ]

            if not candidates:
                logger.warning("All providers failed, using the demo mode")
                return await self._mock_result(request, fallback=True)

            provider = candidates[0]
            logger.info("Trying fallback provider: %s", provider.value)

    async def _invoke(
        self,
        provider: ProviderId,
        system_prompt: str,
        user_prompt: str,
    ) -> TranslationResult:
        descriptor = self.registry.get(provider)
        backend = self.backends.get(provider)

        if descriptor is None or backend is None:
            msg = f"Unsupported provider: {provider.value}"
            raise UnsupportedProviderError(msg)

        start = time.perf_counter()
        text = await backend.generate(
            model_id=descriptor.model_id,
            system_instruction=system_prompt,
            user_prompt=user_prompt,
            max_output_tokens=self.max_output_tokens,
            temperature=self.temperature,
        )
        logger.info(
            "Translated with %s in %.2fs", provider.value, time.perf_counter() - start
        )

        return TranslationResult(
            translated_text=text,
            provider_name=descriptor.display_name,
            model_id=descriptor.model_id,
            provider=provider,
        )

    async def _mock_result(
        self, request: TranslationRequest, fallback: bool
    ) -> TranslationResult:
        descriptor = self.registry.get(ProviderId.MOCK) or MOCK_DESCRIPTOR

        return TranslationResult(
            translated_text=await self.mock.translate(
                request.text, request.target_lang
            ),
            provider_name=FALLBACK_MOCK_NAME if fallback else descriptor.display_name,
            model_id=descriptor.model_id,
            provider=ProviderId.MOCK,
            fallback=fallback,
        )
