"""
Registry of the translation providers we know about, and which of them can
actually be used by this process.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Settings


class ProviderId(Enum):
    """A translation backend (or the demo mode)"""

    GOOGLE = "google"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GROQ = "groq"
    MOCK = "mock"

    @classmethod
    def parse(cls, value: ProviderId | str | None) -> ProviderId | None:
        """
        Lenient conversion from user input: anything that isn't a known
        provider ID becomes None rather than an error.
        """

        if value is None or isinstance(value, ProviderId):
            return value

        if not isinstance(value, str):
            return None

        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    Static metadata of a provider. The `available` flag is only known once
    the settings have been read, see `ProviderRegistry.from_settings()`.
    """

    id: ProviderId
    display_name: str
    model_id: str
    description: str
    credential_env: str | None = None
    available: bool = False


PROVIDER_TABLE: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        id=ProviderId.GOOGLE,
        display_name="Google Gemini",
        model_id="gemini-1.5-flash",
        description="Google's latest AI with superior multilingual expertise",
        credential_env="GOOGLE_GENERATIVE_AI_API_KEY",
    ),
    ProviderDescriptor(
        id=ProviderId.OPENAI,
        display_name="OpenAI GPT-4",
        model_id="gpt-4o-mini",
        description="Advanced language model with excellent translation quality",
        credential_env="OPENAI_API_KEY",
    ),
    ProviderDescriptor(
        id=ProviderId.ANTHROPIC,
        display_name="Anthropic Claude",
        model_id="claude-3-haiku-20240307",
        description="Highly accurate translations with cultural context",
        credential_env="ANTHROPIC_API_KEY",
    ),
    ProviderDescriptor(
        id=ProviderId.GROQ,
        display_name="Groq Llama",
        model_id="llama-3.1-8b-instant",
        description="Ultra-fast inference with competitive quality",
        credential_env="GROQ_API_KEY",
    ),
    ProviderDescriptor(
        id=ProviderId.MOCK,
        display_name="Demo Mode",
        model_id="mock-translator",
        description="Demonstration translations for preview",
        available=True,
    ),
)

MOCK_DESCRIPTOR = PROVIDER_TABLE[-1]
FALLBACK_MOCK_NAME = f"{MOCK_DESCRIPTOR.display_name} (Fallback)"


@dataclass(frozen=True)
class ProviderRegistry:
    """
    The provider table with its availability flags resolved. Built once at
    startup and never changed afterwards.
    """

    providers: tuple[ProviderDescriptor, ...]
    preferred: ProviderId = ProviderId.GOOGLE

    @classmethod
    def from_settings(cls, settings: Settings) -> ProviderRegistry:
        """
        Resolves the availability of each provider from the credentials that
        were found in the settings. The demo mode is always available.
        """

        return cls(
            providers=tuple(
                replace(
                    p,
                    available=(
                        p.id is ProviderId.MOCK or settings.has_credential(p.id)
                    ),
                )
                for p in PROVIDER_TABLE
            ),
            preferred=settings.preferred_provider,
        )

    def descriptors(self) -> tuple[ProviderDescriptor, ...]:
        """All the providers, available or not, in table order"""

        return self.providers

    def get(self, provider: ProviderId | str | None) -> ProviderDescriptor | None:
        """Descriptor of a provider, None if the ID is unknown"""

        if (provider_id := ProviderId.parse(provider)) is None:
            return None

        for descriptor in self.providers:
            if descriptor.id is provider_id:
                return descriptor

        return None

    def is_available(self, provider: ProviderId | str | None) -> bool:
        """Unknown providers are simply not available"""

        descriptor = self.get(provider)
        return bool(descriptor and descriptor.available)

    def list_available(self) -> list[ProviderId]:
        """
        Available providers in the order in which they should be tried: the
        preferred one first, the demo mode last and the others in between,
        keeping their table order.
        """

        def rank(provider_id: ProviderId) -> int:
            if provider_id is ProviderId.MOCK:
                return 2
            if provider_id is self.preferred:
                return 0
            return 1

        available = [p.id for p in self.providers if p.available]

        # sorted() is stable, so equal ranks keep the table order
        return sorted(available, key=rank)
