"""
Settings of the process, read once at startup from the environment (and
optionally from the system keyring).
"""

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

import keyring
from keyring.errors import KeyringError

from .errors import ConfigurationError
from .providers import PROVIDER_TABLE, ProviderId

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_OUTPUT_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.3


@dataclass
class ApiKeyStore:
    """
    Utility class that serves to store API keys
    """

    namespace: str = "default"
    system: str = "linguabridge"

    def key(self, provider: str) -> str:
        """Generates the key name used for storage of this provider"""

        return f"{self.namespace}:{provider}"

    def get(self, provider: str) -> str | None:
        """Gets the API key for a provider, or None if it doesn't exist."""

        try:
            return keyring.get_password(self.system, self.key(provider))
        except KeyringError:
            logger.warning("Keyring unavailable, can't look up %s key", provider)
            return None

    def set(self, provider: str, value: str) -> None:
        """Sets the API key for a provider"""

        keyring.set_password(self.system, self.key(provider), value)


@dataclass(frozen=True)
class Settings:
    """
    Everything the dispatcher needs to know about its environment. Build it
    with `from_environment()` in the real world, or by hand in tests.
    """

    credentials: Mapping[ProviderId, str] = field(default_factory=dict)
    preferred_provider: ProviderId = ProviderId.GOOGLE
    timeout: float = DEFAULT_TIMEOUT
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    mock_latency: tuple[float, float] = (0.0, 0.0)

    def has_credential(self, provider: ProviderId) -> bool:
        """True if a non-blank credential is known for this provider"""

        return bool(self.credentials.get(provider, "").strip())

    def credential(self, provider: ProviderId) -> str:
        """The credential of a provider, which must exist"""

        if not self.has_credential(provider):
            msg = f"No credential configured for {provider.value!r}"
            raise ConfigurationError(msg)

        return self.credentials[provider].strip()

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        store: ApiKeyStore | None = None,
        mock_latency: tuple[float, float] = (0.0, 0.0),
    ) -> "Settings":
        """
        Reads the credentials from the environment variables of each
        provider. When a key store is given, it's used for the providers
        which have nothing in the environment.
        """

        if environ is None:
            environ = os.environ

        credentials: dict[ProviderId, str] = {}

        for descriptor in PROVIDER_TABLE:
            if not descriptor.credential_env:
                continue

            value = environ.get(descriptor.credential_env, "").strip()

            if not value and store is not None:
                value = (store.get(descriptor.id.value) or "").strip()

            if value:
                credentials[descriptor.id] = value

        logger.debug(
            "Credentials found for: %s",
            ", ".join(p.value for p in credentials) or "nobody",
        )

        return cls(
            credentials=credentials,
            preferred_provider=_parse_preferred(
                environ.get("LINGUABRIDGE_PREFERRED_PROVIDER", "")
            ),
            timeout=_parse_number(
                environ,
                "LINGUABRIDGE_TIMEOUT",
                float,
                DEFAULT_TIMEOUT,
                positive=True,
            ),
            max_output_tokens=_parse_number(
                environ,
                "LINGUABRIDGE_MAX_OUTPUT_TOKENS",
                int,
                DEFAULT_MAX_OUTPUT_TOKENS,
                positive=True,
            ),
            temperature=_parse_number(
                environ, "LINGUABRIDGE_TEMPERATURE", float, DEFAULT_TEMPERATURE
            ),
            mock_latency=mock_latency,
        )


def _parse_preferred(value: str) -> ProviderId:
    if not value.strip():
        return ProviderId.GOOGLE

    provider = ProviderId.parse(value)

    if provider is None or provider is ProviderId.MOCK:
        msg = f"{value!r} is not a provider that can be preferred."
        raise ConfigurationError(msg)

    return provider


def _parse_number(environ, name, kind, default, positive=False):
    if not (raw := environ.get(name, "").strip()):
        return default

    try:
        value = kind(raw)
    except ValueError as e:
        msg = f"{name} must be a number, got {raw!r}."
        raise ConfigurationError(msg) from e

    if not math.isfinite(value):
        msg = f"{name} must be a finite number, got {raw!r}."
        raise ConfigurationError(msg)

    if positive and value <= 0:
        msg = f"{name} must be greater than zero."
        raise ConfigurationError(msg)

    if value < 0:
        msg = f"{name} can't be negative."
        raise ConfigurationError(msg)

    return value
