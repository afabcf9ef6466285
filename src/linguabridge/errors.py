"""
Exceptions raised by LinguaBridge
"""


class LinguaBridgeError(Exception):
    """Base class for all the errors of this package"""


class ConfigurationError(LinguaBridgeError):
    """The settings read from the environment are not usable"""


class UnsupportedProviderError(LinguaBridgeError):
    """
    The registry says a provider is available but nothing knows how to call
    it. This is a programming error, not something to recover from.
    """


class BackendResponseError(LinguaBridgeError):
    """The backend answered with something we can't make sense of"""
