from typing import Optional


class CliTranslatorError(Exception):
    """Base class for all errors raised by the CLI translator."""


class ConfigError(CliTranslatorError):
    """A configuration value could not be parsed."""


class PrerequisiteMissing(CliTranslatorError):
    """A credential or external tool required before any API call is absent."""


class APIClientError(CliTranslatorError):
    """Base class for failures of a chat completion request."""


class TransportError(APIClientError):
    """The HTTP request could not complete or returned no usable body."""


class APIError(APIClientError):
    """The provider answered with an error object."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class EmptyResponseError(APIClientError):
    """The response parsed but carried no completion text."""

    def __init__(self, message: str = "Empty response"):
        super().__init__(message)


class EmptyCommandError(CliTranslatorError):
    """The runner was asked to execute an empty or whitespace-only command."""

    def __init__(self, message: str = "Empty command"):
        super().__init__(message)
