"""
Provider exceptions for CodeSense.

Defines the failure taxonomy of an exchange with the model backend.
"""

from enum import Enum


class FailureType(Enum):
    """Classification of backend failures for fallback decisions."""

    CONFIGURATION_MISSING = "configuration_missing"
    AUTH_ERROR = "auth_error"
    RATE_LIMIT = "rate_limit"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    INVALID_REQUEST = "invalid_request"
    EMPTY_RESPONSE = "empty_response"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class ProviderError(Exception):
    """Base exception for provider errors."""

    failure_type = FailureType.UNKNOWN

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.message = message
        self.provider = provider


class ConfigurationMissingError(ProviderError):
    """No credential configured for the model backend."""

    failure_type = FailureType.CONFIGURATION_MISSING


class BackendUnavailableError(ProviderError):
    """Network failure, timeout or non-success status from the backend."""

    failure_type = FailureType.NETWORK_ERROR

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        failure_type: FailureType | None = None,
    ):
        super().__init__(message, provider)
        if failure_type is not None:
            self.failure_type = failure_type


class BackendEmptyResponseError(ProviderError):
    """Backend call succeeded but produced no usable content."""

    failure_type = FailureType.EMPTY_RESPONSE


class ExchangeCancelledError(ProviderError):
    """The invoking context cancelled the exchange before it completed."""

    failure_type = FailureType.CANCELLED


def classify_error(error: Exception) -> FailureType:
    """
    Classify an exception into a failure type.

    Args:
        error: The exception to classify.

    Returns:
        The failure type classification.
    """
    if isinstance(error, ProviderError):
        return error.failure_type

    if isinstance(error, TimeoutError):
        return FailureType.TIMEOUT

    # Import LiteLLM exceptions here to keep the models importable without it
    from litellm.exceptions import (
        APIConnectionError,
        APIError,
        AuthenticationError as LiteLLMAuthError,
        BadRequestError,
        RateLimitError as LiteLLMRateLimitError,
        ServiceUnavailableError,
        Timeout,
    )

    if isinstance(error, LiteLLMRateLimitError):
        return FailureType.RATE_LIMIT
    elif isinstance(error, LiteLLMAuthError):
        return FailureType.AUTH_ERROR
    elif isinstance(error, Timeout):
        return FailureType.TIMEOUT
    elif isinstance(error, (APIConnectionError, ServiceUnavailableError)):
        return FailureType.NETWORK_ERROR
    elif isinstance(error, BadRequestError):
        return FailureType.INVALID_REQUEST
    elif isinstance(error, APIError):
        status = getattr(error, "status_code", None)
        if status and 500 <= status < 600:
            return FailureType.SERVER_ERROR
        elif status and 400 <= status < 500:
            return FailureType.INVALID_REQUEST
        return FailureType.UNKNOWN

    return FailureType.UNKNOWN
