"""
CodeSense Provider Layer.

Provides backend-agnostic conversation models and a LiteLLM-backed model
backend with:
- Role/part mapping onto the OpenAI chat format
- Tool declaration with per-call enable/disable
- A failure taxonomy consumed by the fallback policy
"""

from codesense.providers.base import ModelBackend
from codesense.providers.exceptions import (
    BackendEmptyResponseError,
    BackendUnavailableError,
    ConfigurationMissingError,
    ExchangeCancelledError,
    FailureType,
    ProviderError,
    classify_error,
)
from codesense.providers.manager import ProviderManager
from codesense.providers.mapping import from_backend_message, to_backend_messages
from codesense.providers.models import (
    FunctionCall,
    FunctionResult,
    Message,
    Part,
    Response,
    Role,
)

__all__ = [
    # Backend
    "ModelBackend",
    "ProviderManager",
    # Models
    "Role",
    "Part",
    "FunctionCall",
    "FunctionResult",
    "Message",
    "Response",
    # Mapping
    "to_backend_messages",
    "from_backend_message",
    # Exceptions
    "ProviderError",
    "ConfigurationMissingError",
    "BackendUnavailableError",
    "BackendEmptyResponseError",
    "ExchangeCancelledError",
    "FailureType",
    "classify_error",
]
