"""
Provider manager for CodeSense.

Model backend implementation on top of LiteLLM.
Handles credential resolution, tool declaration and response parsing.
"""

import logging
import os
from typing import Any

import litellm
from litellm import acompletion

from codesense.config.schema import ProviderConfig
from codesense.providers.exceptions import (
    BackendEmptyResponseError,
    BackendUnavailableError,
    ConfigurationMissingError,
    classify_error,
)
from codesense.providers.mapping import from_backend_message, to_backend_messages
from codesense.providers.models import Message, Role

logger = logging.getLogger(__name__)

# Configure LiteLLM defaults
litellm.drop_params = True  # Drop unsupported params per-provider


class ProviderManager:
    """
    Sends conversations to a model via LiteLLM.

    Implements the ModelBackend protocol used by the conversation driver.
    """

    def __init__(
        self,
        config: ProviderConfig,
        tools: list[dict[str, Any]] | None = None,
    ):
        """
        Initialize the provider manager.

        Args:
            config: Provider configuration.
            tools: Tool definitions (OpenAI function format) offered to the model.
        """
        self.config = config
        self.tools = tools or []

    def _resolve_api_key(self) -> str | None:
        """Return the configured credential, falling back to the environment."""
        if self.config.api_key:
            return self.config.api_key
        return os.environ.get(self.config.api_key_env) or None

    def _extract_provider(self) -> str:
        """Extract provider name from model string."""
        if "/" in self.config.model:
            return self.config.model.split("/")[0]
        return "unknown"

    def is_configured(self) -> bool:
        """Whether a credential for the model backend is available."""
        return self._resolve_api_key() is not None

    def _build_request(self, messages: list[Message], tools_enabled: bool) -> dict[str, Any]:
        request_kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": to_backend_messages(messages),
            "temperature": self.config.temperature,
            "top_p": self.config.top_p,
            "top_k": self.config.top_k,
            "max_tokens": self.config.max_tokens,
            "timeout": self.config.timeout,
            "api_key": self._resolve_api_key(),
            **self.config.extra_params,
        }

        if self.tools:
            if tools_enabled:
                request_kwargs["tools"] = self.tools
                request_kwargs["tool_choice"] = "auto"
            elif any(message.role == Role.TOOL for message in messages):
                # Tool traffic in the history needs the declarations to stay valid
                request_kwargs["tools"] = self.tools
                request_kwargs["tool_choice"] = "none"

        return request_kwargs

    async def send(self, messages: list[Message], tools_enabled: bool) -> Message:
        """
        Send one completion request.

        Args:
            messages: Conversation so far.
            tools_enabled: Whether the model may request tool calls.

        Returns:
            The model's reply as a Message.

        Raises:
            ConfigurationMissingError: If no credential is configured.
            BackendUnavailableError: If the call fails.
            BackendEmptyResponseError: If the reply holds no usable content.
        """
        provider = self._extract_provider()
        if not self.is_configured():
            raise ConfigurationMissingError("Model API key not configured.", provider)

        request_kwargs = self._build_request(messages, tools_enabled)
        logger.info(
            f"Completing with model: {self.config.model} "
            f"(messages={len(messages)}, tools={'on' if tools_enabled else 'off'})"
        )

        try:
            response = await acompletion(**request_kwargs)
        except Exception as e:
            failure_type = classify_error(e)
            logger.error(f"Model call failed with {failure_type.value}: {e}")
            raise BackendUnavailableError(str(e), provider, failure_type) from e

        return self._parse_response(response, provider)

    def _parse_response(self, response: Any, provider: str) -> Message:
        """Parse LiteLLM response into a model Message."""
        choices = getattr(response, "choices", None) or []
        if not choices or getattr(choices[0], "message", None) is None:
            raise BackendEmptyResponseError("No valid response from the model.", provider)

        message = from_backend_message(choices[0].message)
        if not message.parts:
            raise BackendEmptyResponseError("The model returned no content.", provider)

        logger.debug(
            f"Model replied with {len(message.parts)} part(s), "
            f"finish_reason={getattr(choices[0], 'finish_reason', None)}"
        )
        return message

