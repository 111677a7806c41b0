"""
Model backend protocol.

The conversation driver never talks to a vendor SDK directly; it depends on
this protocol so providers can be swapped without touching prompts, the tool
resolver or the driver.
"""

from typing import Protocol

from codesense.providers.models import Message


class ModelBackend(Protocol):
    """
    Generative model backend.

    Implementers provide:
    - is_configured(): whether a credential is available.
    - send(messages, tools_enabled): one round trip returning a model Message.
      Raises BackendUnavailableError or BackendEmptyResponseError.
    """

    def is_configured(self) -> bool:
        ...

    async def send(self, messages: list[Message], tools_enabled: bool) -> Message:
        ...
