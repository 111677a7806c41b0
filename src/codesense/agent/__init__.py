"""Conversation driving for CodeSense.

This module provides the exchange state machine:
- Send the opening conversation with tool calling enabled
- Resolve at most one round of file content requests
- Re-send with tool calling disabled for the final answer
- Map failures to deterministic fallback responses
"""

from codesense.agent.driver import ConversationDriver
from codesense.agent.fallback import (
    cancelled_response,
    chat_failure_response,
    configuration_missing_response,
    fallback_summary,
    summary_failure_response,
)
from codesense.agent.models import DriverConfig, DriverState, ExchangeResult
from codesense.agent.parser import ToolCallParser

__all__ = [
    "ConversationDriver",
    "DriverConfig",
    "DriverState",
    "ExchangeResult",
    "ToolCallParser",
    "cancelled_response",
    "chat_failure_response",
    "configuration_missing_response",
    "fallback_summary",
    "summary_failure_response",
]
