"""Prompt construction for summary and chat exchanges."""

from codesense.prompts.builder import (
    CHAT_ACKNOWLEDGEMENT,
    build_chat_prompt,
    build_summary_prompt,
    chat_context,
    summary_context,
    turns_from_client_history,
)

__all__ = [
    "CHAT_ACKNOWLEDGEMENT",
    "build_chat_prompt",
    "build_summary_prompt",
    "chat_context",
    "summary_context",
    "turns_from_client_history",
]
