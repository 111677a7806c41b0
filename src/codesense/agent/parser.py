"""Extraction of tool calls and answer text from model messages."""

from codesense.providers.models import Message, Part


class ToolCallParser:
    """Reads the parts of a model message."""

    @staticmethod
    def parse_tool_calls(message: Message) -> list[Part]:
        """Return the tool_call parts of a message, in order."""
        return message.tool_calls

    @staticmethod
    def has_tool_calls(message: Message) -> bool:
        """Check if the message requests at least one tool call."""
        return any(part.tool_call is not None for part in message.parts)

    @staticmethod
    def extract_text_content(message: Message) -> str:
        """Concatenate text parts and trim surrounding whitespace.

        Empty parts contribute nothing.
        """
        return "".join(part.text for part in message.parts if part.text).strip()
