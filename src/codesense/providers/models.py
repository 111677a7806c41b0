"""
Conversation data models for CodeSense.

Defines the backend-agnostic message vocabulary shared by the prompt
builder, the tool resolver and the conversation driver. Provider adapters
translate these types to and from their own wire formats.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Valid message roles."""

    REQUESTER = "requester"
    MODEL = "model"
    TOOL = "tool"


@dataclass(frozen=True)
class FunctionCall:
    """A tool invocation requested by the model."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    call_id: str | None = None  # Backend correlation id, opaque to the core


@dataclass(frozen=True)
class FunctionResult:
    """Data supplied back to the model for a tool."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Part:
    """
    One segment of a message.

    Exactly one of ``text``, ``tool_call`` or ``tool_result`` is populated.
    """

    text: str | None = None
    tool_call: FunctionCall | None = None
    tool_result: FunctionResult | None = None

    def __post_init__(self) -> None:
        populated = sum(
            value is not None for value in (self.text, self.tool_call, self.tool_result)
        )
        if populated != 1:
            raise ValueError(f"Part must populate exactly one field, got {populated}")

    @classmethod
    def from_text(cls, text: str) -> "Part":
        """Create a text part."""
        return cls(text=text)

    @classmethod
    def from_tool_call(
        cls,
        name: str,
        arguments: dict[str, Any] | None = None,
        call_id: str | None = None,
    ) -> "Part":
        """Create a tool_call part."""
        return cls(tool_call=FunctionCall(name=name, arguments=arguments or {}, call_id=call_id))

    @classmethod
    def from_tool_result(cls, name: str, payload: dict[str, Any]) -> "Part":
        """Create a tool_result part."""
        return cls(tool_result=FunctionResult(name=name, payload=payload))


@dataclass(frozen=True)
class Message:
    """Conversation message."""

    role: Role
    parts: tuple[Part, ...] = ()

    @classmethod
    def requester(cls, text: str) -> "Message":
        """Create a requester message holding a single text part."""
        return cls(role=Role.REQUESTER, parts=(Part.from_text(text),))

    @classmethod
    def model(cls, text: str) -> "Message":
        """Create a model message holding a single text part."""
        return cls(role=Role.MODEL, parts=(Part.from_text(text),))

    @classmethod
    def tool(cls, *parts: Part) -> "Message":
        """Create a tool message from tool_result parts."""
        return cls(role=Role.TOOL, parts=tuple(parts))

    @property
    def tool_calls(self) -> list[Part]:
        """Parts carrying a tool_call."""
        return [part for part in self.parts if part.tool_call is not None]

    @property
    def text(self) -> str:
        """Concatenation of all text parts."""
        return "".join(part.text for part in self.parts if part.text)


@dataclass
class Response:
    """
    Unit returned to callers of the orchestrator.

    ``error`` set means a fallback or partial failure occurred; ``text`` is
    still populated with a best-effort answer.
    """

    text: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the answer came from the model without falling back."""
        return self.error is None

    def model_dump(self) -> dict[str, Any]:
        """Convert to dict format (for JSON serialization)."""
        result: dict[str, Any] = {"text": self.text}
        if self.error is not None:
            result["error"] = self.error
        return result
