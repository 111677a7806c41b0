"""Data models for the tool system."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ToolParameter(BaseModel):
    """Defines a parameter for a tool."""

    name: str
    type: str  # "string", "integer", "boolean", "array", "object"
    description: str
    required: bool = True
    items: Optional[dict[str, Any]] = None  # Element schema for arrays


class FetchStatus(str, Enum):
    """Outcome of fetching one path during a tool round."""

    SUCCESS = "success"
    NOT_FOUND = "not-found"
    ERROR = "error"


class ToolRequest(BaseModel):
    """A recognised tool call, clamped to the paths that will be fetched."""

    name: str
    paths: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name}({', '.join(self.paths)})"


class ToolOutcome(BaseModel):
    """Result of resolving a single path."""

    path: str
    content: str
    status: FetchStatus

    def to_payload(self) -> dict[str, Any]:
        """Entry for the tool_result payload sent to the model."""
        return {
            "filePath": self.path,
            "content": self.content,
            "status": self.status.value,
        }

    def __str__(self) -> str:
        """String representation."""
        return f"{self.path}: {self.status.value} ({len(self.content)} chars)"
