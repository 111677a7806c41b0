"""Base classes for tool implementation."""

from abc import ABC, abstractmethod
from typing import Any

from codesense.tools.models import ToolOutcome, ToolParameter


class Tool(ABC):
    """Base class for tools the model may call.

    Each tool defines:
    - Name and description (for the model to understand when to use it)
    - Input parameters (JSON schema)
    - Execution logic
    """

    def __init__(self):
        """Initialize the tool."""
        self._validate_definition()

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name (must be unique)."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what the tool does (for the model)."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """List of tool parameters."""
        pass

    def get_input_schema(self) -> dict[str, Any]:
        """Get JSON schema for tool input.

        Returns:
            JSON schema describing tool parameters
        """
        properties = {}
        required = []

        for param in self.parameters:
            param_schema: dict[str, Any] = {
                "type": param.type,
                "description": param.description,
            }

            if param.items:
                param_schema["items"] = param.items

            properties[param.name] = param_schema

            if param.required:
                required.append(param.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required,
        }

    def get_tool_definition(self) -> dict[str, Any]:
        """Get complete tool definition for the model backend.

        Returns:
            Tool definition in OpenAI function format
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.get_input_schema(),
            },
        }

    @abstractmethod
    async def execute(self, owner: str, repo: str, **kwargs: Any) -> list[ToolOutcome]:
        """Execute the tool against a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            **kwargs: Tool parameters as sent by the model

        Returns:
            One outcome per resolved input
        """
        pass

    def _validate_definition(self) -> None:
        """Validate tool definition is correct.

        Raises:
            ValueError: If tool definition is invalid
        """
        if not self.name:
            raise ValueError("Tool name cannot be empty")

        if not self.description:
            raise ValueError("Tool description cannot be empty")

        param_names = [p.name for p in self.parameters]
        if len(param_names) != len(set(param_names)):
            raise ValueError("Parameter names must be unique")

    def __str__(self) -> str:
        """String representation."""
        return f"Tool({self.name})"

    def __repr__(self) -> str:
        """Representation."""
        return f"<Tool name={self.name}>"
