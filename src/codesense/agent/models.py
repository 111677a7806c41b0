"""Data models for the conversation driver."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from codesense.providers.exceptions import ProviderError
from codesense.providers.models import Message


class DriverState(str, Enum):
    """States of one exchange."""

    INITIAL = "initial"  # Conversation built, first call pending
    AWAITING_TOOL = "awaiting_tool"  # Model asked for files
    FINAL = "final"  # Answer extracted
    FAILED = "failed"  # Terminal failure, fallback applies


TERMINAL_STATES = frozenset({DriverState.FINAL, DriverState.FAILED})

# Legal transitions; a second AWAITING_TOOL is never reachable
TRANSITIONS: dict[DriverState, frozenset[DriverState]] = {
    DriverState.INITIAL: frozenset(
        {DriverState.AWAITING_TOOL, DriverState.FINAL, DriverState.FAILED}
    ),
    DriverState.AWAITING_TOOL: frozenset({DriverState.FINAL, DriverState.FAILED}),
    DriverState.FINAL: frozenset(),
    DriverState.FAILED: frozenset(),
}


class DriverConfig(BaseModel):
    """Configuration for one exchange."""

    backend_timeout: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Deadline per model call in seconds",
    )


@dataclass
class ExchangeResult:
    """Result of driving one exchange."""

    state: DriverState
    text: str
    conversation: list[Message]
    states: list[DriverState] = field(default_factory=list)
    backend_calls: int = 0
    error: Optional[ProviderError] = None

    @property
    def success(self) -> bool:
        """Whether the exchange ended in FINAL."""
        return self.state == DriverState.FINAL

    @property
    def used_tools(self) -> bool:
        """Whether a tool round happened."""
        return DriverState.AWAITING_TOOL in self.states
