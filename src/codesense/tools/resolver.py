"""Tool invocation resolver.

Turns the tool_call parts of a model message into the single tool_result
part answering them.
"""

import asyncio
import logging
from typing import Any

from codesense.providers.models import Part
from codesense.tools.file_content import FileContentTool
from codesense.tools.models import ToolOutcome, ToolRequest

logger = logging.getLogger(__name__)


class ToolInvocationResolver:
    """Resolves file content requests made by the model.

    Calls naming any tool other than the file content tool are ignored. Every
    outcome of every recognised call is aggregated into one tool_result part
    keyed by the tool name, since the backend expects a single response part
    per tool name per turn.
    """

    def __init__(self, tool: FileContentTool):
        """Initialize the resolver.

        Args:
            tool: File content tool holding the fetcher and the K/M bounds
        """
        self.tool = tool

    def to_requests(self, tool_calls: list[Part]) -> list[ToolRequest]:
        """Filter tool_call parts to recognised, clamped requests."""
        requests = []
        for part in tool_calls:
            call = part.tool_call
            if call is None:
                continue
            if call.name != self.tool.name:
                logger.warning(f"Ignoring call to unknown tool: {call.name}")
                continue

            paths = self.tool.clamp_paths(call.arguments)
            requested = call.arguments.get("filePaths")
            if isinstance(requested, list) and len(requested) > len(paths):
                logger.info(
                    f"Clamped {len(requested)} requested paths to {len(paths)}: {paths}"
                )
            requests.append(ToolRequest(name=call.name, paths=paths))

        return requests

    async def resolve_outcomes(
        self,
        requests: list[ToolRequest],
        owner: str,
        repo: str,
    ) -> list[ToolOutcome]:
        """Fetch every request's paths; all fetches complete before returning."""
        batches = await asyncio.gather(
            *[self.tool.execute(owner, repo, filePaths=request.paths) for request in requests]
        )
        return [outcome for batch in batches for outcome in batch]

    def to_result_part(self, outcomes: list[ToolOutcome]) -> Part:
        """Package outcomes as the tool_result part for the model."""
        payload: dict[str, Any] = {
            "name": self.tool.name,
            "content": {"results": [outcome.to_payload() for outcome in outcomes]},
        }
        return Part.from_tool_result(name=self.tool.name, payload=payload)

    async def resolve(self, tool_calls: list[Part], owner: str, repo: str) -> Part | None:
        """Resolve tool calls into a single tool_result part.

        Args:
            tool_calls: tool_call parts from one model message
            owner: Repository owner
            repo: Repository name

        Returns:
            The aggregated tool_result part, or None when no call names the
            file content tool.
        """
        requests = self.to_requests(tool_calls)
        if not requests:
            return None

        outcomes = await self.resolve_outcomes(requests, owner, repo)
        logger.info(
            f"Resolved {len(outcomes)} path(s) for {len(requests)} call(s): "
            + ", ".join(str(outcome) for outcome in outcomes)
        )
        return self.to_result_part(outcomes)
