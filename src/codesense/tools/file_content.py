"""
File content tool.

Lets the model read up to a fixed number of repository files per tool round.
Content comes from an injected fetcher so the tool stays independent of the
data source.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from codesense.tools.base import Tool
from codesense.tools.models import FetchStatus, ToolOutcome, ToolParameter
from codesense.tools.truncation import truncate

logger = logging.getLogger(__name__)

FILE_CONTENT_TOOL_NAME = "get_file_content"

# (owner, repo, path) -> content, or None when not found / too large / failed
ContentFetcher = Callable[[str, str, str], Awaitable[str | None]]


def missing_file_placeholder(path: str) -> str:
    """Content reported to the model for a path that could not be fetched."""
    return f"// File not found or error fetching: {path}"


class FileContentTool(Tool):
    """Fetch the content of specific files from the repository."""

    def __init__(
        self,
        fetcher: ContentFetcher | None = None,
        max_files: int = 3,
        max_content_length: int = 25000,
        fetch_timeout: float = 20.0,
    ):
        """Initialize the file content tool.

        Args:
            fetcher: Async data source for file content
            max_files: Maximum paths fetched per call (K)
            max_content_length: Maximum characters kept per file (M)
            fetch_timeout: Deadline per fetch in seconds
        """
        self.fetcher = fetcher
        self.max_files = max_files
        self.max_content_length = max_content_length
        self.fetch_timeout = fetch_timeout
        super().__init__()

    @property
    def name(self) -> str:
        """Tool name."""
        return FILE_CONTENT_TOOL_NAME

    @property
    def description(self) -> str:
        """Tool description."""
        return (
            f"Get the content of up to {self.max_files} specific files from the repository. "
            "Use this to examine key source code files if the metadata and current context "
            "are insufficient. Provide a list of file paths."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [
            ToolParameter(
                name="filePaths",
                type="array",
                description=(
                    f"An array of up to {self.max_files} full paths to the files in the "
                    'repository (e.g., ["src/main.js", "README.md"]). Choose files that are '
                    "most relevant to the user's query or for understanding the project."
                ),
                required=True,
                items={"type": "string"},
            ),
        ]

    def clamp_paths(self, arguments: dict[str, Any]) -> list[str]:
        """Return the paths that will be fetched for a call's arguments.

        Anything past the first ``max_files`` entries is dropped silently.
        """
        paths = arguments.get("filePaths")
        if not isinstance(paths, list):
            return []
        return [str(path) for path in paths[: self.max_files]]

    async def execute(self, owner: str, repo: str, **kwargs: Any) -> list[ToolOutcome]:
        """Fetch the requested files concurrently.

        All fetches complete before this returns. Failures become outcomes,
        never exceptions.
        """
        if self.fetcher is None:
            raise RuntimeError("FileContentTool has no fetcher configured")

        paths = self.clamp_paths(kwargs)
        if not paths:
            return []

        return list(
            await asyncio.gather(*[self._fetch_one(owner, repo, path) for path in paths])
        )

    async def _fetch_one(self, owner: str, repo: str, path: str) -> ToolOutcome:
        try:
            content = await asyncio.wait_for(
                self.fetcher(owner, repo, path),
                timeout=self.fetch_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Fetching {owner}/{repo}:{path} timed out after {self.fetch_timeout}s")
            return ToolOutcome(
                path=path, content=missing_file_placeholder(path), status=FetchStatus.ERROR
            )
        except FileNotFoundError:
            logger.warning(f"File not found: {owner}/{repo}:{path}")
            return ToolOutcome(
                path=path, content=missing_file_placeholder(path), status=FetchStatus.NOT_FOUND
            )
        except Exception as e:
            logger.warning(f"Fetching {owner}/{repo}:{path} failed: {e}")
            return ToolOutcome(
                path=path, content=missing_file_placeholder(path), status=FetchStatus.ERROR
            )

        if content is None:
            logger.warning(f"No content returned for {owner}/{repo}:{path}")
            return ToolOutcome(
                path=path, content=missing_file_placeholder(path), status=FetchStatus.ERROR
            )

        return ToolOutcome(
            path=path,
            content=truncate(content, self.max_content_length),
            status=FetchStatus.SUCCESS,
        )
