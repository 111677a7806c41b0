"""Tool use for CodeSense.

The model may ask for repository files mid-conversation:
- FileContentTool declares the tool and fetches bounded file content
- ToolInvocationResolver turns tool_call parts into one tool_result part
- truncate() bounds retrieved text
"""

from codesense.tools.base import Tool
from codesense.tools.file_content import (
    FILE_CONTENT_TOOL_NAME,
    ContentFetcher,
    FileContentTool,
    missing_file_placeholder,
)
from codesense.tools.models import FetchStatus, ToolOutcome, ToolParameter, ToolRequest
from codesense.tools.resolver import ToolInvocationResolver
from codesense.tools.truncation import TRUNCATION_MARKER, truncate

__all__ = [
    "Tool",
    "FileContentTool",
    "FILE_CONTENT_TOOL_NAME",
    "ContentFetcher",
    "missing_file_placeholder",
    "FetchStatus",
    "ToolOutcome",
    "ToolParameter",
    "ToolRequest",
    "ToolInvocationResolver",
    "TRUNCATION_MARKER",
    "truncate",
]
